"""
Storage Services Package

Provides the abstract key-value interface, its local implementations and
the repository that maps ledger records onto it.
"""

from pocketledger.services.storage.interface import (
    ConnectionError,
    KeyValueStore,
    NotFoundError,
    StorageError,
)
from pocketledger.services.storage.kv_store import InMemoryStore, JsonFileStore
from pocketledger.services.storage.repository import (
    CURRENCY_KEY,
    DAILY_LIMIT_KEY,
    SHORTCUTS_KEY,
    TRANSACTIONS_KEY,
    LedgerRepository,
)

__all__ = [
    # Interface
    "KeyValueStore",
    # Exceptions
    "ConnectionError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "InMemoryStore",
    "JsonFileStore",
    "LedgerRepository",
    # Keys
    "CURRENCY_KEY",
    "DAILY_LIMIT_KEY",
    "SHORTCUTS_KEY",
    "TRANSACTIONS_KEY",
]
