"""Services package."""

from pocketledger.services.notifications import (
    NotificationDispatcher,
    NotificationSink,
    TransactionAdded,
)
from pocketledger.services.sheets import GoogleSheetsClient, GoogleSheetsSync
from pocketledger.services.storage import (
    ConnectionError,
    InMemoryStore,
    JsonFileStore,
    KeyValueStore,
    LedgerRepository,
    NotFoundError,
    StorageError,
)

__all__ = [
    # Notifications
    "NotificationDispatcher",
    "NotificationSink",
    "TransactionAdded",
    # Spreadsheet mirror
    "GoogleSheetsClient",
    "GoogleSheetsSync",
    # Storage
    "ConnectionError",
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "LedgerRepository",
    "NotFoundError",
    "StorageError",
]
