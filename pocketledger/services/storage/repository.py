"""
Ledger Repository

Maps ledger records onto the key-value store. Keys and JSON shapes match
what the browser version of the app wrote, so an exported localStorage
dump loads unchanged.

Loading is tolerant: absent, empty or corrupt storage yields an empty
(or default) value, and individually malformed records are skipped with
a warning rather than failing the whole load.
"""

import json
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable

from pydantic import ValidationError

from pocketledger.audit import get_logger
from pocketledger.models.transaction import (
    Currency,
    Shortcut,
    Transaction,
    default_shortcuts,
    serialize_amount,
)
from pocketledger.services.storage.interface import KeyValueStore


logger = get_logger(__name__)

TRANSACTIONS_KEY = "transactions"
SHORTCUTS_KEY = "shortcuts"
DAILY_LIMIT_KEY = "dailyFoodLimit"
CURRENCY_KEY = "currency"

_ZERO = Decimal("0")


class LedgerRepository:
    """Typed load/save on top of a KeyValueStore."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    @property
    def store(self) -> KeyValueStore:
        return self._store

    def _load_list(self, key: str) -> list[Any]:
        raw = self._store.get(key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.warning("stored_value_unreadable", key=key, error=str(e))
            return []
        if not isinstance(data, list):
            logger.warning("stored_value_not_a_list", key=key)
            return []
        return data

    def _save_list(self, key: str, records: Iterable[Any]) -> None:
        payload = [record.model_dump(mode="json") for record in records]
        self._store.set(key, json.dumps(payload, ensure_ascii=False))

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def load_transactions(self) -> list[Transaction]:
        transactions = []
        for index, record in enumerate(self._load_list(TRANSACTIONS_KEY)):
            try:
                transactions.append(Transaction.model_validate(record))
            except ValidationError as e:
                logger.warning(
                    "transaction_record_skipped",
                    index=index,
                    error_count=e.error_count(),
                )
        return transactions

    def save_transactions(self, transactions: Iterable[Transaction]) -> None:
        self._save_list(TRANSACTIONS_KEY, transactions)

    # ------------------------------------------------------------------
    # Shortcuts
    # ------------------------------------------------------------------

    def load_shortcuts(self) -> list[Shortcut]:
        """Saved shortcuts; the built-in defaults if none were ever saved."""
        if self._store.get(SHORTCUTS_KEY) is None:
            return default_shortcuts()

        shortcuts = []
        for index, record in enumerate(self._load_list(SHORTCUTS_KEY)):
            try:
                shortcuts.append(Shortcut.model_validate(record))
            except ValidationError as e:
                logger.warning(
                    "shortcut_record_skipped",
                    index=index,
                    error_count=e.error_count(),
                )
        return shortcuts

    def save_shortcuts(self, shortcuts: Iterable[Shortcut]) -> None:
        self._save_list(SHORTCUTS_KEY, shortcuts)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def load_daily_limit(self) -> Decimal:
        """Stored daily food limit; 0 (unset) when absent or invalid."""
        raw = self._store.get(DAILY_LIMIT_KEY)
        if not raw:
            return _ZERO
        try:
            value = Decimal(raw.strip())
        except InvalidOperation:
            logger.warning("daily_limit_unreadable", raw=raw)
            return _ZERO
        if not value.is_finite() or value < 0:
            logger.warning("daily_limit_invalid", raw=raw)
            return _ZERO
        return value

    def save_daily_limit(self, limit: Decimal) -> None:
        self._store.set(DAILY_LIMIT_KEY, str(serialize_amount(limit)))

    def load_currency(self) -> Currency:
        raw = self._store.get(CURRENCY_KEY)
        try:
            return Currency(raw) if raw else Currency.VND
        except ValueError:
            logger.warning("currency_unknown", raw=raw)
            return Currency.VND

    def save_currency(self, currency: Currency) -> None:
        self._store.set(CURRENCY_KEY, currency.value)

    def clear(self, key: str) -> bool:
        return self._store.delete(key)
