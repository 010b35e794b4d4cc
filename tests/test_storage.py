"""Tests for the key-value stores and the ledger repository."""

import json
import pytest
from datetime import datetime
from decimal import Decimal

from pocketledger.models.transaction import (
    Currency,
    Shortcut,
    Transaction,
    TransactionType,
)
from pocketledger.services.storage import (
    InMemoryStore,
    JsonFileStore,
    LedgerRepository,
    StorageError,
)
from pocketledger.services.storage.repository import (
    CURRENCY_KEY,
    DAILY_LIMIT_KEY,
    SHORTCUTS_KEY,
    TRANSACTIONS_KEY,
)


class TestInMemoryStore:
    """Tests for the in-memory store."""

    def test_get_set_delete(self):
        """Test basic operations."""
        store = InMemoryStore()
        assert store.get("a") is None
        store.set("a", "1")
        assert store.get("a") == "1"
        assert store.keys() == ["a"]
        assert store.delete("a")
        assert not store.delete("a")

    def test_initial_values(self):
        """Test seeding the store."""
        store = InMemoryStore({"currency": "USD"})
        assert store.get("currency") == "USD"


class TestJsonFileStore:
    """Tests for the single-file JSON store."""

    def test_missing_file_is_empty(self, tmp_path):
        """Test first run."""
        store = JsonFileStore(tmp_path / "ledger.json")
        assert store.keys() == []

    def test_persists_across_instances(self, tmp_path):
        """Test that writes survive a reload."""
        path = tmp_path / "nested" / "ledger.json"
        JsonFileStore(path).set("currency", "KRW")
        assert JsonFileStore(path).get("currency") == "KRW"
        assert json.loads(path.read_text(encoding="utf-8")) == {"currency": "KRW"}

    def test_corrupt_file_is_empty(self, tmp_path):
        """Test that an unreadable file does not prevent startup."""
        path = tmp_path / "ledger.json"
        path.write_text("{not json", encoding="utf-8")
        store = JsonFileStore(path)
        assert store.keys() == []
        store.set("currency", "VND")
        assert JsonFileStore(path).get("currency") == "VND"

    def test_no_temp_files_left(self, tmp_path):
        """Test atomic replace cleans up after itself."""
        store = JsonFileStore(tmp_path / "ledger.json")
        store.set("a", "1")
        store.set("b", "2")
        assert [p.name for p in tmp_path.iterdir()] == ["ledger.json"]

    def test_write_failure_raises_storage_error(self, tmp_path):
        """Test that OS errors surface as StorageError."""
        blocker = tmp_path / "file"
        blocker.write_text("x", encoding="utf-8")
        store = JsonFileStore(blocker / "ledger.json")
        with pytest.raises(StorageError):
            store.set("a", "1")


class TestLedgerRepository:
    """Tests for typed load/save."""

    def test_transactions_round_trip(self):
        """Test that saved transactions load back equal."""
        repo = LedgerRepository(InMemoryStore())
        t = Transaction(
            amount=Decimal("35000"),
            type=TransactionType.EXPENSE,
            category="food",
            date=datetime(2024, 5, 15, 8, 30),
            note="Cơm trưa",
        )
        repo.save_transactions([t])
        assert repo.load_transactions() == [t]

    def test_stored_shape(self):
        """Test the JSON shape written to the store."""
        store = InMemoryStore()
        repo = LedgerRepository(store)
        repo.save_transactions([Transaction(
            id="t1",
            amount=Decimal("35000"),
            type=TransactionType.EXPENSE,
            category="food",
            date=datetime(2024, 5, 15, 8, 30),
            note="Cơm",
        )])
        assert json.loads(store.get(TRANSACTIONS_KEY)) == [{
            "id": "t1",
            "amount": 35000,
            "type": "expense",
            "category": "food",
            "date": "2024-05-15T08:30:00",
            "note": "Cơm",
        }]

    def test_loads_browser_format(self):
        """Test records written by the browser app (UTC 'Z' dates)."""
        raw = json.dumps([{
            "id": "1715750000000",
            "amount": 50000,
            "type": "expense",
            "category": "food",
            "date": "2024-05-15T05:00:00.000Z",
            "note": "Phở",
        }])
        repo = LedgerRepository(InMemoryStore({TRANSACTIONS_KEY: raw}))
        [t] = repo.load_transactions()
        assert t.amount == Decimal("50000")
        assert t.date.tzinfo is None

    def test_loads_long_note(self):
        """Test that stored notes of any length survive a reload."""
        raw = json.dumps([{
            "id": "1715750000001",
            "amount": 20000,
            "type": "expense",
            "category": "shopping",
            "date": "2024-05-15T05:00:00.000Z",
            "note": "y" * 600,
        }])
        repo = LedgerRepository(InMemoryStore({TRANSACTIONS_KEY: raw}))
        [t] = repo.load_transactions()
        assert len(t.note) == 600

    def test_absent_or_corrupt_transactions(self):
        """Test tolerant loading."""
        assert LedgerRepository(InMemoryStore()).load_transactions() == []
        corrupt = InMemoryStore({TRANSACTIONS_KEY: "[{oops"})
        assert LedgerRepository(corrupt).load_transactions() == []
        wrong_shape = InMemoryStore({TRANSACTIONS_KEY: '{"a": 1}'})
        assert LedgerRepository(wrong_shape).load_transactions() == []

    def test_malformed_records_skipped(self):
        """Test that one bad record does not drop the rest."""
        raw = json.dumps([
            {"id": "1", "amount": 10, "type": "expense", "date": "2024-05-15T08:00:00"},
            {"id": "2", "amount": -5, "type": "expense", "date": "2024-05-15T08:00:00"},
            {"id": "3", "amount": 10, "type": "gift", "date": "2024-05-15T08:00:00"},
            "garbage",
        ])
        repo = LedgerRepository(InMemoryStore({TRANSACTIONS_KEY: raw}))
        assert [t.id for t in repo.load_transactions()] == ["1"]

    def test_default_shortcuts_when_never_saved(self):
        """Test first-run shortcuts."""
        repo = LedgerRepository(InMemoryStore())
        assert [s.name for s in repo.load_shortcuts()] == ["Cafe sáng", "Gửi xe", "Nhận lương"]

    def test_saved_empty_shortcuts_stay_empty(self):
        """Test that deleting every shortcut is remembered."""
        repo = LedgerRepository(InMemoryStore({SHORTCUTS_KEY: "[]"}))
        assert repo.load_shortcuts() == []

    def test_shortcuts_round_trip(self):
        """Test saving custom shortcuts."""
        repo = LedgerRepository(InMemoryStore())
        shortcut = Shortcut(name="Trà sữa", amount=Decimal("45000"), category="food")
        repo.save_shortcuts([shortcut])
        assert repo.load_shortcuts() == [shortcut]

    @pytest.mark.parametrize("raw, expected", [
        (None, Decimal("0")),
        ("100000", Decimal("100000")),
        ("abc", Decimal("0")),
        ("-5", Decimal("0")),
        ("NaN", Decimal("0")),
    ])
    def test_load_daily_limit(self, raw, expected):
        """Test that absent or invalid limits read as unset."""
        initial = {DAILY_LIMIT_KEY: raw} if raw is not None else {}
        repo = LedgerRepository(InMemoryStore(initial))
        assert repo.load_daily_limit() == expected

    def test_save_daily_limit(self):
        """Test the stored limit is a plain number string."""
        store = InMemoryStore()
        LedgerRepository(store).save_daily_limit(Decimal("100000"))
        assert store.get(DAILY_LIMIT_KEY) == "100000"

    def test_currency(self):
        """Test currency default, round trip and unknown values."""
        store = InMemoryStore()
        repo = LedgerRepository(store)
        assert repo.load_currency() == Currency.VND
        repo.save_currency(Currency.USD)
        assert repo.load_currency() == Currency.USD
        store.set(CURRENCY_KEY, "EUR")
        assert repo.load_currency() == Currency.VND

    def test_clear(self):
        """Test removing a key."""
        store = InMemoryStore({TRANSACTIONS_KEY: "[]"})
        repo = LedgerRepository(store)
        assert repo.clear(TRANSACTIONS_KEY)
        assert store.get(TRANSACTIONS_KEY) is None
