"""
Tests for pocketledger models

Test strategy:
1. Unit tests for individual components (models, parser, aggregator)
2. Integration tests for the ledger (with in-memory storage)
3. No real API calls in tests (use fakes)
"""

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal

from pocketledger.models.transaction import (
    Currency,
    Shortcut,
    Transaction,
    TransactionType,
    default_shortcuts,
    serialize_amount,
)
from pocketledger.models.category import (
    CATEGORIES,
    CATEGORY_KEYWORDS,
    categories_for,
    default_category,
    get_category,
    is_known_category,
)
from pocketledger.models.entry import ParsedLine
from pocketledger.models.stats import DateRange, TodayActivity
from pocketledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestTransactionModels:
    """Tests for transaction and shortcut models."""

    def test_transaction_creation(self):
        """Test Transaction model creation."""
        t = Transaction(
            amount=Decimal("35000"),
            type=TransactionType.EXPENSE,
            category="food",
            note="Cơm trưa",
        )
        assert t.amount == Decimal("35000")
        assert t.is_expense
        assert not t.is_income
        assert len(t.id) == 32

    def test_ids_are_unique(self):
        """Test that every transaction gets a fresh id."""
        a = Transaction(amount=Decimal("1"), type=TransactionType.EXPENSE)
        b = Transaction(amount=Decimal("1"), type=TransactionType.EXPENSE)
        assert a.id != b.id

    def test_transaction_rejects_zero_amount(self):
        """Test that zero amounts are rejected."""
        with pytest.raises(ValueError):
            Transaction(amount=Decimal("0"), type=TransactionType.EXPENSE)

    def test_transaction_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValueError):
            Transaction(amount=Decimal("-100"), type=TransactionType.EXPENSE)

    def test_transaction_strips_note(self):
        """Test that whitespace is stripped from the note."""
        t = Transaction(amount=Decimal("1"), type=TransactionType.EXPENSE, note="  Phở  ")
        assert t.note == "Phở"

    def test_transaction_is_frozen(self):
        """Test that transactions are replaced, never edited in place."""
        t = Transaction(amount=Decimal("1"), type=TransactionType.EXPENSE)
        with pytest.raises(ValueError):
            t.amount = Decimal("2")

    def test_unknown_category_is_tolerated(self):
        """Test that the category is not checked against the table."""
        t = Transaction(amount=Decimal("1"), type=TransactionType.EXPENSE, category="legacy")
        assert t.category == "legacy"

    def test_aware_date_becomes_local_naive(self):
        """Test that ISO dates with a UTC offset are converted to local time."""
        aware = datetime(2024, 5, 15, 3, 0, tzinfo=timezone.utc)
        t = Transaction(amount=Decimal("1"), type=TransactionType.EXPENSE, date=aware)
        assert t.date.tzinfo is None
        assert t.date == aware.astimezone().replace(tzinfo=None)

    def test_json_dump_uses_plain_numbers(self):
        """Test that amounts are stored as JSON numbers."""
        t = Transaction(
            amount=Decimal("35000"),
            type=TransactionType.EXPENSE,
            date=datetime(2024, 5, 15, 8, 30),
        )
        data = t.model_dump(mode="json")
        assert data["amount"] == 35000
        assert data["type"] == "expense"
        assert data["date"] == "2024-05-15T08:30:00"

    def test_serialize_amount(self):
        """Test integral amounts become ints and others floats."""
        assert serialize_amount(Decimal("15000000")) == 15000000
        assert isinstance(serialize_amount(Decimal("10.00")), int)
        assert serialize_amount(Decimal("1.5")) == 1.5

    def test_shortcut_to_transaction(self):
        """Test instantiating a shortcut as a transaction."""
        shortcut = Shortcut(name="Gửi xe", amount=Decimal("5000"), category="transport")
        now = datetime(2024, 5, 15, 7, 45)
        t = shortcut.to_transaction(now)
        assert t.note == "Gửi xe"
        assert t.amount == Decimal("5000")
        assert t.category == "transport"
        assert t.type == TransactionType.EXPENSE
        assert t.date == now
        assert t.id != shortcut.id

    def test_shortcut_requires_name(self):
        """Test that a blank shortcut name is rejected."""
        with pytest.raises(ValueError):
            Shortcut(name="   ", amount=Decimal("5000"))

    def test_default_shortcuts(self):
        """Test the shortcuts offered on first run."""
        shortcuts = default_shortcuts()
        assert [s.name for s in shortcuts] == ["Cafe sáng", "Gửi xe", "Nhận lương"]
        assert shortcuts[2].type == TransactionType.INCOME
        assert shortcuts[2].amount == Decimal("15000000")

    def test_currency_default_values(self):
        """Test supported currency codes."""
        assert [c.value for c in Currency] == ["VND", "USD", "IDR", "KRW"]


class TestCategoryTable:
    """Tests for the category and keyword tables."""

    def test_unknown_category_resolves_to_other(self):
        """Test that lookup is total."""
        assert get_category("does-not-exist").id == "other"
        assert get_category("food").name == "Ăn uống"

    def test_table_has_twelve_categories(self):
        """Test the fixed category table."""
        assert len(CATEGORIES) == 12
        assert is_known_category("investment")
        assert not is_known_category("legacy")

    def test_categories_for_income(self):
        """Test that income offers income categories plus 'other'."""
        ids = [c.id for c in categories_for(TransactionType.INCOME)]
        assert ids == ["salary", "bonus", "investment", "other"]

    def test_categories_for_expense(self):
        """Test that expense categories keep table order."""
        ids = [c.id for c in categories_for(TransactionType.EXPENSE)]
        assert ids[0] == "food"
        assert ids[-1] == "other"
        assert "salary" not in ids

    def test_default_category(self):
        """Test defaults per transaction type."""
        assert default_category(TransactionType.EXPENSE) == "food"
        assert default_category(TransactionType.INCOME) == "salary"

    def test_keywords_are_lower_case_expense_categories(self):
        """Test keyword table shape."""
        for category_id, words in CATEGORY_KEYWORDS.items():
            assert get_category(category_id).applies_to(TransactionType.EXPENSE)
            assert all(word == word.lower() for word in words)


class TestEntryModels:
    """Tests for parser output and derived view models."""

    def test_parsed_line_defaults(self):
        """Test the 'no amount yet' sentinel."""
        parsed = ParsedLine()
        assert parsed.amount == 0
        assert not parsed.has_amount

    def test_resolve_category_prefers_inferred(self):
        """Test that an inferred category beats the current selection."""
        parsed = ParsedLine(note="Grab", amount=Decimal("50000"), category="transport")
        assert parsed.resolve_category(TransactionType.EXPENSE, "food") == "transport"

    def test_resolve_category_keeps_selection(self):
        """Test that no inference keeps the caller's selection."""
        parsed = ParsedLine(note="Linh tinh", amount=Decimal("50000"))
        assert parsed.resolve_category(TransactionType.EXPENSE, "shopping") == "shopping"
        assert parsed.resolve_category(TransactionType.EXPENSE) == "food"

    def test_resolve_category_income_defaults_to_salary(self):
        """Test income without a selection."""
        parsed = ParsedLine(note="Lương", amount=Decimal("1000000"))
        assert parsed.resolve_category(TransactionType.INCOME) == "salary"
        assert parsed.resolve_category(TransactionType.INCOME, "bonus") == "bonus"

    def test_date_range_rejects_reversed(self):
        """Test that a range cannot end before it starts."""
        with pytest.raises(ValueError):
            DateRange(start=date(2024, 5, 2), end=date(2024, 5, 1))

    def test_single_day_range(self):
        """Test that start == end is allowed."""
        r = DateRange(start=date(2024, 5, 1), end=date(2024, 5, 1))
        assert r.start == r.end

    def test_today_activity(self):
        """Test has_data."""
        assert not TodayActivity().has_data
        assert TodayActivity(count=2).has_data


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            description="Test event",
        )
        assert event.event_type == AuditEventType.TRANSACTION_ADDED
        assert event.severity == AuditSeverity.INFO
        assert event.event_id is not None

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            description="Test event",
            entity_id="abc",
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "transaction_added"
        assert log_dict["entity_id"] == "abc"
        assert "timestamp" in log_dict

    def test_audit_event_builder_transaction_added(self):
        """Test AuditEventBuilder for transaction added."""
        event = AuditEventBuilder.transaction_added(
            transaction_id="t1",
            amount="35000",
            category="food",
            source="quick_entry",
        )
        assert event.event_type == AuditEventType.TRANSACTION_ADDED
        assert event.is_user_action
        assert event.details["source"] == "quick_entry"

    def test_audit_event_builder_limit_rejected(self):
        """Test that rejected limits are warnings."""
        event = AuditEventBuilder.daily_limit_rejected("-5", "negative")
        assert event.severity == AuditSeverity.WARNING
        assert event.error_message == "negative"

    def test_audit_event_builder_external_error(self):
        """Test AuditEventBuilder for external service errors."""
        event = AuditEventBuilder.external_service_error(
            service="google_sheets",
            error_message="timeout",
            details={"transaction_id": "t1"},
        )
        assert event.severity == AuditSeverity.ERROR
        assert event.details == {"service": "google_sheets", "transaction_id": "t1"}
