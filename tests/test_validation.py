"""Tests for entry validation."""

import pytest
from decimal import Decimal

from pocketledger.validation import EntryValidator, InvalidEntryError


@pytest.fixture
def validator():
    return EntryValidator()


class TestValidateAmount:
    """Tests for transaction amounts."""

    @pytest.mark.parametrize("raw, expected", [
        (35000, Decimal("35000")),
        ("35000", Decimal("35000")),
        (" 12.5 ", Decimal("12.5")),
        (Decimal("1"), Decimal("1")),
    ])
    def test_valid(self, validator, raw, expected):
        """Test accepted inputs and their parsed value."""
        result = validator.validate_amount(raw)
        assert result.is_valid
        assert result.value == expected

    @pytest.mark.parametrize("raw, issue_type", [
        (0, "not_positive"),
        (-5, "not_positive"),
        ("abc", "not_a_number"),
        ("", "not_a_number"),
        (None, "not_a_number"),
        ("Infinity", "not_a_number"),
        (True, "not_a_number"),
    ])
    def test_invalid(self, validator, raw, issue_type):
        """Test rejected inputs."""
        result = validator.validate_amount(raw)
        assert not result.is_valid
        assert result.first_error.issue_type == issue_type
        assert result.value is None

    def test_require_raises(self, validator):
        """Test the raising variant."""
        with pytest.raises(InvalidEntryError) as exc_info:
            validator.require_amount(0)
        assert exc_info.value.field == "amount"


class TestValidateDailyLimit:
    """Tests for the daily food limit."""

    def test_zero_is_valid(self, validator):
        """Test that 0 means unset and is accepted."""
        assert validator.require_daily_limit("0") == 0

    def test_numeric_string(self, validator):
        """Test numeric strings from a text field."""
        assert validator.require_daily_limit("100000") == Decimal("100000")

    @pytest.mark.parametrize("raw", ["-1", -1, "abc", "NaN", None])
    def test_rejected(self, validator, raw):
        """Test negative and non-numeric limits."""
        with pytest.raises(InvalidEntryError):
            validator.require_daily_limit(raw)


class TestValidateShortcut:
    """Tests for shortcut templates."""

    def test_valid(self, validator):
        """Test a complete shortcut."""
        result = validator.validate_shortcut("Gửi xe", "5000", "expense")
        assert result.is_valid
        assert result.value == Decimal("5000")

    def test_reports_every_issue(self, validator):
        """Test that all problems are listed at once."""
        result = validator.validate_shortcut("  ", 0, "gift")
        assert [i.field for i in result.errors] == ["name", "amount", "type"]

    def test_require_uses_first_error(self, validator):
        """Test the raising variant."""
        with pytest.raises(InvalidEntryError, match="name is required"):
            validator.require_shortcut("", 5000)
