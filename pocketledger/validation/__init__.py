"""Validation package."""

from pocketledger.validation.validator import (
    EntryValidator,
    InvalidEntryError,
    LedgerError,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    "EntryValidator",
    "InvalidEntryError",
    "LedgerError",
    "ValidationIssue",
    "ValidationResult",
]
