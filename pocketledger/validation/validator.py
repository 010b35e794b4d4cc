"""
Entry Validation

DESIGN DECISION: User input is checked BEFORE anything touches the
ledger. Validation returns a structured result (a list of issues), so a
form can show every problem at once; the require_* helpers turn the
first error into an InvalidEntryError for callers that just want to stop.

IMPORTANT: Validation NEVER silently fixes issues.
A rejected daily limit keeps the previous value; it is not clamped to 0.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from pydantic import BaseModel, Field

from pocketledger.models.transaction import TransactionType


Number = Union[Decimal, int, float, str]

_ZERO = Decimal("0")


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class InvalidEntryError(LedgerError):
    """User input that cannot be recorded."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'not_a_number', 'not_positive')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """
    Outcome of validating one piece of input.

    value carries the parsed, normalized value when the input is valid.
    """

    issues: list[ValidationIssue] = Field(default_factory=list)
    value: Optional[Decimal] = None

    @property
    def is_valid(self) -> bool:
        return not any(issue.severity == "error" for issue in self.issues)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "error"]

    @property
    def first_error(self) -> Optional[ValidationIssue]:
        errors = self.errors
        return errors[0] if errors else None


def _to_decimal(raw: Optional[Number]) -> Optional[Decimal]:
    """Parse numbers and numeric strings; None if not a finite number."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, Decimal):
        value = raw
    else:
        text = str(raw).strip()
        if not text:
            return None
        try:
            value = Decimal(text)
        except InvalidOperation:
            return None
    if not value.is_finite():
        return None
    return value


class EntryValidator:
    """Checks amounts, limits and shortcut templates."""

    def validate_amount(self, raw: Optional[Number], field: str = "amount") -> ValidationResult:
        """A transaction amount must be a finite number greater than zero."""
        value = _to_decimal(raw)
        if value is None:
            return ValidationResult(issues=[ValidationIssue(
                field=field,
                issue_type="not_a_number",
                message=f"Amount must be a number, got {raw!r}",
                severity="error",
            )])
        if value <= 0:
            return ValidationResult(issues=[ValidationIssue(
                field=field,
                issue_type="not_positive",
                message="Amount must be greater than zero",
                severity="error",
            )])
        return ValidationResult(value=value)

    def validate_daily_limit(self, raw: Optional[Number]) -> ValidationResult:
        """
        The daily food limit: a finite number >= 0.

        0 means "no limit set" and is valid.
        """
        value = _to_decimal(raw)
        if value is None:
            return ValidationResult(issues=[ValidationIssue(
                field="daily_limit",
                issue_type="not_a_number",
                message=f"Daily limit must be a number, got {raw!r}",
                severity="error",
            )])
        if value < 0:
            return ValidationResult(issues=[ValidationIssue(
                field="daily_limit",
                issue_type="negative",
                message="Daily limit cannot be negative",
                severity="error",
            )])
        return ValidationResult(value=value)

    def validate_shortcut(
        self,
        name: Optional[str],
        amount: Optional[Number],
        transaction_type: Union[TransactionType, str] = TransactionType.EXPENSE,
    ) -> ValidationResult:
        """A shortcut needs a non-blank name and a positive amount."""
        issues = []

        if not name or not name.strip():
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Shortcut name is required",
                severity="error",
            ))

        amount_result = self.validate_amount(amount)
        issues.extend(amount_result.issues)

        try:
            TransactionType(transaction_type)
        except ValueError:
            issues.append(ValidationIssue(
                field="type",
                issue_type="invalid_value",
                message=f"Unknown transaction type: {transaction_type!r}",
                severity="error",
            ))

        return ValidationResult(issues=issues, value=amount_result.value)

    # ------------------------------------------------------------------
    # Raising variants
    # ------------------------------------------------------------------

    @staticmethod
    def _raise_first(result: ValidationResult) -> Decimal:
        issue = result.first_error
        if issue is not None:
            raise InvalidEntryError(issue.message, field=issue.field)
        return result.value

    def require_amount(self, raw: Optional[Number]) -> Decimal:
        return self._raise_first(self.validate_amount(raw))

    def require_daily_limit(self, raw: Optional[Number]) -> Decimal:
        return self._raise_first(self.validate_daily_limit(raw))

    def require_shortcut(
        self,
        name: Optional[str],
        amount: Optional[Number],
        transaction_type: Union[TransactionType, str] = TransactionType.EXPENSE,
    ) -> Decimal:
        return self._raise_first(self.validate_shortcut(name, amount, transaction_type))
