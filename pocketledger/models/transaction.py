"""
Core Data Models for pocketledger

These models define the schemas for every record the ledger stores.
They are designed to:
1. Enforce the entry invariants at runtime (amount > 0)
2. Be serializable to the key-value store in the same JSON shape the
   browser app wrote (plain numbers, ISO date strings)
3. Stay immutable once created - edits are full substitutions

DESIGN DECISION: Money is Decimal, never float. Sums of many small
amounts must not drift.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Union
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


class Currency(str, Enum):
    """
    Display currency.

    No conversion is ever performed; the code travels with the
    spreadsheet mirror so rows can be read correctly.
    """
    VND = "VND"
    USD = "USD"
    IDR = "IDR"
    KRW = "KRW"


def new_id() -> str:
    """Opaque, never-reused identifier."""
    return uuid4().hex


def serialize_amount(value: Decimal) -> Union[int, float]:
    """Amounts are stored as plain JSON numbers."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


# =============================================================================
# CORE RECORDS
# =============================================================================

class Transaction(BaseModel):
    """
    A single recorded income or expense event.

    CRITICAL: amount is strictly positive. Zero or negative amounts are
    rejected at entry time and never stored.

    The category is NOT validated against the category table - unknown
    ids are tolerated and resolved to "other" when displayed.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(
        default_factory=new_id,
        min_length=1,
        description="Unique transaction ID"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount in the user's currency"
    )
    type: TransactionType
    category: str = Field(
        default="other",
        description="Category id (see pocketledger.models.category)"
    )
    date: datetime = Field(
        default_factory=datetime.now,
        description="When the transaction happened (local time)"
    )
    note: str = Field(
        default="",
        description="Free-text label (no length limit)"
    )

    @field_validator("date")
    @classmethod
    def to_local_naive(cls, v: datetime) -> datetime:
        """Stored ISO strings may carry 'Z'; bucketing works on local days."""
        if v.tzinfo is not None:
            return v.astimezone().replace(tzinfo=None)
        return v

    @field_serializer("amount", when_used="json")
    def dump_amount(self, value: Decimal) -> Union[int, float]:
        return serialize_amount(value)

    @property
    def day(self):
        """Calendar day this transaction is bucketed into."""
        return self.date.date()

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME


class Shortcut(BaseModel):
    """
    Template for quick entry.

    Structurally a Transaction without a date. The name becomes the note
    of every transaction created from it.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(default_factory=new_id, min_length=1)
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Label shown on the shortcut button"
    )
    amount: Decimal = Field(..., gt=0)
    category: str = "other"
    type: TransactionType = TransactionType.EXPENSE

    @field_serializer("amount", when_used="json")
    def dump_amount(self, value: Decimal) -> Union[int, float]:
        return serialize_amount(value)

    def to_transaction(self, now: Optional[datetime] = None) -> Transaction:
        """Instantiate this template as a transaction dated now."""
        return Transaction(
            amount=self.amount,
            type=self.type,
            category=self.category,
            note=self.name,
            date=now or datetime.now(),
        )


def default_shortcuts() -> list[Shortcut]:
    """Shortcuts offered before the user has saved any of their own."""
    return [
        Shortcut(id="1", name="Cafe sáng", amount=Decimal("35000"),
                 category="food", type=TransactionType.EXPENSE),
        Shortcut(id="2", name="Gửi xe", amount=Decimal("5000"),
                 category="transport", type=TransactionType.EXPENSE),
        Shortcut(id="3", name="Nhận lương", amount=Decimal("15000000"),
                 category="salary", type=TransactionType.INCOME),
    ]
