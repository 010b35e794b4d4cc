"""
Derived View Models

Read-only results produced by the aggregator. Nothing here is persisted;
every view is recomputed from the authoritative transaction list.
"""

from datetime import date
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pocketledger.models.transaction import Transaction


ZERO = Decimal("0")


class TimeFilter(str, Enum):
    """Period selector for the dashboard."""
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"
    CUSTOM = "custom"


class DateRange(BaseModel):
    """Inclusive calendar range for the custom filter."""
    model_config = ConfigDict(frozen=True)

    start: date
    end: date

    @model_validator(mode='after')
    def validate_order(self) -> 'DateRange':
        if self.end < self.start:
            raise ValueError("Range end cannot be before start")
        return self


class Totals(BaseModel):
    """Income, expense and their difference."""
    model_config = ConfigDict(frozen=True)

    income: Decimal = ZERO
    expense: Decimal = ZERO
    balance: Decimal = ZERO


class CategoryShare(BaseModel):
    """One slice of the expense breakdown."""
    model_config = ConfigDict(frozen=True)

    category_id: str
    name: str
    color: str
    total: Decimal
    share: Decimal = Field(
        ...,
        ge=0,
        le=1,
        description="Fraction of total expense (0-1)"
    )


class DailyFoodStats(BaseModel):
    """Today's food spending against the daily limit."""
    model_config = ConfigDict(frozen=True)

    spent_today: Decimal = ZERO
    remaining: Decimal = ZERO
    percentage: Decimal = Field(
        default=ZERO,
        ge=0,
        le=100,
        description="Spent as a percentage of the limit, capped at 100"
    )


class DailyFoodGroup(BaseModel):
    """Food expenses of one calendar day."""
    model_config = ConfigDict(frozen=True)

    day: date
    items: tuple[Transaction, ...]
    total_spent: Decimal
    savings: Decimal


class CumulativeFoodStats(BaseModel):
    """
    Savings projection over the days the user actually recorded food.

    Days without any food entry are NOT counted.
    """
    model_config = ConfigDict(frozen=True)

    days_count: int = 0
    total_spent: Decimal = ZERO
    total_expected_budget: Decimal = ZERO
    total_saved: Decimal = ZERO


class TodayActivity(BaseModel):
    """Has anything been recorded today?"""
    model_config = ConfigDict(frozen=True)

    count: int = 0

    @property
    def has_data(self) -> bool:
        return self.count > 0


class BudgetBand(str, Enum):
    """Coarse state of today's spending."""
    OK = "ok"
    WARNING = "warning"
    EXCEEDED = "exceeded"
