"""
Aggregation Engine

DESIGN DECISION: Every view is recomputed from the authoritative
transaction list on demand. There is no cached or incrementally patched
aggregate anywhere, so a view can never go stale. O(n) per call is fine
for a personal ledger.

All functions here are pure:
- They never mutate their input (filters return new lists)
- They never raise for empty lists, zero limits or zero totals
- Every division is guarded

"now"/"today" are parameters so callers (and tests) control the clock.
"""

from collections import OrderedDict
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Sequence, Union

from pocketledger.models.category import FOOD_CATEGORY_ID, get_category
from pocketledger.models.stats import (
    BudgetBand,
    CategoryShare,
    CumulativeFoodStats,
    DailyFoodGroup,
    DailyFoodStats,
    DateRange,
    TimeFilter,
    TodayActivity,
    Totals,
)
from pocketledger.models.transaction import Transaction


Number = Union[Decimal, int, float, str]

ZERO = Decimal("0")
HUNDRED = Decimal("100")

WARNING_THRESHOLD = Decimal("75")

SUNDAY = 6


def _as_decimal(value: Optional[Number]) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _sum(amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, ZERO)


def _food_expenses(transactions: Iterable[Transaction]) -> list[Transaction]:
    return [
        t for t in transactions
        if t.is_expense and t.category == FOOD_CATEGORY_ID
    ]


# =============================================================================
# TOTALS & BREAKDOWN
# =============================================================================

def totals(transactions: Sequence[Transaction]) -> Totals:
    """Income, expense and balance (income - expense)."""
    income = _sum(t.amount for t in transactions if t.is_income)
    expense = _sum(t.amount for t in transactions if t.is_expense)
    return Totals(income=income, expense=expense, balance=income - expense)


def category_breakdown(transactions: Sequence[Transaction]) -> list[CategoryShare]:
    """
    Expense totals per category, largest first.

    Categories summing to exactly zero are dropped. Ties keep the order in
    which the category first appeared in the input.
    """
    sums: "OrderedDict[str, Decimal]" = OrderedDict()
    for t in transactions:
        if t.is_expense:
            sums[t.category] = sums.get(t.category, ZERO) + t.amount

    total_expense = _sum(sums.values())

    rows = [(category_id, total) for category_id, total in sums.items() if total != 0]
    # sort() is stable, so equal totals stay in first-seen order
    rows.sort(key=lambda row: row[1], reverse=True)

    result = []
    for category_id, total in rows:
        category = get_category(category_id)
        share = total / total_expense if total_expense else ZERO
        result.append(CategoryShare(
            category_id=category_id,
            name=category.name,
            color=category.color,
            total=total,
            share=share,
        ))
    return result


# =============================================================================
# TIME FILTERS
# =============================================================================

def week_bounds(now: datetime, week_start: int = SUNDAY) -> tuple[datetime, datetime]:
    """[start, end) of the calendar week containing now."""
    today = now.date()
    offset = (today.weekday() - week_start) % 7
    start = datetime.combine(today - timedelta(days=offset), time.min)
    return start, start + timedelta(days=7)


def filter_by_period(
    transactions: Sequence[Transaction],
    kind: Union[TimeFilter, str],
    date_range: Optional[DateRange] = None,
    now: Optional[datetime] = None,
    week_start: int = SUNDAY,
) -> list[Transaction]:
    """
    Keep the transactions inside the selected period.

    A pure predicate over Transaction.date: input order is preserved.
    A custom filter without a range keeps everything.
    """
    kind = TimeFilter(kind)
    now = now or datetime.now()

    if kind == TimeFilter.ALL:
        return list(transactions)

    if kind == TimeFilter.WEEK:
        start, end = week_bounds(now, week_start)
        return [t for t in transactions if start <= t.date < end]

    if kind == TimeFilter.MONTH:
        return [
            t for t in transactions
            if t.date.year == now.year and t.date.month == now.month
        ]

    if kind == TimeFilter.YEAR:
        return [t for t in transactions if t.date.year == now.year]

    # Custom range
    if date_range is None:
        return list(transactions)
    start = datetime.combine(date_range.start, time.min)
    end = datetime.combine(date_range.end, time.max)
    return [t for t in transactions if start <= t.date <= end]


# =============================================================================
# DAILY FOOD BUDGET
# =============================================================================

def daily_food_stats(
    transactions: Sequence[Transaction],
    limit: Number,
    today: Optional[date] = None,
) -> DailyFoodStats:
    """
    Today's food spending against the daily limit.

    percentage is exact below 100 and capped at 100; 0 when no limit is set.
    """
    limit = _as_decimal(limit)
    today = today or date.today()

    spent = _sum(t.amount for t in _food_expenses(transactions) if t.day == today)

    if limit > 0:
        percentage = min(spent / limit * HUNDRED, HUNDRED)
    else:
        percentage = ZERO

    return DailyFoodStats(
        spent_today=spent,
        remaining=limit - spent,
        percentage=percentage,
    )


def daily_food_history(
    transactions: Sequence[Transaction],
    limit: Number,
) -> list[DailyFoodGroup]:
    """Food expenses grouped per day, most recent day first."""
    limit = _as_decimal(limit)

    groups: dict[date, list[Transaction]] = {}
    newest_first = sorted(_food_expenses(transactions), key=lambda t: t.date, reverse=True)
    for t in newest_first:
        groups.setdefault(t.day, []).append(t)

    history = []
    for day in sorted(groups, reverse=True):
        items = groups[day]
        spent = _sum(t.amount for t in items)
        history.append(DailyFoodGroup(
            day=day,
            items=tuple(items),
            total_spent=spent,
            savings=limit - spent,
        ))
    return history


def cumulative_food_stats(
    transactions: Sequence[Transaction],
    limit: Number,
) -> CumulativeFoodStats:
    """
    Savings projection over recorded days.

    Only days with at least one food expense count toward the expected
    budget. Past days are measured against the CURRENT limit.
    """
    limit = _as_decimal(limit)
    food = _food_expenses(transactions)

    days_count = len({t.day for t in food})
    total_spent = _sum(t.amount for t in food)
    expected = limit * days_count

    return CumulativeFoodStats(
        days_count=days_count,
        total_spent=total_spent,
        total_expected_budget=expected,
        total_saved=expected - total_spent,
    )


def today_activity(
    transactions: Sequence[Transaction],
    today: Optional[date] = None,
) -> TodayActivity:
    """How many transactions were recorded today (any type)."""
    today = today or date.today()
    return TodayActivity(count=sum(1 for t in transactions if t.day == today))


def budget_band(percentage: Number) -> BudgetBand:
    """Map a daily-limit percentage onto ok / warning / exceeded."""
    percentage = _as_decimal(percentage)
    if percentage >= HUNDRED:
        return BudgetBand.EXCEEDED
    if percentage > WARNING_THRESHOLD:
        return BudgetBand.WARNING
    return BudgetBand.OK
