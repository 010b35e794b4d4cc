"""Derived statistics package."""

from pocketledger.stats.aggregator import (
    budget_band,
    category_breakdown,
    cumulative_food_stats,
    daily_food_history,
    daily_food_stats,
    filter_by_period,
    today_activity,
    totals,
    week_bounds,
)

__all__ = [
    "budget_band",
    "category_breakdown",
    "cumulative_food_stats",
    "daily_food_history",
    "daily_food_stats",
    "filter_by_period",
    "today_activity",
    "totals",
    "week_bounds",
]
