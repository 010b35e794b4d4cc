"""
Data Models Package

This package contains all Pydantic models used by pocketledger.
All data flowing through the ledger must conform to these schemas.
"""

from pocketledger.models.transaction import (
    Currency,
    Shortcut,
    Transaction,
    TransactionType,
    default_shortcuts,
)
from pocketledger.models.category import (
    CATEGORIES,
    CATEGORY_KEYWORDS,
    Category,
    CategoryScope,
    categories_for,
    default_category,
    get_category,
)
from pocketledger.models.entry import ParsedLine
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
from pocketledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Records
    "Currency",
    "Shortcut",
    "Transaction",
    "TransactionType",
    "default_shortcuts",
    # Categories
    "CATEGORIES",
    "CATEGORY_KEYWORDS",
    "Category",
    "CategoryScope",
    "categories_for",
    "default_category",
    "get_category",
    # Entry
    "ParsedLine",
    # Derived views
    "BudgetBand",
    "CategoryShare",
    "CumulativeFoodStats",
    "DailyFoodGroup",
    "DailyFoodStats",
    "DateRange",
    "TimeFilter",
    "TodayActivity",
    "Totals",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
