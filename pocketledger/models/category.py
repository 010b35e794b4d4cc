"""
Category Table

DESIGN DECISION: Categories are a fixed, static enumeration rather than a
runtime string -> component map. Lookup goes through get_category(), which
is TOTAL: any unknown id resolves to the "other" category, so display code
can never hit a missing key.

The keyword table drives quick-entry auto-categorization. It is a plain
ordered substring table, not a classifier: the first category (in table
order) with a keyword contained in the note wins. Keep it that way -
predictable beats clever here.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from pocketledger.models.transaction import TransactionType


class CategoryScope(str, Enum):
    """Which transaction types a category applies to."""
    INCOME = "income"
    EXPENSE = "expense"
    BOTH = "both"


class Category(BaseModel):
    """Display metadata for a category id."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    color: str
    icon: str
    type: CategoryScope

    def applies_to(self, transaction_type: TransactionType) -> bool:
        return self.type == CategoryScope.BOTH or self.type.value == transaction_type.value


OTHER_CATEGORY_ID = "other"
FOOD_CATEGORY_ID = "food"
SALARY_CATEGORY_ID = "salary"

_TABLE = (
    Category(id="food", name="Ăn uống", color="#10b981", icon="Utensils", type=CategoryScope.EXPENSE),
    Category(id="transport", name="Di chuyển", color="#f59e0b", icon="Car", type=CategoryScope.EXPENSE),
    Category(id="laundry", name="Giặt ủi", color="#06b6d4", icon="Shirt", type=CategoryScope.EXPENSE),
    Category(id="beauty", name="Làm đẹp", color="#f472b6", icon="Sparkles", type=CategoryScope.EXPENSE),
    Category(id="services", name="Dịch vụ", color="#8b5cf6", icon="Wifi", type=CategoryScope.EXPENSE),
    Category(id="housing", name="Nhà cửa", color="#0ea5e9", icon="Home", type=CategoryScope.EXPENSE),
    Category(id="shopping", name="Mua sắm", color="#6366f1", icon="ShoppingBag", type=CategoryScope.EXPENSE),
    Category(id="entertainment", name="Giải trí", color="#ec4899", icon="Gamepad2", type=CategoryScope.EXPENSE),
    Category(id="salary", name="Tiền lương", color="#14b8a6", icon="Banknote", type=CategoryScope.INCOME),
    Category(id="bonus", name="Thưởng", color="#f59e0b", icon="Sparkles", type=CategoryScope.INCOME),
    Category(id="investment", name="Đầu tư", color="#8b5cf6", icon="TrendingUp", type=CategoryScope.INCOME),
    Category(id="other", name="Khác", color="#64748b", icon="MoreHorizontal", type=CategoryScope.BOTH),
)

CATEGORIES: dict[str, Category] = {cat.id: cat for cat in _TABLE}


# Order matters: first match wins. Keywords are lower-case; notes are
# lower-cased before matching.
CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "food": (
        "ăn sáng", "ăn trưa", "ăn tối", "ăn vặt", "cơm", "phở", "bún", "cháo",
        "bánh", "nhà hàng", "cafe", "cà phê", "coffee", "trà sữa", "nước ngọt",
        "lunch", "dinner", "breakfast", "food", "snack",
    ),
    "transport": (
        "xăng", "grab", "taxi", "gửi xe", "sửa xe", "rửa xe", "xe ôm", "bus",
        "vé xe", "vé tàu", "vé máy bay", "parking",
    ),
    "laundry": ("giặt", "ủi", "laundry"),
    "beauty": ("cắt tóc", "gội đầu", "nail", "spa", "mỹ phẩm", "son môi"),
    "services": (
        "điện", "wifi", "internet", "mạng", "điện thoại", "4g", "netflix",
        "spotify",
    ),
    "housing": ("nhà", "tiền phòng", "thuê", "rent"),
    "shopping": ("mua", "quần", "áo", "giày", "shopee", "lazada", "tiki", "shop"),
    "entertainment": ("phim", "game", "karaoke", "du lịch", "movie", "nhậu"),
}


def get_category(category_id: str) -> Category:
    """Resolve a category id; unknown ids resolve to "other"."""
    return CATEGORIES.get(category_id, CATEGORIES[OTHER_CATEGORY_ID])


def is_known_category(category_id: str) -> bool:
    return category_id in CATEGORIES


def categories_for(transaction_type: TransactionType) -> list[Category]:
    """Categories selectable for a transaction type, in table order."""
    return [cat for cat in _TABLE if cat.applies_to(transaction_type)]


def default_category(transaction_type: TransactionType) -> str:
    """Category pre-selected when the entry form switches type."""
    if transaction_type == TransactionType.INCOME:
        return SALARY_CATEGORY_ID
    return FOOD_CATEGORY_ID
