"""Draft entries produced by the quick-entry parser."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from pocketledger.models.category import default_category
from pocketledger.models.transaction import TransactionType


class ParsedLine(BaseModel):
    """
    Result of parsing one line of quick-entry text.

    amount == 0 is the sentinel for "no amount yet" - the user may still be
    typing. category is None when the caller's current selection should be
    kept.
    """
    model_config = ConfigDict(frozen=True)

    note: str = ""
    amount: Decimal = Field(default=Decimal("0"), ge=0)
    category: Optional[str] = None

    @property
    def has_amount(self) -> bool:
        return self.amount > 0

    def resolve_category(
        self,
        transaction_type: TransactionType,
        current: Optional[str] = None,
    ) -> str:
        """Inferred category, else the caller's selection, else the type default."""
        if transaction_type == TransactionType.INCOME:
            return current or default_category(transaction_type)
        return self.category or current or default_category(transaction_type)
