"""
Quick-Entry Line Parser

Turns one line of free text ("Cơm trưa. 35k") into a draft entry:
note, amount and an inferred category.

DESIGN DECISION: The parser runs on every keystroke, so it is forgiving.
Partial or malformed input is NEVER an error - it yields amount 0
("no amount yet") and the caller simply waits for more input.

The note/amount separator is configurable. Two conventions exist in the
wild ("Cơm trưa. 35k" and "Cơm trưa - 35k"); neither is hard-coded.
Splitting always uses the LAST separator so notes may contain it.
"""

import re
import unicodedata
from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional, Sequence

from pocketledger.models.category import CATEGORY_KEYWORDS
from pocketledger.models.entry import ParsedLine
from pocketledger.models.transaction import TransactionType


DEFAULT_SEPARATOR = "."
THOUSANDS_SUFFIX = "k"

# A trailing token only counts as an amount if it looks like one.
_AMOUNT_TOKEN = re.compile(r"^[\d.,]*\d[\d.,]*k?$", re.IGNORECASE)
_NON_DIGITS = re.compile(r"[^0-9]")

_ZERO = Decimal("0")


def _normalize(text: str) -> str:
    # Vietnamese input arrives both composed and decomposed
    return unicodedata.normalize("NFC", text)


def parse_amount(token: str) -> Decimal:
    """
    Normalize an amount token.

    "35k" -> 35000, "1,200" -> 1200, "" / "k" / "abc" -> 0 (not yet known).
    Thousands separators and any other non-digit characters are dropped.
    """
    raw = (token or "").strip().lower()
    multiplier = 1
    if raw.endswith(THOUSANDS_SUFFIX):
        multiplier = 1000
        raw = raw[:-len(THOUSANDS_SUFFIX)]

    digits = _NON_DIGITS.sub("", raw)
    if not digits:
        return _ZERO

    try:
        return Decimal(digits) * multiplier
    except InvalidOperation:
        return _ZERO


class LineParser:
    """
    Splits quick-entry text into note / amount / category.

    Args:
        separator: Character between note and amount.
        keywords: Ordered {category_id: keywords} table for inference.
    """

    def __init__(
        self,
        separator: str = DEFAULT_SEPARATOR,
        keywords: Optional[Mapping[str, Sequence[str]]] = None,
    ):
        if not separator or separator.isspace():
            raise ValueError("Separator must be a non-blank string")
        self._separator = separator
        source = CATEGORY_KEYWORDS if keywords is None else keywords
        self._keywords = [
            (category_id, tuple(_normalize(kw.lower()) for kw in words))
            for category_id, words in source.items()
        ]

    @property
    def separator(self) -> str:
        return self._separator

    def _split(self, line: str) -> tuple[str, Optional[str]]:
        """Return (note, amount_token); token is None when there is none yet."""
        if self._separator in line:
            note, _, token = line.rpartition(self._separator)
            return note.strip(), token

        parts = line.rsplit(None, 1)
        if parts and _AMOUNT_TOKEN.match(parts[-1]):
            note = parts[0] if len(parts) == 2 else ""
            return note.strip(), parts[-1]

        return line, None

    def infer_category(self, note: str) -> Optional[str]:
        """First category (in table order) with a keyword inside the note."""
        lowered = _normalize(note.lower())
        if not lowered:
            return None
        for category_id, words in self._keywords:
            if any(word in lowered for word in words):
                return category_id
        return None

    def parse_line(
        self,
        text: str,
        transaction_type: TransactionType = TransactionType.EXPENSE,
    ) -> ParsedLine:
        """
        Parse one line of quick-entry text.

        Never raises for user input. Income entries skip keyword inference:
        the caller's default (salary) applies.
        """
        line = _normalize(text or "").strip()
        if not line:
            return ParsedLine()

        note, token = self._split(line)
        amount = parse_amount(token) if token is not None else _ZERO

        category = None
        if transaction_type == TransactionType.EXPENSE:
            category = self.infer_category(note)

        return ParsedLine(note=note, amount=amount, category=category)

    def parse_bulk(
        self,
        text: str,
        transaction_type: TransactionType = TransactionType.EXPENSE,
    ) -> list[ParsedLine]:
        """
        Parse a pasted block, one entry per line.

        Lines without a positive amount are skipped silently; one bad
        line never aborts the batch.
        """
        drafts = []
        for line in (text or "").splitlines():
            parsed = self.parse_line(line, transaction_type)
            if parsed.has_amount:
                drafts.append(parsed)
        return drafts
