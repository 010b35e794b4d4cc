"""Quick-entry parsing package."""

from pocketledger.parsing.line_parser import (
    DEFAULT_SEPARATOR,
    LineParser,
    parse_amount,
)

__all__ = ["DEFAULT_SEPARATOR", "LineParser", "parse_amount"]
