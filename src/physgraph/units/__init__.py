"""Unit table and unit expression parsing."""

from .algebra import (
    BASE_SYMBOLS,
    UNIT_DEFS,
    UnitParseError,
    format_units,
    lookup_unit,
    normalize_unit_text,
    parse_unit_expr,
)

__all__ = [
    "BASE_SYMBOLS",
    "UNIT_DEFS",
    "UnitParseError",
    "format_units",
    "lookup_unit",
    "normalize_unit_text",
    "parse_unit_expr",
]
