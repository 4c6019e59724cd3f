"""Parsing helpers for user-entered variable declarations."""

from .units_text import UnitsTextResult, parse_units_text

__all__ = ["UnitsTextResult", "parse_units_text"]
