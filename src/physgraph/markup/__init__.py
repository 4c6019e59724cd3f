"""Restricted math-markup tokenizer, dimension parser and symbol helpers."""

from .parser import LAYOUT_MACROS, UNSUPPORTED_MACROS, MarkupParser, dimension_of
from .symbols import build_usage_index, extract_symbols
from .tokenizer import Token, TokenKind, tokenize

__all__ = [
    "LAYOUT_MACROS",
    "UNSUPPORTED_MACROS",
    "MarkupParser",
    "dimension_of",
    "build_usage_index",
    "extract_symbols",
    "Token",
    "TokenKind",
    "tokenize",
]
