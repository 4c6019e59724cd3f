"""Static unit table and the compact unit expression parser."""

from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

from physgraph.core.dimensions import (
    DIMENSIONLESS,
    Dimension,
    DimensionalError,
    divide,
    equals,
    multiply,
    power,
)
from physgraph.core.types import FailureReason, ParseFailure, ParseOutcome, Parsed

logger = logging.getLogger(__name__)


UNIT_DEFS: Mapping[str, Dimension] = MappingProxyType(
    {
        "1": DIMENSIONLESS,
        "m": Dimension.of(L=1),
        "s": Dimension.of(T=1),
        "kg": Dimension.of(M=1),
        "K": Dimension.of(Th=1),
        "A": Dimension.of(I=1),
        "mol": Dimension.of(N=1),
        "cd": Dimension.of(J=1),
        # Derived SI
        "N": Dimension.of(M=1, L=1, T=-2),
        "J": Dimension.of(M=1, L=2, T=-2),
        "W": Dimension.of(M=1, L=2, T=-3),
        "Pa": Dimension.of(M=1, L=-1, T=-2),
    }
)

BASE_SYMBOLS: Tuple[Tuple[str, str], ...] = (
    ("M", "kg"),
    ("L", "m"),
    ("T", "s"),
    ("Th", "K"),
    ("I", "A"),
    ("N", "mol"),
    ("J", "cd"),
)

MULTIPLICATION_ALIASES: Tuple[str, ...] = ("\\cdot", "\\times", "·", "×")


class UnitParseError(ValueError):
    """Raised inside the parser; converted to a :class:`ParseFailure` at the boundary."""

    def __init__(
        self,
        reason: FailureReason,
        message: str,
        text: str,
        position: int | None = None,
    ) -> None:
        pointer = ""
        if position is not None and 0 <= position <= len(text):
            pointer = f"\n{text}\n{' ' * position}^"
        super().__init__(f"{message}{pointer}")
        self.failure = ParseFailure(reason, message, position)
        self.text = text


_Token = Tuple[str, str, int]

_TOKEN_RE = re.compile(
    r"""
    (?P<lpar>\()
    |(?P<rpar>\))
    |(?P<op>[*/])
    |(?P<pow>\^)
    |(?P<sign>[+-])
    |(?P<num>[0-9.]+)
    |(?P<sym>[A-Za-z]+)
    """,
    re.VERBOSE,
)

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_unit_text(text: str) -> str:
    """Apply the alias, whitespace and brace rewrites to a raw unit string."""

    for alias in MULTIPLICATION_ALIASES:
        text = text.replace(alias, "*")
    text = _WHITESPACE_RE.sub("", text)
    return text.replace("{", "(").replace("}", ")")


def _tokenize(text: str) -> List[_Token]:
    tokens: List[_Token] = []
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if not match:
            raise UnitParseError(
                FailureReason.SYNTAX,
                f"Unexpected character '{text[pos]}' in unit expression",
                text,
                pos,
            )
        tokens.append((match.lastgroup or "", match.group(0), match.start()))
        pos = match.end()
    return tokens


class _TokenStream:
    def __init__(self, tokens: List[_Token], original: str) -> None:
        self.tokens = tokens
        self.original = original
        self.index = 0

    def peek(self) -> _Token | None:
        if self.index >= len(self.tokens):
            return None
        return self.tokens[self.index]

    def pop(self) -> _Token:
        token = self.peek()
        if token is None:
            raise UnitParseError(
                FailureReason.SYNTAX,
                "Unexpected end of unit expression",
                self.original,
                len(self.original),
            )
        self.index += 1
        return token

    def at(self, kind: str, value: str | None = None) -> bool:
        token = self.peek()
        if token is None or token[0] != kind:
            return False
        return value is None or token[1] == value


def _parse_expr(stream: _TokenStream) -> Dimension:
    return _parse_term(stream)


def _parse_term(stream: _TokenStream) -> Dimension:
    dim = _parse_factor(stream)
    while stream.at("op"):
        _, value, start = stream.pop()
        rhs = _parse_factor(stream)
        try:
            dim = multiply(dim, rhs) if value == "*" else divide(dim, rhs)
        except DimensionalError:
            raise UnitParseError(
                FailureReason.MALFORMED_EXPONENT,
                "Dimension exponent overflows",
                stream.original,
                start,
            ) from None
    return dim


def _parse_exponent(stream: _TokenStream) -> float:
    token = stream.peek()
    if token is None or token[0] != "num":
        position = token[2] if token else len(stream.original)
        raise UnitParseError(
            FailureReason.MALFORMED_EXPONENT,
            "Expected a numeric exponent after '^'",
            stream.original,
            position,
        )
    stream.pop()
    try:
        return float(token[1])
    except ValueError:
        raise UnitParseError(
            FailureReason.MALFORMED_EXPONENT,
            f"Invalid exponent '{token[1]}'",
            stream.original,
            token[2],
        ) from None


def _parse_factor(stream: _TokenStream) -> Dimension:
    dim = _parse_primary(stream)
    if stream.at("pow"):
        stream.pop()
        start = stream.peek()
        raised = power(dim, _parse_exponent(stream))
        if raised is None:
            raise UnitParseError(
                FailureReason.MALFORMED_EXPONENT,
                "Exponent must be finite",
                stream.original,
                start[2] if start else None,
            )
        dim = raised
    return dim


def _parse_primary(stream: _TokenStream) -> Dimension:
    kind, value, start = stream.pop()
    if kind == "lpar":
        inner = _parse_expr(stream)
        if not stream.at("rpar"):
            token = stream.peek()
            raise UnitParseError(
                FailureReason.SYNTAX,
                "Missing closing parenthesis",
                stream.original,
                token[2] if token else len(stream.original),
            )
        stream.pop()
        return inner
    if kind == "sym":
        if value not in UNIT_DEFS:
            raise UnitParseError(
                FailureReason.UNKNOWN_UNIT,
                f"Unknown unit symbol '{value}'",
                stream.original,
                start,
            )
        return UNIT_DEFS[value]
    if kind == "num" and value == "1":
        return DIMENSIONLESS
    raise UnitParseError(
        FailureReason.SYNTAX,
        f"Unexpected token '{value}'",
        stream.original,
        start,
    )


def parse_unit_expr(text: str | None) -> ParseOutcome:
    """Parse ``text`` into a dimension vector.

    Never raises: failures come back as :class:`ParseFailure` whose position
    indexes the normalized string (see :func:`normalize_unit_text`).
    """

    normalized = normalize_unit_text(text or "")
    if not normalized:
        return ParseFailure(FailureReason.EMPTY, "Unit expression is empty", 0)

    try:
        stream = _TokenStream(_tokenize(normalized), normalized)
        dim = _parse_expr(stream)
        token = stream.peek()
        if token is not None:
            raise UnitParseError(
                FailureReason.TRAILING_INPUT,
                f"Unexpected trailing input '{normalized[token[2]:]}'",
                normalized,
                token[2],
            )
    except UnitParseError as exc:
        logger.debug("Unit expression %r rejected: %s", text, exc)
        return exc.failure
    return Parsed(dim)


def lookup_unit(symbol: str) -> Optional[Dimension]:
    return UNIT_DEFS.get(symbol)


def format_units(dimension: Dimension) -> str:
    """Human readable SI unit string for ``dimension``.

    Named units from :data:`UNIT_DEFS` are preferred; otherwise the result is
    built from base units, e.g. ``kg*m^3/s^2``.
    """

    for symbol, candidate in UNIT_DEFS.items():
        if len(candidate.items) > 1 and equals(candidate, dimension):
            return symbol

    numerator: List[str] = []
    denominator: List[str] = []
    for key, symbol in BASE_SYMBOLS:
        exponent = dimension.exponent(key)
        if exponent == 0:
            continue
        target = numerator if exponent > 0 else denominator
        magnitude = abs(exponent)
        formatted = str(int(magnitude)) if magnitude.is_integer() else repr(magnitude)
        target.append(symbol if formatted == "1" else f"{symbol}^{formatted}")

    unit_str = "*".join(numerator) if numerator else "1"
    if denominator:
        unit_str = f"{unit_str}/" + "*".join(denominator)
    return unit_str


__all__ = [
    "UNIT_DEFS",
    "BASE_SYMBOLS",
    "MULTIPLICATION_ALIASES",
    "UnitParseError",
    "normalize_unit_text",
    "parse_unit_expr",
    "lookup_unit",
    "format_units",
]
