"""Tokenizer for the restricted math-markup subset.

Identifiers are single letters: ``mv`` is two tokens, ``m`` and ``v``. Longer
names are macros (``\\rho``, ``\\omega``) and come out as one ``COMMAND``
token including the backslash. Every token records its ``[start, end)``
offsets into the source text.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, List

GROUPING_MACROS: FrozenSet[str] = frozenset({"\\left", "\\right"})
MULTIPLICATION_MACROS: FrozenSet[str] = frozenset({"\\cdot", "\\times"})

OPERATOR_CHARS = "=+-*/^(){}"
_DIGITS = "0123456789."


class TokenKind(str, Enum):
    IDENTIFIER = "identifier"
    COMMAND = "command"
    NUMBER = "number"
    OPERATOR = "operator"
    SUBSCRIPT = "subscript"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    start: int
    end: int

    def is_op(self, value: str) -> bool:
        return self.kind is TokenKind.OPERATOR and self.text == value


def _is_letter(char: str) -> bool:
    return ("a" <= char <= "z") or ("A" <= char <= "Z")


def tokenize(text: str | None) -> List[Token]:
    """Split ``text`` into tokens.

    ``\\left`` and ``\\right`` are dropped, ``\\cdot`` and ``\\times`` become the
    ``*`` operator, and characters outside the grammar (including a backslash
    not followed by letters) are skipped.
    """

    source = text or ""
    tokens: List[Token] = []
    i = 0
    length = len(source)

    while i < length:
        char = source[i]

        if char.isspace():
            i += 1
            continue

        if char == "\\":
            j = i + 1
            while j < length and _is_letter(source[j]):
                j += 1
            if j > i + 1:
                name = source[i:j]
                if name in MULTIPLICATION_MACROS:
                    tokens.append(Token(TokenKind.OPERATOR, "*", i, j))
                elif name not in GROUPING_MACROS:
                    tokens.append(Token(TokenKind.COMMAND, name, i, j))
            i = max(j, i + 1)
            continue

        if char in _DIGITS:
            j = i
            while j < length and source[j] in _DIGITS:
                j += 1
            tokens.append(Token(TokenKind.NUMBER, source[i:j], i, j))
            i = j
            continue

        if _is_letter(char):
            tokens.append(Token(TokenKind.IDENTIFIER, char, i, i + 1))
        elif char in OPERATOR_CHARS:
            tokens.append(Token(TokenKind.OPERATOR, char, i, i + 1))
        elif char == "_":
            tokens.append(Token(TokenKind.SUBSCRIPT, char, i, i + 1))
        i += 1

    return tokens


__all__ = [
    "GROUPING_MACROS",
    "MULTIPLICATION_MACROS",
    "OPERATOR_CHARS",
    "Token",
    "TokenKind",
    "tokenize",
]
