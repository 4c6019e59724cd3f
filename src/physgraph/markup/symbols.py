"""Symbol extraction and a symbol -> equations usage index."""

from __future__ import annotations

from typing import Dict, Iterable, List

from physgraph.core.types import EquationSpec
from physgraph.markup.tokenizer import TokenKind, tokenize

NON_SYMBOL_MACROS = frozenset(
    {
        "\\frac",
        "\\sqrt",
        "\\nabla",
        "\\partial",
        "\\sin",
        "\\cos",
        "\\tan",
        "\\log",
        "\\ln",
        "\\exp",
        "\\sum",
        "\\int",
        "\\mathrm",
        "\\mathbf",
        "\\vec",
        "\\hat",
        "\\bar",
        "\\dot",
        "\\ddot",
    }
)


def extract_symbols(text: str | None) -> List[str]:
    """Return the symbols named in ``text`` in order of first appearance.

    Subscript payloads are part of the symbol they decorate and are not
    reported on their own.
    """

    tokens = tokenize(text)
    seen: Dict[str, None] = {}
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token.kind is TokenKind.SUBSCRIPT:
            i += 1
            if i < len(tokens) and tokens[i].is_op("{"):
                depth = 0
                while i < len(tokens):
                    if tokens[i].is_op("{"):
                        depth += 1
                    elif tokens[i].is_op("}"):
                        depth -= 1
                        if depth == 0:
                            break
                    i += 1
            i += 1
            continue
        if token.kind in (TokenKind.IDENTIFIER, TokenKind.COMMAND):
            if token.text not in NON_SYMBOL_MACROS:
                seen.setdefault(token.text, None)
        i += 1
    return list(seen)


def build_usage_index(equations: Iterable[EquationSpec]) -> Dict[str, List[str]]:
    """Map each symbol to the ids of the equations that mention it."""

    usage: Dict[str, List[str]] = {}
    for equation in equations:
        for symbol in extract_symbols(equation.text):
            usage.setdefault(symbol, []).append(equation.id)
    return usage


__all__ = ["NON_SYMBOL_MACROS", "extract_symbols", "build_usage_index"]
