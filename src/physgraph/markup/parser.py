"""Infer the dimension of a markup expression by recursive descent.

Grammar::

    expr    := ['+'|'-'] term (('+'|'-') term)*
    term    := factor (('*'|'/') factor | factor)*
    factor  := primary ('^' exponent)?
    primary := '(' expr ')'
             | '\\frac' '{' expr '}' '{' expr '}'
             | (command | letter) ['_' (group | token)]
             | number
             | '{' expr '}'

Brace groups and fraction operands are parsed as independent sub-ranges of
the same token list, each with its own completion check. Every public entry
point returns a :class:`~physgraph.core.types.ParseOutcome`; nothing raises.
"""

from __future__ import annotations

import logging
from typing import List, Mapping, Optional, Sequence, Tuple

from physgraph.config import MAX_DEPTH_CEILING, max_nesting_depth
from physgraph.core.dimensions import (
    DIMENSIONLESS,
    Dimension,
    DimensionalError,
    divide,
    equals,
    multiply,
    power,
    to_canonical_string,
)
from physgraph.core.types import FailureReason, ParseFailure, ParseOutcome, Parsed
from physgraph.markup.tokenizer import Token, TokenKind, tokenize

logger = logging.getLogger(__name__)


UNSUPPORTED_MACROS: Tuple[str, ...] = (
    "\\partial",
    "\\nabla",
    "\\int",
    "\\sum",
    "\\sin",
    "\\cos",
    "\\tan",
    "\\log",
    "\\ln",
    "\\exp",
)

# Layout macros that wrap a symbol rather than name one.
LAYOUT_MACROS = frozenset(
    {"\\sqrt", "\\vec", "\\hat", "\\bar", "\\dot", "\\ddot", "\\mathrm", "\\mathbf"}
)

FRACTION = "\\frac"


class MarkupParseError(ValueError):
    """Raised inside the descent; converted to a :class:`ParseFailure` at the boundary."""

    def __init__(self, reason: FailureReason, message: str, position: int | None = None) -> None:
        super().__init__(message)
        self.failure = ParseFailure(reason, message, position)


def find_unsupported(text: str) -> Optional[Tuple[str, int]]:
    """Return the earliest denylisted macro in ``text`` and its offset."""

    hits = [(text.find(macro), macro) for macro in UNSUPPORTED_MACROS if macro in text]
    if not hits:
        return None
    position, macro = min(hits)
    return macro, position


def _unsupported(macro: str, position: int) -> MarkupParseError:
    return MarkupParseError(
        FailureReason.UNSUPPORTED_CONSTRUCT,
        f"unsupported operator {macro} (derivatives, integrals, sums and "
        "transcendental functions are not checked)",
        position,
    )


def _is_signed_number(tokens: Sequence[Token]) -> bool:
    """True for a lone number token, optionally preceded by one '+' or '-'."""

    if len(tokens) == 2 and (tokens[0].is_op("+") or tokens[0].is_op("-")):
        tokens = tokens[1:]
    return len(tokens) == 1 and tokens[0].kind is TokenKind.NUMBER


class _Descent:
    """Parser state over the half-open token range ``[index, end)``."""

    def __init__(
        self,
        parser: "MarkupParser",
        tokens: Sequence[Token],
        start: int,
        end: int,
        depth: int,
        end_position: int,
    ) -> None:
        self.parser = parser
        self.tokens = tokens
        self.index = start
        self.end = end
        self.depth = depth
        self.end_position = end_position

    # -- Token helpers ----------------------------------------------------
    def peek(self) -> Token | None:
        if self.index >= self.end:
            return None
        return self.tokens[self.index]

    def at_op(self, *values: str) -> bool:
        token = self.peek()
        return token is not None and token.kind is TokenKind.OPERATOR and token.text in values

    def position(self) -> int:
        token = self.peek()
        return token.start if token is not None else self.end_position

    def matching_brace(self, open_index: int) -> int:
        depth = 0
        for idx in range(open_index, self.end):
            token = self.tokens[idx]
            if token.is_op("{"):
                depth += 1
            elif token.is_op("}"):
                depth -= 1
                if depth == 0:
                    return idx
        raise MarkupParseError(
            FailureReason.SYNTAX, "unbalanced braces", self.tokens[open_index].start
        )

    def nested(self) -> None:
        if self.depth >= self.parser.max_depth:
            raise MarkupParseError(
                FailureReason.TOO_DEEPLY_NESTED,
                f"expression nested more than {self.parser.max_depth} levels deep",
                self.position(),
            )

    def group(self, open_index: int) -> Dimension:
        """Parse the brace group opening at ``open_index`` and move past it."""

        close = self.matching_brace(open_index)
        self.nested()
        dim = self.parser._parse_range(
            self.tokens, open_index + 1, close, self.depth + 1, self.tokens[close].start
        )
        self.index = close + 1
        return dim

    # -- Grammar ----------------------------------------------------------
    def parse(self) -> Dimension:
        if self.index >= self.end:
            raise MarkupParseError(FailureReason.EMPTY, "empty expression", self.end_position)
        for token in self.tokens[self.index : self.end]:
            if token.kind is TokenKind.COMMAND:
                for macro in UNSUPPORTED_MACROS:
                    if token.text.startswith(macro):
                        raise _unsupported(macro, token.start)
        dim = self.expr()
        token = self.peek()
        if token is not None:
            raise MarkupParseError(
                FailureReason.TRAILING_INPUT,
                f"trailing tokens starting at '{token.text}' (unsupported structure)",
                token.start,
            )
        return dim

    def expr(self) -> Dimension:
        if self.at_op("+", "-"):
            self.index += 1
        dim = self.term()
        while self.at_op("+", "-"):
            operator = self.tokens[self.index]
            self.index += 1
            rhs = self.term()
            if not equals(dim, rhs):
                raise MarkupParseError(
                    FailureReason.DIMENSION_MISMATCH,
                    f"cannot {'add' if operator.text == '+' else 'subtract'} "
                    f"{to_canonical_string(rhs)} {'to' if operator.text == '+' else 'from'} "
                    f"{to_canonical_string(dim)}",
                    operator.start,
                )
        return dim

    def starts_factor(self) -> bool:
        token = self.peek()
        if token is None:
            return False
        if token.kind is TokenKind.OPERATOR:
            return token.text in ("(", "{")
        return token.kind in (TokenKind.COMMAND, TokenKind.IDENTIFIER, TokenKind.NUMBER)

    def combine(self, operation, lhs: Dimension, rhs: Dimension, position: int) -> Dimension:
        try:
            return operation(lhs, rhs)
        except DimensionalError:
            raise MarkupParseError(
                FailureReason.MALFORMED_EXPONENT, "dimension exponent overflows", position
            ) from None

    def term(self) -> Dimension:
        dim = self.factor()
        while True:
            position = self.position()
            if self.at_op("*"):
                self.index += 1
                dim = self.combine(multiply, dim, self.factor(), position)
            elif self.at_op("/"):
                self.index += 1
                dim = self.combine(divide, dim, self.factor(), position)
            elif self.starts_factor():
                dim = self.combine(multiply, dim, self.factor(), position)
            else:
                return dim

    def factor(self) -> Dimension:
        dim = self.primary()
        if not self.at_op("^"):
            return dim
        caret = self.tokens[self.index]
        self.index += 1
        exponent = self.exponent(caret)
        raised = power(dim, exponent)
        if raised is None:
            raise MarkupParseError(
                FailureReason.MALFORMED_EXPONENT, "exponent must be a finite number", caret.start
            )
        return raised

    def exponent(self, caret: Token) -> float:
        token = self.peek()
        if token is not None and token.kind is TokenKind.NUMBER:
            self.index += 1
            raw = token.text
        elif token is not None and token.is_op("{"):
            close = self.matching_brace(self.index)
            content = self.tokens[self.index + 1 : close]
            raw = "".join(t.text for t in content)
            self.index = close + 1
            if not _is_signed_number(content):
                raise MarkupParseError(
                    FailureReason.MALFORMED_EXPONENT,
                    f"exponent '{raw}' is not a number",
                    caret.start,
                )
        else:
            raise MarkupParseError(
                FailureReason.MALFORMED_EXPONENT,
                "only numeric exponents are supported",
                token.start if token is not None else caret.start,
            )
        try:
            return float(raw)
        except ValueError:
            raise MarkupParseError(
                FailureReason.MALFORMED_EXPONENT,
                f"exponent '{raw}' is not a number",
                caret.start,
            ) from None

    def skip_subscript(self) -> None:
        token = self.peek()
        if token is None or token.kind is not TokenKind.SUBSCRIPT:
            return
        self.index += 1
        payload = self.peek()
        if payload is None:
            raise MarkupParseError(FailureReason.SYNTAX, "subscript without content", token.start)
        if payload.is_op("{"):
            self.index = self.matching_brace(self.index) + 1
        else:
            self.index += 1

    def primary(self) -> Dimension:
        token = self.peek()
        if token is None:
            raise MarkupParseError(
                FailureReason.SYNTAX, "unexpected end of expression", self.end_position
            )

        if token.is_op("("):
            self.nested()
            self.index += 1
            self.depth += 1
            dim = self.expr()
            self.depth -= 1
            if not self.at_op(")"):
                raise MarkupParseError(
                    FailureReason.SYNTAX, "missing closing parenthesis", self.position()
                )
            self.index += 1
            return dim

        if token.kind is TokenKind.COMMAND and token.text == FRACTION:
            self.index += 1
            if not self.at_op("{"):
                raise MarkupParseError(
                    FailureReason.SYNTAX, "\\frac expects two brace groups", token.start
                )
            numerator = self.group(self.index)
            if not self.at_op("{"):
                raise MarkupParseError(
                    FailureReason.SYNTAX, "\\frac expects two brace groups", token.start
                )
            denominator = self.group(self.index)
            return self.combine(divide, numerator, denominator, token.start)

        if token.kind in (TokenKind.COMMAND, TokenKind.IDENTIFIER):
            self.index += 1
            self.skip_subscript()
            dim = self.parser.variables.get(token.text)
            if dim is not None:
                return dim
            if token.text in LAYOUT_MACROS:
                raise MarkupParseError(
                    FailureReason.UNSUPPORTED_CONSTRUCT,
                    f"unsupported macro {token.text}",
                    token.start,
                )
            raise MarkupParseError(
                FailureReason.UNRESOLVED_SYMBOL,
                f"no units declared for symbol '{token.text}'",
                token.start,
            )

        if token.kind is TokenKind.NUMBER:
            self.index += 1
            return DIMENSIONLESS

        if token.is_op("{"):
            return self.group(self.index)

        raise MarkupParseError(FailureReason.SYNTAX, f"unexpected '{token.text}'", token.start)


class MarkupParser:
    """Dimension inference over markup expressions for one variable map."""

    def __init__(
        self,
        variables: Mapping[str, Dimension],
        *,
        max_depth: int | None = None,
    ) -> None:
        self.variables = variables
        depth = max_depth if max_depth is not None else max_nesting_depth()
        self.max_depth = min(max(1, depth), MAX_DEPTH_CEILING)

    def _parse_range(
        self,
        tokens: Sequence[Token],
        start: int,
        end: int,
        depth: int,
        end_position: int,
    ) -> Dimension:
        return _Descent(self, tokens, start, end, depth, end_position).parse()

    def parse_tokens(self, tokens: Sequence[Token], end_position: int | None = None) -> ParseOutcome:
        """Infer the dimension of an already tokenized expression."""

        if end_position is None:
            end_position = tokens[-1].end if tokens else 0
        try:
            return Parsed(self._parse_range(tokens, 0, len(tokens), 0, end_position))
        except MarkupParseError as exc:
            return exc.failure

    def parse(self, text: str | None) -> ParseOutcome:
        """Infer the dimension of ``text``."""

        source = text or ""
        if not source.strip():
            return ParseFailure(FailureReason.EMPTY, "empty expression", 0)

        hit = find_unsupported(source)
        if hit is not None:
            return _unsupported(*hit).failure

        tokens: List[Token] = tokenize(source)
        outcome = self.parse_tokens(tokens, len(source))
        if isinstance(outcome, ParseFailure):
            logger.debug("Markup %r: %s (%s)", source, outcome.message, outcome.reason.value)
        return outcome


def dimension_of(
    text: str | None,
    variables: Mapping[str, Dimension],
    *,
    max_depth: int | None = None,
) -> ParseOutcome:
    """Convenience wrapper around :meth:`MarkupParser.parse`."""

    return MarkupParser(variables, max_depth=max_depth).parse(text)


__all__ = [
    "UNSUPPORTED_MACROS",
    "LAYOUT_MACROS",
    "MarkupParseError",
    "MarkupParser",
    "dimension_of",
    "find_unsupported",
]
