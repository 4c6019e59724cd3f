"""Dimensional consistency check for ``lhs = rhs`` markup equations."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, Iterable, Mapping, Tuple

from physgraph.core.dimensions import Dimension, equals, to_canonical_string
from physgraph.core.types import (
    CheckStatus,
    EquationCheck,
    EquationSpec,
    FailureReason,
    ParseFailure,
)
from physgraph.markup.parser import MarkupParser
from physgraph.observability import log_event

logger = logging.getLogger(__name__)


def _split_sides(text: str) -> Tuple[str, int, str, int] | None:
    """Split on the single ``=``; return each trimmed side with its offset."""

    if text.count("=") != 1:
        return None
    idx = text.index("=")
    left, right = text[:idx], text[idx + 1 :]
    lhs_offset = len(left) - len(left.lstrip())
    rhs_offset = idx + 1 + len(right) - len(right.lstrip())
    return left.strip(), lhs_offset, right.strip(), rhs_offset


def _unknown(failure: ParseFailure, offset: int) -> EquationCheck:
    return EquationCheck(
        status=CheckStatus.UNKNOWN,
        message=f"unit check: {failure.message}",
        reason=failure.reason,
        position=None if failure.position is None else failure.position + offset,
    )


class EquationChecker:
    """Classify equations as ``good``, ``bad`` or ``unknown`` for one variable map.

    The checker keeps no state between calls beyond the map it was built
    with, so it is safe to call on every edit.
    """

    def __init__(self, variables: Mapping[str, Dimension], *, max_depth: int | None = None) -> None:
        self.variables = variables
        self.parser = MarkupParser(variables, max_depth=max_depth)

    def check(self, text: str | None) -> EquationCheck:
        source = text or ""
        sides = _split_sides(source)
        if sides is None:
            return EquationCheck(
                status=CheckStatus.UNKNOWN,
                message="unit check: expected a single '=' in equation",
                reason=FailureReason.STRUCTURAL,
            )

        lhs_text, lhs_offset, rhs_text, rhs_offset = sides
        lhs = self.parser.parse(lhs_text)
        if isinstance(lhs, ParseFailure):
            return _unknown(lhs, lhs_offset)
        rhs = self.parser.parse(rhs_text)
        if isinstance(rhs, ParseFailure):
            return _unknown(rhs, rhs_offset)

        if equals(lhs.dimension, rhs.dimension):
            return EquationCheck(
                status=CheckStatus.GOOD,
                message=f"units ok: {to_canonical_string(lhs.dimension)}",
                lhs=lhs.dimension,
                rhs=rhs.dimension,
            )
        return EquationCheck(
            status=CheckStatus.BAD,
            message=(
                f"unit mismatch: LHS {to_canonical_string(lhs.dimension)} "
                f"vs RHS {to_canonical_string(rhs.dimension)}"
            ),
            reason=FailureReason.DIMENSION_MISMATCH,
            lhs=lhs.dimension,
            rhs=rhs.dimension,
        )

    def check_all(self, equations: Iterable[EquationSpec]) -> Dict[str, EquationCheck]:
        """Check each equation, keyed by equation id in input order.

        Raises ``ValueError`` when two equations share an id.
        """

        results: Dict[str, EquationCheck] = {}
        for equation in equations:
            if equation.id in results:
                raise ValueError(f"duplicate equation id '{equation.id}'")
            results[equation.id] = self.check(equation.text)
        tally = Counter(result.status.value for result in results.values())
        log_event(
            "dimcheck.batch",
            equations=len(results),
            good=tally.get("good", 0),
            bad=tally.get("bad", 0),
            unknown=tally.get("unknown", 0),
        )
        return results


def check_equation(
    text: str | None,
    variables: Mapping[str, Dimension],
    *,
    max_depth: int | None = None,
) -> EquationCheck:
    """Check a single equation against ``variables``."""

    result = EquationChecker(variables, max_depth=max_depth).check(text)
    logger.debug("Checked %r -> %s", text, result.status.value)
    return result


__all__ = ["EquationChecker", "check_equation"]
