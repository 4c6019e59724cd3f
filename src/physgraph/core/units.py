"""Build the per-session variable dimension map and report unit diagnostics."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Tuple

from physgraph.core.dimensions import Dimension
from physgraph.core.types import FailureReason, ParseFailure, VariableSpec
from physgraph.units.algebra import parse_unit_expr

logger = logging.getLogger(__name__)

VariableDimensionMap = Mapping[str, Dimension]

_HINTS: Dict[FailureReason, str] = {
    FailureReason.EMPTY: "Provide a unit for this symbol, or 1 if it is dimensionless.",
    FailureReason.UNKNOWN_UNIT: "Use one of: 1, m, s, kg, K, A, mol, cd, N, J, W, Pa.",
    FailureReason.MALFORMED_EXPONENT: "Exponents must be unsigned numbers; write 1/s^2 rather than s^-2.",
}


@dataclass(slots=True)
class UnitDiagnostic:
    """Structured diagnostic returned when a variable's unit cannot be parsed."""

    symbol: str
    code: str
    message: str
    hint: str | None = None


def _as_spec(variable: VariableSpec | Tuple[str, str]) -> VariableSpec:
    if isinstance(variable, VariableSpec):
        return variable
    symbol, unit_text = variable
    return VariableSpec(symbol=symbol, unit_text=unit_text)


def analyze_variables(
    variables: Iterable[VariableSpec | Tuple[str, str]],
) -> Tuple[VariableDimensionMap, List[UnitDiagnostic]]:
    """Parse every variable's unit text, returning the map and diagnostics.

    Variables whose units fail to parse are left out of the map; a later
    declaration of the same symbol replaces an earlier one.
    """

    dims: Dict[str, Dimension] = {}
    diagnostics: List[UnitDiagnostic] = []

    for variable in variables:
        spec = _as_spec(variable)
        outcome = parse_unit_expr(spec.unit_text)
        if isinstance(outcome, ParseFailure):
            logger.debug(
                "Omitting variable %r: %s (%s)", spec.symbol, outcome.message, outcome.reason.value
            )
            diagnostics.append(
                UnitDiagnostic(
                    symbol=spec.symbol,
                    code=outcome.reason.value,
                    message=outcome.message,
                    hint=_HINTS.get(
                        outcome.reason,
                        "Check for typos or mismatched parentheses in the unit expression.",
                    ),
                )
            )
            continue
        dims[spec.symbol] = outcome.dimension

    return MappingProxyType(dims), diagnostics


def build_variable_map(
    variables: Iterable[VariableSpec | Tuple[str, str]],
) -> VariableDimensionMap:
    """Return a read-only ``symbol -> Dimension`` mapping for ``variables``."""

    mapping, _ = analyze_variables(variables)
    return mapping


__all__ = [
    "VariableDimensionMap",
    "UnitDiagnostic",
    "analyze_variables",
    "build_variable_map",
]
