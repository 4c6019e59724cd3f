"""Core dimensional types shared by the unit and markup parsers."""

from .dimensions import (
    DIMENSIONLESS,
    EPSILON,
    Dimension,
    DimensionalError,
    divide,
    equals,
    multiply,
    power,
    to_canonical_string,
)
from .types import (
    CheckStatus,
    EquationCheck,
    EquationSpec,
    FailureReason,
    ParseFailure,
    ParseOutcome,
    Parsed,
    VariableSpec,
)

__all__ = [
    "DIMENSIONLESS",
    "EPSILON",
    "Dimension",
    "DimensionalError",
    "divide",
    "equals",
    "multiply",
    "power",
    "to_canonical_string",
    "CheckStatus",
    "EquationCheck",
    "EquationSpec",
    "FailureReason",
    "ParseFailure",
    "ParseOutcome",
    "Parsed",
    "VariableSpec",
]
