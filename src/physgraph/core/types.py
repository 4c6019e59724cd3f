"""Core type definitions used throughout the project."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .dimensions import Dimension, to_canonical_string


class FailureReason(str, Enum):
    EMPTY = "empty"
    STRUCTURAL = "structural"
    UNSUPPORTED_CONSTRUCT = "unsupported-construct"
    UNRESOLVED_SYMBOL = "unresolved-symbol"
    TRAILING_INPUT = "trailing-input"
    MALFORMED_EXPONENT = "malformed-exponent"
    DIMENSION_MISMATCH = "dimension-mismatch"
    UNKNOWN_UNIT = "unknown-unit"
    SYNTAX = "syntax"
    TOO_DEEPLY_NESTED = "too-deeply-nested"


class CheckStatus(str, Enum):
    GOOD = "good"
    BAD = "bad"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Parsed:
    """Successful parse carrying the inferred dimension."""

    dimension: Dimension

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class ParseFailure:
    """Failed parse with a machine-checkable reason.

    ``position`` is a character offset into the parsed text when the failure
    can be pinned to one.
    """

    reason: FailureReason
    message: str
    position: Optional[int] = None

    @property
    def ok(self) -> bool:
        return False

    def pointer(self, text: str) -> str:
        """Return ``text`` with a caret under :attr:`position`, if known."""
        if self.position is None or not 0 <= self.position <= len(text):
            return text
        return f"{text}\n{' ' * self.position}^"


ParseOutcome = Union[Parsed, ParseFailure]


@dataclass(frozen=True)
class VariableSpec:
    """A declared variable: its markup symbol and unit expression."""

    symbol: str
    unit_text: str

    def __post_init__(self) -> None:
        if not self.symbol:
            raise ValueError("Variable symbol cannot be empty")


@dataclass(frozen=True)
class EquationSpec:
    id: str
    text: str


@dataclass(frozen=True)
class EquationCheck:
    """Advisory outcome of a dimensional check on one equation."""

    status: CheckStatus
    message: str
    reason: Optional[FailureReason] = None
    lhs: Optional[Dimension] = None
    rhs: Optional[Dimension] = None
    position: Optional[int] = None

    @property
    def is_good(self) -> bool:
        return self.status is CheckStatus.GOOD

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"status": self.status.value, "message": self.message}
        if self.reason is not None:
            payload["reason"] = self.reason.value
        if self.lhs is not None:
            payload["lhs"] = to_canonical_string(self.lhs)
        if self.rhs is not None:
            payload["rhs"] = to_canonical_string(self.rhs)
        if self.position is not None:
            payload["position"] = self.position
        return payload


def outcome_to_dict(outcome: ParseOutcome) -> Dict[str, Any]:
    if isinstance(outcome, Parsed):
        return {"ok": True, "dimension": to_canonical_string(outcome.dimension)}
    return {
        "ok": False,
        "reason": outcome.reason.value,
        "message": outcome.message,
        "position": outcome.position,
    }


__all__: List[str] = [
    "FailureReason",
    "CheckStatus",
    "Parsed",
    "ParseFailure",
    "ParseOutcome",
    "VariableSpec",
    "EquationSpec",
    "EquationCheck",
    "outcome_to_dict",
]
