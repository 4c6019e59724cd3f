"""Dimensional analysis primitives for physgraph.

Physical dimensions are modelled as sparse exponent vectors over the seven SI
base quantities: mass (``M``), length (``L``), time (``T``), temperature
(``Th``), electric current (``I``), amount of substance (``N``) and luminous
intensity (``J``). Exponents are floats compared with a fixed tolerance, and
any exponent whose magnitude falls below that tolerance is pruned, so the
empty vector is the only representation of a dimensionless quantity.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Tuple

EPSILON = 1e-12

BASE_DIMENSIONS: Tuple[str, ...] = ("M", "L", "T", "Th", "I", "N", "J")

BASE_NAMES: Dict[str, str] = {
    "M": "mass",
    "L": "length",
    "T": "time",
    "Th": "temperature",
    "I": "current",
    "N": "amount",
    "J": "luminous intensity",
}


class DimensionalError(ValueError):
    """Raised when a dimensional operation is invalid."""


def _prune(exponents: Iterable[Tuple[str, float]]) -> Tuple[Tuple[str, float], ...]:
    merged: Dict[str, float] = {}
    for key, value in exponents:
        merged[key] = merged.get(key, 0.0) + float(value)
    for key, value in merged.items():
        if not math.isfinite(value):
            raise DimensionalError(f"Exponent of {key} must be finite, got {value!r}")
    return tuple(sorted((key, value) for key, value in merged.items() if abs(value) >= EPSILON))


def _format_exponent(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


@dataclass(frozen=True, eq=False)
class Dimension:
    """Immutable exponent vector over base dimensions.

    Instances are value objects: arithmetic always returns a new
    :class:`Dimension` and equality is tolerant (see :func:`equals`).
    """

    items: Tuple[Tuple[str, float], ...] = ()

    def __post_init__(self) -> None:
        for key, _ in self.items:
            if key not in BASE_NAMES:
                raise DimensionalError(f"Unknown base dimension {key!r}")
        object.__setattr__(self, "items", _prune(self.items))

    @classmethod
    def of(cls, mapping: Mapping[str, float] | None = None, **exponents: float) -> "Dimension":
        """Build a dimension from a mapping and/or keyword exponents."""
        merged: Dict[str, float] = dict(mapping or {})
        merged.update(exponents)
        return cls(tuple(merged.items()))

    # -- Core algebra -----------------------------------------------------
    def __mul__(self, other: "Dimension") -> "Dimension":
        if not isinstance(other, Dimension):
            return NotImplemented
        return multiply(self, other)

    def __truediv__(self, other: "Dimension") -> "Dimension":
        if not isinstance(other, Dimension):
            return NotImplemented
        return divide(self, other)

    def __pow__(self, exponent: float) -> "Dimension":
        result = power(self, exponent)
        if result is None:
            raise DimensionalError(f"Dimension exponent must be finite, got {exponent!r}")
        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dimension):
            return NotImplemented
        return equals(self, other)

    def __hash__(self) -> int:
        # Tolerant equality only guarantees equal key sets.
        return hash(tuple(key for key, _ in self.items))

    # -- Helpers ----------------------------------------------------------
    def as_dict(self) -> Dict[str, float]:
        return dict(self.items)

    def exponent(self, key: str) -> float:
        return self.as_dict().get(key, 0.0)

    def is_dimensionless(self) -> bool:
        return not self.items

    def __str__(self) -> str:
        return to_canonical_string(self)

    def __repr__(self) -> str:
        return f"Dimension({to_canonical_string(self)!r})"


DIMENSIONLESS = Dimension()


def _combine(a: Dimension, b: Dimension, sign: float) -> Dimension:
    out = a.as_dict()
    for key, value in b.items:
        out[key] = out.get(key, 0.0) + sign * value
    return Dimension(tuple(out.items()))


def multiply(a: Dimension, b: Dimension) -> Dimension:
    """Add exponent vectors; raises :class:`DimensionalError` on overflow."""
    return _combine(a, b, 1.0)


def divide(a: Dimension, b: Dimension) -> Dimension:
    """Subtract the exponents of ``b`` from ``a``."""
    return _combine(a, b, -1.0)


def power(a: Dimension, exponent: float) -> Optional[Dimension]:
    """Scale every exponent of ``a``.

    Returns ``None`` when ``exponent`` or any scaled exponent is not finite.
    """
    try:
        factor = float(exponent)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(factor):
        return None
    scaled = tuple((key, value * factor) for key, value in a.items)
    if not all(math.isfinite(value) for _, value in scaled):
        return None
    return Dimension(scaled)


def equals(a: Dimension, b: Dimension) -> bool:
    """Order-independent comparison with an absolute tolerance of ``EPSILON``."""
    left = a.as_dict()
    right = b.as_dict()
    if left.keys() != right.keys():
        return False
    return all(abs(left[key] - right[key]) < EPSILON for key in left)


def to_canonical_string(a: Dimension) -> str:
    """Render keys in lexicographic order, ``"1"`` for dimensionless."""
    if a.is_dimensionless():
        return "1"
    parts = []
    for key, value in sorted(a.items):
        if value == 1:
            parts.append(key)
        else:
            parts.append(f"{key}^{_format_exponent(value)}")
    return " ".join(parts)


MASS = Dimension.of(M=1)
LENGTH = Dimension.of(L=1)
TIME = Dimension.of(T=1)
TEMPERATURE = Dimension.of(Th=1)
CURRENT = Dimension.of(I=1)
AMOUNT = Dimension.of(N=1)
LUMINOSITY = Dimension.of(J=1)

VELOCITY = LENGTH / TIME
ACCELERATION = LENGTH / (TIME**2)
FORCE = MASS * ACCELERATION
ENERGY = FORCE * LENGTH
POWER = ENERGY / TIME
PRESSURE = FORCE / (LENGTH**2)


__all__ = [
    "EPSILON",
    "BASE_DIMENSIONS",
    "BASE_NAMES",
    "Dimension",
    "DimensionalError",
    "DIMENSIONLESS",
    "multiply",
    "divide",
    "power",
    "equals",
    "to_canonical_string",
    "MASS",
    "LENGTH",
    "TIME",
    "TEMPERATURE",
    "CURRENT",
    "AMOUNT",
    "LUMINOSITY",
    "VELOCITY",
    "ACCELERATION",
    "FORCE",
    "ENERGY",
    "POWER",
    "PRESSURE",
]
