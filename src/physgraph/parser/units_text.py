"""Parse hand-typed ``symbol: unit`` declarations into variable specs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple
import re

from physgraph.core.types import VariableSpec


_TRAILING_PUNCT = re.compile(r"[\s,;]+$")


@dataclass(slots=True)
class UnitsTextResult:
    """Result of :func:`parse_units_text`.

    Attributes
    ----------
    variables:
        Declarations in the order they appear in the text.
    warnings:
        Human-readable warnings for lines that were skipped.
    """

    variables: List[VariableSpec] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def as_dict(self) -> Dict[str, str]:
        return {spec.symbol: spec.unit_text for spec in self.variables}


def _split_declaration(line: str) -> Tuple[str, str] | None:
    # Markup symbols never contain ':', but units may carry a comment.
    idx = line.find(":")
    if idx == -1:
        return None
    unit_part = line[idx + 1 :]
    if "#" in unit_part:
        unit_part = unit_part.split("#", 1)[0]
    return line[:idx].strip(), _TRAILING_PUNCT.sub("", unit_part.strip())


def parse_units_text(units_text: str | None) -> UnitsTextResult:
    """Parse multiline ``symbol: unit`` text.

    Blank lines and lines starting with ``#`` are ignored. Malformed lines
    produce a warning instead of an exception, so partially typed input can be
    fed straight from an editor.
    """

    result = UnitsTextResult()
    if not units_text:
        return result

    for line_no, raw_line in enumerate(units_text.splitlines(), start=1):
        stripped = raw_line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        pair = _split_declaration(stripped)
        if pair is None:
            result.warnings.append(f"Line {line_no}: missing ':', ignored: {stripped!r}")
            continue

        symbol, unit_text = pair
        if not symbol:
            result.warnings.append(f"Line {line_no}: empty variable symbol.")
            continue
        if not unit_text:
            result.warnings.append(f"Line {line_no}: empty unit for {symbol!r}.")
            continue

        result.variables.append(VariableSpec(symbol=symbol, unit_text=unit_text))

    return result


__all__ = ["UnitsTextResult", "parse_units_text"]
