"""FastAPI router exposing unit declaration parsing and validation."""

from __future__ import annotations

from typing import Dict, List

from fastapi import APIRouter
from pydantic import BaseModel, Field

from physgraph.core.dimensions import to_canonical_string
from physgraph.core.units import analyze_variables
from physgraph.parser.units_text import parse_units_text
from physgraph.units.algebra import format_units


router = APIRouter(prefix="/v1/units", tags=["units"])


class UnitsTextReq(BaseModel):
    text: str = Field(default="", description="Multiline symbol: unit declarations")


class UnitsTextResp(BaseModel):
    units: Dict[str, str]
    warnings: List[str]


@router.post("/parse", response_model=UnitsTextResp)
def parse_units(req: UnitsTextReq) -> UnitsTextResp:
    result = parse_units_text(req.text)
    return UnitsTextResp(units=result.as_dict(), warnings=result.warnings)


class UnitsValidateReq(BaseModel):
    units: Dict[str, str]


class UnitDiagnosticModel(BaseModel):
    symbol: str
    code: str
    message: str
    hint: str | None = None


class UnitsValidateResp(BaseModel):
    ok: bool
    dimensions: Dict[str, str]
    canonical: Dict[str, str]
    diagnostics: List[UnitDiagnosticModel]


@router.post("/validate", response_model=UnitsValidateResp)
def validate_units(req: UnitsValidateReq) -> UnitsValidateResp:
    mapping, diagnostics = analyze_variables(sorted(req.units.items()))
    return UnitsValidateResp(
        ok=not diagnostics,
        dimensions={symbol: to_canonical_string(dim) for symbol, dim in mapping.items()},
        canonical={symbol: format_units(dim) for symbol, dim in mapping.items()},
        diagnostics=[
            UnitDiagnosticModel(symbol=d.symbol, code=d.code, message=d.message, hint=d.hint)
            for d in diagnostics
        ],
    )


__all__ = ["router"]
