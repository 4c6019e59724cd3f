"""FastAPI router exposing the dimensional checker."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from physgraph.core.types import ParseFailure
from physgraph.core.dimensions import to_canonical_string
from physgraph.core.units import build_variable_map
from physgraph.markup.parser import dimension_of
from physgraph.project import (
    EquationStatus,
    Project,
    ProjectReport,
    ProjectVariable,
    check_project,
)
from physgraph.validation.dimensional import check_equation


router = APIRouter(prefix="/v1/check", tags=["check"])


class ExpressionReq(BaseModel):
    latex: str
    vars: List[ProjectVariable] = Field(default_factory=list)


class ExpressionResp(BaseModel):
    ok: bool
    dimension: Optional[str] = None
    reason: Optional[str] = None
    message: Optional[str] = None
    position: Optional[int] = None


@router.post("/expression", response_model=ExpressionResp)
def check_expression(req: ExpressionReq) -> ExpressionResp:
    variables = build_variable_map(v.to_spec() for v in req.vars)
    outcome = dimension_of(req.latex, variables)
    if isinstance(outcome, ParseFailure):
        return ExpressionResp(
            ok=False,
            reason=outcome.reason.value,
            message=outcome.message,
            position=outcome.position,
        )
    return ExpressionResp(ok=True, dimension=to_canonical_string(outcome.dimension))


class EquationReq(BaseModel):
    latex: str
    vars: List[ProjectVariable] = Field(default_factory=list)


@router.post("/equation", response_model=EquationStatus)
def check_single_equation(req: EquationReq) -> EquationStatus:
    variables = build_variable_map(v.to_spec() for v in req.vars)
    return EquationStatus(**check_equation(req.latex, variables).to_dict())


@router.post("/project", response_model=ProjectReport)
def check_whole_project(project: Project) -> ProjectReport:
    return check_project(project)


__all__ = ["router"]
