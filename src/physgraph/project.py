"""Project document models and the whole-project check pass."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from physgraph.core.types import EquationSpec, VariableSpec
from physgraph.core.units import analyze_variables
from physgraph.markup.symbols import build_usage_index
from physgraph.observability import bind_run_id, current_run_id, new_run_id, reset_run_id
from physgraph.validation.dimensional import EquationChecker

logger = logging.getLogger(__name__)

Status = Literal["good", "bad", "unknown"]


class ProjectVariable(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    latex: str = Field(alias="symbol", min_length=1)
    units: str = Field(default="", alias="unitText")
    name: Optional[str] = None
    description: Optional[str] = None

    def to_spec(self) -> VariableSpec:
        return VariableSpec(symbol=self.latex, unit_text=self.units)


class ProjectEquation(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    latex: str = Field(alias="text")
    title: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    def to_spec(self) -> EquationSpec:
        return EquationSpec(id=self.id, text=self.latex)


class Project(BaseModel):
    model_config = ConfigDict(extra="ignore")

    vars: List[ProjectVariable] = Field(default_factory=list)
    eqs: List[ProjectEquation] = Field(default_factory=list)

    @field_validator("eqs", mode="after")
    def _unique_equation_ids(cls, value: List[ProjectEquation]) -> List[ProjectEquation]:
        seen: set[str] = set()
        for equation in value:
            if equation.id in seen:
                raise ValueError(f"duplicate equation id '{equation.id}'")
            seen.add(equation.id)
        return value


class EquationStatus(BaseModel):
    status: Status
    message: str
    reason: Optional[str] = None
    position: Optional[int] = None
    lhs: Optional[str] = None
    rhs: Optional[str] = None


class ProjectReport(BaseModel):
    results: Dict[str, EquationStatus]
    variable_diagnostics: List[Dict[str, Optional[str]]] = Field(default_factory=list)
    usage: Dict[str, List[str]] = Field(default_factory=dict)

    def counts(self) -> Dict[str, int]:
        tally = {"good": 0, "bad": 0, "unknown": 0}
        for result in self.results.values():
            tally[result.status] += 1
        return tally


def load_project(path: str | Path) -> Project:
    """Read a project JSON document from ``path``."""

    with open(path, "r", encoding="utf-8") as handle:
        raw = json.load(handle)
    project = Project.model_validate(raw)
    logger.debug(
        "Loaded project %s: %d variables, %d equations", path, len(project.vars), len(project.eqs)
    )
    return project


def check_project(project: Project, *, max_depth: int | None = None) -> ProjectReport:
    """Build the variable map once and check every equation against it."""

    token = bind_run_id(current_run_id() or new_run_id())
    try:
        variables, diagnostics = analyze_variables(v.to_spec() for v in project.vars)
        equations = [eq.to_spec() for eq in project.eqs]
        checker = EquationChecker(variables, max_depth=max_depth)
        checks = checker.check_all(equations)
    finally:
        reset_run_id(token)

    return ProjectReport(
        results={eq_id: EquationStatus(**check.to_dict()) for eq_id, check in checks.items()},
        variable_diagnostics=[
            {"symbol": d.symbol, "code": d.code, "message": d.message, "hint": d.hint}
            for d in diagnostics
        ],
        usage=build_usage_index(equations),
    )


__all__ = [
    "ProjectVariable",
    "ProjectEquation",
    "Project",
    "EquationStatus",
    "ProjectReport",
    "load_project",
    "check_project",
]
