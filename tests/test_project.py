import json

import pytest
from pydantic import ValidationError

from physgraph.project import Project, check_project, load_project

PROJECT = {
    "vars": [
        {"latex": "F", "units": "N", "name": "force"},
        {"latex": "m", "units": "kg"},
        {"symbol": "a", "unitText": "m/s^2"},
        {"latex": "v", "units": "m/s"},
        {"latex": "E", "units": "J"},
        {"latex": "c", "units": "m/s"},
        {"latex": "k", "units": "stone"},
    ],
    "eqs": [
        {"id": "newton", "title": "Second law", "latex": "F = m a", "tags": ["mechanics"]},
        {"id": "wrong", "latex": "E = m v"},
        {"id": "spring", "text": "F = -k x"},
        {"id": "einstein", "latex": "E = m c^2"},
    ],
}


def test_check_project_reports_each_equation():
    report = check_project(Project.model_validate(PROJECT))

    assert list(report.results) == ["newton", "wrong", "spring", "einstein"]
    assert report.results["newton"].status == "good"
    assert report.results["wrong"].status == "bad"
    assert report.results["wrong"].message.startswith("unit mismatch: LHS")
    assert report.results["spring"].status == "unknown"
    assert report.results["spring"].reason == "unresolved-symbol"
    assert report.counts() == {"good": 2, "bad": 1, "unknown": 1}


def test_check_project_reports_variable_diagnostics():
    report = check_project(Project.model_validate(PROJECT))
    assert report.variable_diagnostics == [
        {
            "symbol": "k",
            "code": "unknown-unit",
            "message": "Unknown unit symbol 'stone'",
            "hint": "Use one of: 1, m, s, kg, K, A, mol, cd, N, J, W, Pa.",
        }
    ]


def test_check_project_builds_usage_index():
    report = check_project(Project.model_validate(PROJECT))
    assert report.usage["m"] == ["newton", "wrong", "einstein"]
    assert report.usage["x"] == ["spring"]


def test_empty_project():
    report = check_project(Project())
    assert report.results == {}
    assert report.counts() == {"good": 0, "bad": 0, "unknown": 0}


def test_variable_symbol_required():
    with pytest.raises(ValidationError):
        Project.model_validate({"vars": [{"latex": "", "units": "kg"}]})


def test_load_project(tmp_path):
    path = tmp_path / "project.json"
    path.write_text(json.dumps(PROJECT), encoding="utf-8")
    project = load_project(path)
    assert len(project.vars) == 7
    assert project.eqs[0].title == "Second law"
    assert project.eqs[2].latex == "F = -k x"


def test_duplicate_equation_ids_rejected():
    with pytest.raises(ValidationError, match="duplicate equation id 'e'"):
        Project.model_validate(
            {"eqs": [{"id": "e", "latex": "x = x"}, {"id": "e", "latex": "x = q"}]}
        )
