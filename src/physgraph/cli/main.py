"""Command-line interface for physgraph."""

from __future__ import annotations

import json
import logging
import sys
from typing import Tuple

import click
from pydantic import ValidationError

from physgraph.config import configure_logging
from physgraph.core.dimensions import to_canonical_string
from physgraph.core.types import ParseFailure, VariableSpec, outcome_to_dict
from physgraph.core.units import analyze_variables
from physgraph.markup.parser import dimension_of
from physgraph.project import check_project, load_project
from physgraph.units.algebra import format_units, normalize_unit_text, parse_unit_expr


def _parse_var_options(values: Tuple[str, ...]) -> list[VariableSpec]:
    specs = []
    for value in values:
        if "=" not in value:
            raise click.BadParameter(f"expected SYMBOL=UNIT, got {value!r}", param_hint="--var")
        symbol, unit_text = value.split("=", 1)
        if not symbol.strip():
            raise click.BadParameter(f"empty symbol in {value!r}", param_hint="--var")
        specs.append(VariableSpec(symbol=symbol.strip(), unit_text=unit_text.strip()))
    return specs


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """physgraph dimensional analysis tools."""

    configure_logging(logging.DEBUG if verbose else None)


@cli.command("units")
@click.argument("expression")
def units(expression: str) -> None:
    """Parse a unit EXPRESSION such as kg*m/s^2."""

    outcome = parse_unit_expr(expression)
    payload = outcome_to_dict(outcome)
    if isinstance(outcome, ParseFailure):
        click.echo(json.dumps(payload, indent=2))
        click.echo(outcome.pointer(normalize_unit_text(expression)), err=True)
        sys.exit(1)
    payload["units"] = format_units(outcome.dimension)
    click.echo(json.dumps(payload, indent=2))


@cli.command("expr")
@click.argument("latex")
@click.option(
    "--var",
    "var_options",
    multiple=True,
    metavar="SYMBOL=UNIT",
    help="Declare a variable, e.g. --var 'm=kg'. Repeatable.",
)
def expr(latex: str, var_options: Tuple[str, ...]) -> None:
    """Infer the dimension of a markup expression LATEX."""

    variables, diagnostics = analyze_variables(_parse_var_options(var_options))
    for diag in diagnostics:
        click.echo(f"warning: {diag.symbol}: {diag.message}", err=True)
    outcome = dimension_of(latex, variables)
    click.echo(json.dumps(outcome_to_dict(outcome), indent=2))
    if isinstance(outcome, ParseFailure):
        click.echo(outcome.pointer(latex), err=True)
        sys.exit(1)


@cli.command("check")
@click.argument("project_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--strict", is_flag=True, help="Exit non-zero when any equation is not good.")
def check(project_path: str, strict: bool) -> None:
    """Check every equation in the project JSON at PROJECT_PATH."""

    try:
        project = load_project(project_path)
    except (ValidationError, json.JSONDecodeError) as exc:
        raise click.ClickException(f"invalid project {project_path}: {exc}") from exc
    report = check_project(project)
    for eq_id, result in report.results.items():
        click.echo(f"{result.status:<8} {eq_id}: {result.message}")
    for diag in report.variable_diagnostics:
        click.echo(f"warning: variable {diag['symbol']}: {diag['message']}", err=True)

    counts = report.counts()
    click.echo(
        f"{len(report.results)} equation(s): "
        f"{counts['good']} good, {counts['bad']} bad, {counts['unknown']} unknown"
    )
    if strict and counts["good"] != len(report.results):
        sys.exit(1)


@cli.command("dims")
@click.argument("unit_texts", nargs=-1, required=True)
def dims(unit_texts: Tuple[str, ...]) -> None:
    """Print the canonical dimension string of each UNIT_TEXT."""

    for text in unit_texts:
        outcome = parse_unit_expr(text)
        if isinstance(outcome, ParseFailure):
            click.echo(f"{text}: error: {outcome.message}")
        else:
            click.echo(f"{text}: {to_canonical_string(outcome.dimension)}")


if __name__ == "__main__":
    cli()
