import pytest

from physgraph.core.dimensions import DIMENSIONLESS, Dimension
from physgraph.core.types import FailureReason, ParseFailure, Parsed
from physgraph.core.units import build_variable_map
from physgraph.markup.parser import MarkupParser, dimension_of, find_unsupported
from physgraph.markup.tokenizer import tokenize

VARIABLES = build_variable_map(
    [
        ("m", "kg"),
        ("v", "m/s"),
        ("a", "m/s^2"),
        ("F", "N"),
        ("E", "J"),
        ("c", "m/s"),
        ("t", "s"),
        ("x", "m"),
        ("h", "m"),
        ("g", "m/s^2"),
        ("\\rho", "kg/m^3"),
    ]
)


def _dim(text: str, **kwargs) -> Dimension:
    outcome = dimension_of(text, VARIABLES, **kwargs)
    assert isinstance(outcome, Parsed), outcome
    return outcome.dimension


def _failure(text: str, **kwargs) -> ParseFailure:
    outcome = dimension_of(text, VARIABLES, **kwargs)
    assert isinstance(outcome, ParseFailure), outcome
    return outcome


def test_fraction_matches_division():
    assert _dim("\\frac{x}{t}") == _dim("x/t") == VARIABLES["v"]


def test_implicit_multiplication():
    assert _dim("2mv") == _dim("2*m*v")
    assert _dim("m a") == VARIABLES["F"]
    assert _dim("\\frac{1}{2}mv^2") == VARIABLES["E"]


def test_multiplication_macros_and_grouping_macros():
    assert _dim("m \\cdot a") == VARIABLES["F"]
    assert _dim("\\left(m \\times c^2\\right)") == VARIABLES["E"]


def test_declared_commands_resolve():
    pressure = _dim("\\rho g h")
    assert pressure == Dimension.of(M=1, L=-1, T=-2)


def test_subscripts_are_discarded():
    assert _dim("v_0 t") == VARIABLES["x"]
    assert _dim("x_{initial} + v_{\\mathrm{avg}} t") == VARIABLES["x"]


def test_numbers_are_dimensionless():
    assert _dim("3.14") == DIMENSIONLESS
    assert _dim("{2}") == DIMENSIONLESS


def test_exponent_forms():
    assert _dim("x^{-1}") == _dim("1/x")
    assert _dim("x^{0.5}") == Dimension.of(L=0.5)
    assert _dim("(m v)^2") == Dimension.of(M=2, L=2, T=-2)


@pytest.mark.parametrize(
    "text", ["x^y", "x^{a}", "x^", "x^{}", "x^{1_0}", "x^{2 3}", "x^{--1}", "x^{1.2.3}"]
)
def test_malformed_exponent(text):
    assert _failure(text).reason is FailureReason.MALFORMED_EXPONENT


def test_addition_requires_equal_dimensions():
    assert _dim("x + h") == VARIABLES["x"]
    assert _dim("-x + v t") == VARIABLES["x"]
    failure = _failure("x + t")
    assert failure.reason is FailureReason.DIMENSION_MISMATCH
    assert failure.position == 2


def test_unresolved_symbol():
    failure = _failure("m q")
    assert failure.reason is FailureReason.UNRESOLVED_SYMBOL
    assert failure.message == "no units declared for symbol 'q'"
    assert failure.position == 2


def test_layout_macro_is_unsupported_not_unresolved():
    assert _failure("\\sqrt{x}").reason is FailureReason.UNSUPPORTED_CONSTRUCT
    assert _failure("\\vec v").reason is FailureReason.UNSUPPORTED_CONSTRUCT


@pytest.mark.parametrize(
    ("text", "position"),
    [
        ("\\sin(x)", 0),
        ("\\frac{\\partial x}{\\partial t}", 6),
        ("F \\int dx", 2),
        ("\\sum x", 0),
        ("e^{\\ln x}", 3),
    ],
)
def test_denylisted_constructs(text, position):
    failure = _failure(text)
    assert failure.reason is FailureReason.UNSUPPORTED_CONSTRUCT
    assert failure.position == position


def test_denylist_checked_on_token_ranges():
    parser = MarkupParser(VARIABLES)
    outcome = parser.parse_tokens(tokenize("\\frac{\\nabla x}{t}"))
    assert isinstance(outcome, ParseFailure)
    assert outcome.reason is FailureReason.UNSUPPORTED_CONSTRUCT
    assert outcome.position == 6


def test_find_unsupported_reports_earliest():
    assert find_unsupported("x \\cos y \\sin z") == ("\\cos", 2)
    assert find_unsupported("m v") is None


def test_trailing_input():
    failure = _failure("x )")
    assert failure.reason is FailureReason.TRAILING_INPUT
    assert failure.position == 2


@pytest.mark.parametrize("text", ["(x", "\\frac{x", "\\frac x t", "x_", "x * )"])
def test_syntax_failures(text):
    assert _failure(text).reason is FailureReason.SYNTAX


def test_empty_input():
    assert _failure("").reason is FailureReason.EMPTY
    assert _failure("   ").reason is FailureReason.EMPTY
    assert _failure("\\frac{}{x}").reason is FailureReason.EMPTY


def test_depth_limit():
    assert _dim("(((x)))", max_depth=3) == VARIABLES["x"]
    assert _dim("{{{x}}}", max_depth=3) == VARIABLES["x"]
    assert _failure("((((x))))", max_depth=3).reason is FailureReason.TOO_DEEPLY_NESTED
    assert _failure("{{{{x}}}}", max_depth=3).reason is FailureReason.TOO_DEEPLY_NESTED


def test_pathological_nesting_fails_cleanly():
    text = "(" * 500 + "x" + ")" * 500
    assert _failure(text).reason is FailureReason.TOO_DEEPLY_NESTED
    braces = "\\frac{" * 300 + "x" + "}{t}" * 300
    assert _failure(braces).reason is FailureReason.TOO_DEEPLY_NESTED


def test_max_depth_from_environment(monkeypatch):
    monkeypatch.setenv("PHYSGRAPH_MAX_DEPTH", "2")
    assert MarkupParser(VARIABLES).max_depth == 2
    monkeypatch.setenv("PHYSGRAPH_MAX_DEPTH", "100000")
    assert MarkupParser(VARIABLES).max_depth == 100
    monkeypatch.setenv("PHYSGRAPH_MAX_DEPTH", "nope")
    assert MarkupParser(VARIABLES).max_depth == 64


def test_exponent_overflow_fails_cleanly():
    huge = "1" + "0" * 308
    assert _failure(f"(x^2)^{{{huge}}}").reason is FailureReason.MALFORMED_EXPONENT
    assert _failure(f"x^{{{huge}}} x^{{{huge}}}").reason is FailureReason.MALFORMED_EXPONENT
    fraction = f"\\frac{{x^{{{huge}}}}}{{(x^{{{huge}}})^{{-1}}}}"
    assert _failure(fraction).reason is FailureReason.MALFORMED_EXPONENT
