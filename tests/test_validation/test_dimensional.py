import hypothesis.strategies as st
import pytest
from hypothesis import given

from physgraph.core.types import CheckStatus, EquationCheck, EquationSpec, FailureReason
from physgraph.core.units import build_variable_map
from physgraph.validation.dimensional import EquationChecker, check_equation

VARIABLES = build_variable_map(
    [
        ("F", "N"),
        ("m", "kg"),
        ("a", "m/s^2"),
        ("E", "J"),
        ("c", "m/s"),
        ("v", "m/s"),
        ("x", "m"),
        ("t", "s"),
        ("P", "W"),
    ]
)


def test_newton_second_law_is_good():
    result = check_equation("F = m a", VARIABLES)
    assert result.status is CheckStatus.GOOD
    assert result.message == "units ok: L M T^-2"
    assert result.to_dict()["status"] == "good"


def test_mass_energy_is_good():
    assert check_equation("E = m c^2", VARIABLES).is_good
    assert check_equation("P = \\frac{E}{t}", VARIABLES).is_good
    assert check_equation("x = v t + \\frac{1}{2} a t^2", VARIABLES).is_good


def test_mismatch_is_bad():
    result = check_equation("E = m c", VARIABLES)
    assert result.status is CheckStatus.BAD
    assert result.reason is FailureReason.DIMENSION_MISMATCH
    assert result.message == "unit mismatch: LHS L^2 M T^-2 vs RHS L M T^-1"
    payload = result.to_dict()
    assert payload["lhs"] == "L^2 M T^-2"
    assert payload["rhs"] == "L M T^-1"


def test_equation_needs_exactly_one_equals():
    for text in ["a = b = c", "F m a", ""]:
        result = check_equation(text, VARIABLES)
        assert result.status is CheckStatus.UNKNOWN
        assert result.reason is FailureReason.STRUCTURAL


def test_unresolved_symbol_is_unknown_with_position():
    result = check_equation("F = m q", VARIABLES)
    assert result.status is CheckStatus.UNKNOWN
    assert result.reason is FailureReason.UNRESOLVED_SYMBOL
    assert result.message == "unit check: no units declared for symbol 'q'"
    assert result.position == 6


def test_left_side_failure_reported_first():
    result = check_equation("q = \\sin x", VARIABLES)
    assert result.reason is FailureReason.UNRESOLVED_SYMBOL


def test_integral_is_unknown():
    result = check_equation("x = \\int v dt", VARIABLES)
    assert result.status is CheckStatus.UNKNOWN
    assert result.reason is FailureReason.UNSUPPORTED_CONSTRUCT


def test_empty_side_is_unknown():
    result = check_equation(" = m", VARIABLES)
    assert result.status is CheckStatus.UNKNOWN
    assert result.reason is FailureReason.EMPTY


def test_check_all_keeps_input_order():
    checker = EquationChecker(VARIABLES)
    results = checker.check_all(
        [
            EquationSpec("e2", "E = m c^2"),
            EquationSpec("e1", "F = m v"),
            EquationSpec("e3", "F = \\nabla E"),
        ]
    )
    assert list(results) == ["e2", "e1", "e3"]
    assert [r.status for r in results.values()] == [
        CheckStatus.GOOD,
        CheckStatus.BAD,
        CheckStatus.UNKNOWN,
    ]


@given(st.text(max_size=60))
def test_never_raises_on_arbitrary_text(text):
    assert isinstance(check_equation(text, VARIABLES), EquationCheck)


@given(st.text(alphabet="Fmacx=+-*/^_{}()0123456789. \\frac", max_size=60))
def test_never_raises_on_markup_like_text(text):
    result = check_equation(text, VARIABLES)
    assert result.status in set(CheckStatus)


def test_exponent_with_subscript_marker_is_unknown():
    result = check_equation("x^{1_0} = x", VARIABLES)
    assert result.status is CheckStatus.UNKNOWN
    assert result.reason is FailureReason.MALFORMED_EXPONENT


def test_check_all_rejects_duplicate_ids():
    checker = EquationChecker(VARIABLES)
    with pytest.raises(ValueError, match="duplicate equation id 'e'"):
        checker.check_all([EquationSpec("e", "x = x"), EquationSpec("e", "x = q")])
