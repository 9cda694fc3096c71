"""Tests for the default formula evaluator."""

import math

import pytest

from formula import FormulaError, evaluate_formula, is_formula


@pytest.mark.parametrize(
    "expression, expected",
    [
        ("2+3", 5.0),
        ("(1+2)*3", 9.0),
        ("10/4", 2.5),
        ("-5+2", -3.0),
        ("2**10", 1024.0),
        ("7 % 3", 1.0),
        ("sqrt(16)", 4.0),
        ("max(2, 9)", 9.0),
        ("round(2.6)", 3.0),
    ],
)
def test_evaluates_arithmetic(expression, expected):
    assert evaluate_formula(expression) == pytest.approx(expected)


def test_constants_are_available():
    assert evaluate_formula("2*pi") == pytest.approx(2 * math.pi)


@pytest.mark.parametrize(
    "expression",
    ["", "2+", "1/0", "5 % 0", "sqrt(-1)", "foo(1)", "x+1", "__import__('os')", "'a'", "True", "10**400", "1 if 1 else 2"],
)
def test_rejects_invalid_formulas(expression):
    with pytest.raises(FormulaError):
        evaluate_formula(expression)


def test_returns_plain_float():
    assert type(evaluate_formula("1+1")) is float


def test_is_formula():
    assert is_formula("=1+1")
    assert not is_formula("1+1")
    assert not is_formula("")


def test_overlong_formula_is_rejected():
    expression = "+".join(["1"] * 5000)
    with pytest.raises(FormulaError, match="too long"):
        evaluate_formula(expression)


def test_deeply_nested_formula_is_rejected():
    expression = "(" * 300 + "1" + ")" * 300
    with pytest.raises(FormulaError):
        evaluate_formula(expression)
