"""Spreadsheet-style formula evaluation for number fields.

A field whose text starts with ``=`` is treated as a formula. The remainder
is parsed with :mod:`ast` and evaluated against a whitelist of operators,
constants and numpy functions, so arbitrary Python is never executed.
"""

from __future__ import annotations

import ast
import operator
from typing import Callable, Dict

import numpy as np

FORMULA_PREFIX = "="

Evaluator = Callable[[str], float]


class FormulaError(ValueError):
    """Raised when a formula cannot be parsed or evaluated."""


_BINARY_OPERATORS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.Pow: operator.pow,
    ast.Mod: operator.mod,
}
_UNARY_OPERATORS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}
_CONSTANTS: Dict[str, float] = {
    "pi": float(np.pi),
    "e": float(np.e),
}
_FUNCTIONS: Dict[str, Callable[..., float]] = {
    "abs": np.abs,
    "sqrt": np.sqrt,
    "cbrt": np.cbrt,
    "exp": np.exp,
    "log": np.log,
    "log10": np.log10,
    "sin": np.sin,
    "cos": np.cos,
    "tan": np.tan,
    "floor": np.floor,
    "ceil": np.ceil,
    "round": np.round,
    "min": np.minimum,
    "max": np.maximum,
}


def evaluate_formula(expression: str) -> float:
    """Evaluate an arithmetic expression and return a finite float.

    Parameters
    ----------
    expression:
        Formula text without the leading ``=``.

    Raises
    ------
    FormulaError
        If the expression is empty, malformed, uses anything outside the
        whitelist, or produces a non-finite value (division by zero,
        overflow, ``sqrt(-1)``), or is nested too deeply to evaluate.
    """

    text = expression.strip()
    if not text:
        raise FormulaError("Enter a calculation after '='.")
    try:
        tree = ast.parse(text, mode="eval")
    except SyntaxError as exc:
        raise FormulaError(f"Malformed formula: {expression!r}") from exc
    except (RecursionError, MemoryError) as exc:
        raise FormulaError("Formula is too long to evaluate.") from exc

    with np.errstate(all="ignore"):
        try:
            result = np.float64(_evaluate_node(tree.body))
        except (RecursionError, MemoryError) as exc:
            raise FormulaError("Formula is too long to evaluate.") from exc
        except (ArithmeticError, TypeError) as exc:
            raise FormulaError(f"Cannot evaluate {expression!r}: {exc}") from exc

    if not np.isfinite(result):
        raise FormulaError(f"Formula {expression!r} does not produce a finite number.")
    return float(result)


def _evaluate_node(node: ast.AST):
    if isinstance(node, ast.Constant):
        if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
            raise FormulaError("Only numeric values are allowed in formulas.")
        return np.float64(node.value)
    if isinstance(node, ast.BinOp):
        op = _BINARY_OPERATORS.get(type(node.op))
        if op is None:
            raise FormulaError("Unsupported operator in formula.")
        left = _evaluate_node(node.left)
        right = _evaluate_node(node.right)
        if isinstance(node.op, (ast.Div, ast.Mod)) and right == 0:
            raise FormulaError("Division by zero.")
        return op(left, right)
    if isinstance(node, ast.UnaryOp):
        op = _UNARY_OPERATORS.get(type(node.op))
        if op is None:
            raise FormulaError("Unsupported unary operator in formula.")
        return op(_evaluate_node(node.operand))
    if isinstance(node, ast.Name):
        if node.id not in _CONSTANTS:
            raise FormulaError(f"Unknown name {node.id!r}.")
        return np.float64(_CONSTANTS[node.id])
    if isinstance(node, ast.Call):
        if not isinstance(node.func, ast.Name) or node.func.id not in _FUNCTIONS:
            raise FormulaError("Unknown function in formula.")
        if node.keywords:
            raise FormulaError("Keyword arguments are not supported.")
        args = [_evaluate_node(arg) for arg in node.args]
        try:
            return _FUNCTIONS[node.func.id](*args)
        except TypeError as exc:
            raise FormulaError(f"Wrong number of arguments for {node.func.id}().") from exc
    raise FormulaError("Enter a valid numerical formula.")


def is_formula(text: str) -> bool:
    """Return ``True`` when ``text`` should be evaluated as a formula."""

    return text.startswith(FORMULA_PREFIX)
