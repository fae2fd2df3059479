"""Tests for prefix expression generation, evaluation and printing."""

import math

import numpy as np
import pytest
import sympy as sp

from odefinder_pkg.symbolic_regression import POSITION
from odefinder_pkg.symbolic_regression import TIME
from odefinder_pkg.symbolic_regression import Expression
from odefinder_pkg.symbolic_regression import Operator
from odefinder_pkg.symbolic_regression import OperatorKind
from odefinder_pkg.symbolic_regression import describe
from odefinder_pkg.symbolic_regression import is_well_formed
from odefinder_pkg.types import EvaluationError
from odefinder_pkg.types import UnknownOperatorError
from odefinder_pkg.types import UnknownTokenError
from odefinder_pkg.types import ValidationError


def tok(registry, *tokens):
    return Expression(tuple(registry.lookup_by_token(t) for t in tokens))


def test_sub_takes_first_operand_minus_second(registry):
    expr = tok(registry, "SUB", "TIME", "POS")
    assert expr.evaluate(5.0, 2.0) == 3.0


def test_evaluate_nested(registry):
    # t + x^2
    expr = tok(registry, "ADD", "TIME", "SQUARE", "POS")
    assert expr.evaluate(1.0, 3.0) == 10.0


def test_evaluate_constant():
    assert Expression((Operator.constant(2.5),)).evaluate(0.0, 0.0) == 2.5


def test_division_by_zero_gives_inf(registry):
    expr = Expression(
        (registry.lookup_by_token("DIV"), TIME, Operator.constant(0.0))
    )
    assert math.isinf(expr.evaluate(1.0, 0.0))


def test_sqrt_of_negative_gives_nan(registry):
    expr = tok(registry, "SQRT", "POS")
    assert math.isnan(expr.evaluate(0.0, -1.0))


@pytest.mark.parametrize(
    "tokens",
    [("ADD", "TIME"), ("TIME", "POS"), ("SQUARE",)],
)
def test_malformed_expression_raises(registry, tokens):
    with pytest.raises(EvaluationError):
        tok(registry, *tokens).evaluate(1.0, 1.0)


def test_empty_expression_raises():
    with pytest.raises(EvaluationError):
        Expression(()).evaluate(1.0, 1.0)


def test_is_well_formed(registry):
    add = registry.lookup_by_token("ADD")
    sq = registry.lookup_by_token("SQUARE")
    assert is_well_formed([TIME])
    assert is_well_formed([add, TIME, sq, POSITION])
    assert not is_well_formed([])
    assert not is_well_formed([add, TIME])
    assert not is_well_formed([TIME, POSITION])


def test_generated_expressions_are_well_formed(registry):
    rng = np.random.default_rng(42)
    for _ in range(300):
        expr = Expression.generate(registry, rng)
        assert is_well_formed(expr)
        expr.evaluate(0.5, 0.5)


@pytest.mark.parametrize("max_length", [1, 2, 3, 5, 16])
def test_generation_respects_max_length(registry, max_length):
    rng = np.random.default_rng(max_length)
    for _ in range(200):
        expr = Expression.generate(registry, rng, max_length=max_length)
        assert 1 <= len(expr) <= max_length
        assert is_well_formed(expr)


def test_generation_rejects_non_positive_max_length(registry):
    with pytest.raises(ValidationError):
        Expression.generate(registry, np.random.default_rng(0), max_length=0)


def test_generated_constants_within_range(registry):
    rng = np.random.default_rng(7)
    for _ in range(200):
        expr = Expression.generate(registry, rng, constant_range=2.0)
        for operator in expr:
            if operator.kind == OperatorKind.CONSTANT:
                assert -2.0 <= operator.value <= 2.0


def test_describe(registry):
    expr = Expression(
        (registry.lookup_by_token("MUL"), Operator.constant(2.5), POSITION)
    )
    assert expr.describe(registry) == "MUL 2.5 POS"
    assert describe(expr, registry) == "MUL 2.5 POS"


def test_describe_unregistered_function_raises(registry):
    expr = Expression((Operator.unary(np.exp), TIME))
    with pytest.raises(UnknownOperatorError):
        expr.describe(registry)


def test_describe_parse_round_trip(registry):
    rng = np.random.default_rng(3)
    for _ in range(100):
        expr = Expression.generate(registry, rng)
        assert Expression.parse(expr.describe(registry), registry) == expr


def test_parse_unknown_token(registry):
    with pytest.raises(UnknownTokenError):
        Expression.parse("ADD TIME FOO", registry)


@pytest.mark.parametrize("description", ["", "ADD TIME", "TIME POS", "SQUARE"])
def test_parse_malformed(registry, description):
    with pytest.raises(ValidationError):
        Expression.parse(description, registry)


def test_to_sympy(registry):
    t, x = sp.symbols("t x")
    assert tok(registry, "SUB", "TIME", "POS").to_sympy(registry) == t - x
    assert tok(registry, "COS", "POS").to_sympy(registry) == sp.cos(x)

    expr = Expression((registry.lookup_by_token("MUL"), Operator.constant(2.5), TIME))
    assert expr.to_sympy(registry) == sp.Float(2.5) * t


def test_to_sympy_without_equivalent(registry):
    exp = Operator.unary(np.exp)
    registry.insert(exp, "EXP")
    expr = Expression((exp, TIME))
    assert str(expr.to_sympy(registry)) == "EXP(t)"


def test_named_constant_prints_by_token(registry):
    registry.insert(Operator.constant(np.pi), "PI", sp.pi)
    mul = registry.lookup_by_token("MUL")

    named = Expression((mul, Operator.constant(np.pi), TIME))
    assert named.describe(registry) == "MUL PI TIME"
    assert Expression.parse("MUL PI TIME", registry) == named
    assert named.to_sympy(registry) == sp.pi * sp.Symbol("t")

    anonymous = Expression((mul, Operator.constant(2.5), TIME))
    assert anonymous.describe(registry) == "MUL 2.5 TIME"


def test_unregistered_function_raises_even_with_named_constants(registry):
    registry.insert(Operator.constant(np.pi), "PI", sp.pi)
    expr = Expression((Operator.unary(np.exp), Operator.constant(np.pi)))
    with pytest.raises(UnknownOperatorError):
        expr.describe(registry)
