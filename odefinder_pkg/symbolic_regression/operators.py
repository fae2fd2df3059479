"""Genetic operators for evolving prefix expressions.

This module implements structural operators on an Expression's token
sequence:
- Subexpression span: the minimal well-formed run starting at an index
- Sub-expression: copy of a random span as a standalone expression
- Crossover: replace a random span with a random span of another expression
- Mutation: replace a random span with a bare TIME or POS reference

A well-formed span has a net balance of zero pending operands, so splicing
one span in place of another always yields a well-formed expression.
"""

from __future__ import annotations

import numpy as np

from .expression import Expression
from .operator_registry import VARIABLES


def find_subexpression_span(expression: Expression, start: int) -> tuple[int, int]:
    """Find the minimal well-formed subsequence beginning at ``start``.

    Args:
        expression: Expression to scan
        start: Index of the first token of the span

    Returns:
        Inclusive ``(start, end)`` indices

    Raises:
        IndexError: If ``start`` is not a valid token index
    """
    if not 0 <= start < len(expression):
        raise IndexError(f"Span start {start} outside expression of length {len(expression)}")

    operators = expression.operators
    pending = 1
    end = start
    while True:
        pending += operators[end].balance
        if pending == 0:
            return start, end
        end += 1


def random_span(expression: Expression, rng: np.random.Generator) -> tuple[int, int]:
    """Span starting at a uniformly chosen token index."""
    start = int(rng.integers(len(expression)))
    return find_subexpression_span(expression, start)


def sub_expr(expression: Expression, rng: np.random.Generator) -> Expression:
    """Copy a random well-formed span out as a new expression."""
    start, end = random_span(expression, rng)
    return Expression(expression.operators[start : end + 1])


def crossover_at(
    expression: Expression,
    span: tuple[int, int],
    other: Expression,
    other_span: tuple[int, int],
) -> Expression:
    """Replace ``span`` of ``expression`` with ``other_span`` of ``other``.

    The result has ``len(expression) - span_length + other_span_length``
    tokens.
    """
    start, end = span
    other_start, other_end = other_span
    return Expression(
        expression.operators[:start]
        + other.operators[other_start : other_end + 1]
        + expression.operators[end + 1 :]
    )


def crossover(
    expression: Expression, other: Expression, rng: np.random.Generator
) -> Expression:
    """Replace a random span of ``expression`` with a random span of ``other``.

    Neither parent is modified.
    """
    span = random_span(expression, rng)
    other_span = random_span(other, rng)
    return crossover_at(expression, span, other, other_span)


def mutate(expression: Expression, rng: np.random.Generator) -> Expression:
    """Replace a random span with a bare TIME or POS reference."""
    variable = VARIABLES[int(rng.integers(len(VARIABLES)))]
    return crossover(expression, Expression((variable,)), rng)
