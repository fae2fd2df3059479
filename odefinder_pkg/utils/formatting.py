"""Human-readable reporting of individuals and generations."""

from __future__ import annotations

import math

import sympy as sp

from ..symbolic_regression.genetic_engine import Individual
from ..symbolic_regression.genetic_engine import Population
from ..symbolic_regression.operator_registry import OperatorRegistry


def format_fitness(value: float) -> str:
    if math.isnan(value):
        return "nan"
    return f"{value:.6g}"


def format_individual(
    individual: Individual, registry: OperatorRegistry, symbolic: bool = False
) -> str:
    """Render one individual as ``<description>, fitness = <value>``.

    With ``symbolic`` the SymPy form is appended, e.g.
    ``SUB TIME POS, fitness = 0.5  [t - x]``.
    """
    line = (
        f"{individual.expression.describe(registry)}, "
        f"fitness = {format_fitness(individual.fitness)}"
    )
    if symbolic:
        line += f"  [{sp.sstr(individual.expression.to_sympy(registry))}]"
    return line


def format_generation_report(
    population: Population,
    registry: OperatorRegistry,
    top: int = 10,
    symbolic: bool = False,
) -> str:
    """Header line plus the ``top`` best individuals of a generation."""
    stats = population.stats()
    lines = [
        f"Generation {stats['generation']}: "
        f"best = {format_fitness(stats['best'])}, "
        f"median = {format_fitness(stats['median'])}, "
        f"unscorable = {stats['unscorable']}/{stats['population_size']}"
    ]
    for rank, individual in enumerate(population.ranked()[:top], start=1):
        lines.append(f"  {rank:>3}. {format_individual(individual, registry, symbolic)}")
    return "\n".join(lines)
