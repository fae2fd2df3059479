"""Symbolic Regression of ODE right-hand sides.

This module provides genetic programming-based discovery of
``dx/dt = f(t, x)`` from sampled trajectories.

Main Components:
    - OperatorRegistry: Token <-> operator vocabulary
    - Expression: Prefix-notation candidate right-hand sides
    - fitness: RK4 simulation scored against the samples
    - Population: Evolution loop with elitism

Example:
    >>> from odefinder_pkg.symbolic_regression import Dataset, discover_ode
    >>> import numpy as np
    >>> t = np.arange(0.0, 11.0)
    >>> dataset = Dataset(t, -np.cos(t))
    >>> population = discover_ode(dataset)
    >>> best = population.best_fit()
    >>> print(best.fitness)
"""

from .expression import Expression
from .expression import describe
from .expression import is_well_formed
from .genetic_engine import EvolutionConfig
from .genetic_engine import Individual
from .genetic_engine import Population
from .genetic_engine import discover_ode
from .genetic_engine import sort_key
from .ode_simulation import Dataset
from .ode_simulation import State
from .ode_simulation import fitness
from .ode_simulation import rk4_step
from .ode_simulation import simulate
from .operator_registry import POSITION
from .operator_registry import TIME
from .operator_registry import Operator
from .operator_registry import OperatorKind
from .operator_registry import OperatorRegistry
from .operator_registry import default_registry
from .operators import crossover
from .operators import crossover_at
from .operators import find_subexpression_span
from .operators import mutate
from .operators import sub_expr

__all__ = [
    # Operators and registry
    "Operator",
    "OperatorKind",
    "OperatorRegistry",
    "TIME",
    "POSITION",
    "default_registry",
    # Expressions
    "Expression",
    "describe",
    "is_well_formed",
    # Simulation
    "Dataset",
    "State",
    "rk4_step",
    "fitness",
    "simulate",
    # Genetic Operators
    "find_subexpression_span",
    "sub_expr",
    "crossover",
    "crossover_at",
    "mutate",
    # Main Algorithm
    "Individual",
    "Population",
    "EvolutionConfig",
    "sort_key",
    "discover_ode",
]
