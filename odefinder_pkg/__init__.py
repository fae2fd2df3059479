"""odefinder package: genetic programming discovery of ODE right-hand sides."""

__version__ = "0.3.0"

from . import cli, config, logging_config, symbolic_regression, types
from .symbolic_regression import (
    Dataset,
    EvolutionConfig,
    Expression,
    OperatorRegistry,
    Population,
    default_registry,
    discover_ode,
)
from .types import (
    EvaluationError,
    OdeFinderError,
    UnknownOperatorError,
    UnknownTokenError,
    ValidationError,
)

__all__ = [
    "config",
    "cli",
    "types",
    "logging_config",
    "symbolic_regression",
    "Dataset",
    "EvolutionConfig",
    "Expression",
    "OperatorRegistry",
    "Population",
    "default_registry",
    "discover_ode",
    "OdeFinderError",
    "ValidationError",
    "UnknownTokenError",
    "UnknownOperatorError",
    "EvaluationError",
]
