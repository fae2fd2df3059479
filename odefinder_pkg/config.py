"""Centralized configuration for odefinder.

This module defines:
- Genetic programming defaults (population size, generations, elitism)
- Integration step size for the RK4 simulation
- Random expression generation limits

Configuration can be overridden via:
- CLI flags (see cli/app.py)
- Environment variables (prefixed with ODEFINDER_)
"""

import os

VERSION = "0.3.0"

# Genetic Programming configuration
POPULATION_SIZE = int(
    os.getenv("ODEFINDER_POPULATION_SIZE", "300")
)  # Individuals grown before the first generation
GENERATIONS = int(os.getenv("ODEFINDER_GENERATIONS", "10"))  # Calls to evolve()
ELITE_FRACTION = float(
    os.getenv("ODEFINDER_ELITE_FRACTION", "0.1")
)  # Fraction copied unchanged into the next generation
SELECTION_RATE = float(
    os.getenv("ODEFINDER_SELECTION_RATE", "0.1")
)  # Rate of the exponential used to sample parent fitness thresholds

# ODE simulation
STEP_SIZE = float(os.getenv("ODEFINDER_STEP_SIZE", "0.1"))  # RK4 step h

# Random expression generation
CONSTANT_RANGE = float(
    os.getenv("ODEFINDER_CONSTANT_RANGE", "100.0")
)  # Anonymous constants are drawn from [-range, range]
MAX_EXPRESSION_LENGTH = int(
    os.getenv("ODEFINDER_MAX_EXPRESSION_LENGTH", "128")
)  # Only terminals are drawn once this many tokens are committed

# Reporting
REPORT_TOP = int(os.getenv("ODEFINDER_REPORT_TOP", "10"))  # Individuals shown per generation
LOG_LEVEL = os.getenv("ODEFINDER_LOG_LEVEL", "INFO")
