from __future__ import annotations

import argparse

import numpy as np

from .. import config as _config
from ..logging_config import get_logger
from ..logging_config import setup_logging
from ..symbolic_regression import Dataset
from ..symbolic_regression import EvolutionConfig
from ..symbolic_regression import Population
from ..symbolic_regression import default_registry
from ..symbolic_regression import discover_ode
from ..types import OdeFinderError
from ..utils.data_loading import load_csv_dataset
from ..utils.formatting import format_generation_report
from ..utils.formatting import format_individual

_logger = get_logger("cli")

# Trajectory fitted when no CSV is given: x(t) = -cos(t), i.e. dx/dt = sin(t)
DEMO_TIMES = np.arange(0.0, 11.0)


def demo_dataset() -> Dataset:
    return Dataset.from_function(lambda t: -np.cos(t), DEMO_TIMES)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="odefinder",
        description="Search for dx/dt = f(t, x) reproducing a sampled trajectory",
    )
    parser.add_argument(
        "--csv", type=str, help="CSV file with a header row (default: -cos(t) demo)"
    )
    parser.add_argument(
        "--time-column", type=str, default="t", help="CSV column holding times"
    )
    parser.add_argument(
        "--position-column",
        type=str,
        default="x",
        help="CSV column holding positions",
    )
    parser.add_argument(
        "-n",
        "--population",
        type=int,
        default=_config.POPULATION_SIZE,
        help=f"Population size (default: {_config.POPULATION_SIZE})",
    )
    parser.add_argument(
        "-g",
        "--generations",
        type=int,
        default=_config.GENERATIONS,
        help=f"Number of generations (default: {_config.GENERATIONS})",
    )
    parser.add_argument(
        "--step",
        type=float,
        default=_config.STEP_SIZE,
        help=f"RK4 step size (default: {_config.STEP_SIZE})",
    )
    parser.add_argument("--seed", type=int, help="Random seed for reproducible runs")
    parser.add_argument(
        "--top",
        type=int,
        default=_config.REPORT_TOP,
        help=f"Individuals printed per generation (default: {_config.REPORT_TOP})",
    )
    parser.add_argument(
        "--symbolic",
        action="store_true",
        help="Also print each reported expression in SymPy form",
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="Show program version"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=_config.LOG_LEVEL,
        help="Set logging level",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    return parser


def main_entry(argv: list[str] | None = None) -> int:
    """
    Main entry point for the odefinder CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = build_parser().parse_args(argv)

    if args.version:
        print(_config.VERSION)
        return 0

    setup_logging(level=args.log_level, log_file=args.log_file)

    if args.population < 1:
        print("Error: --population must be at least 1")
        return 1
    if args.generations < 0:
        print("Error: --generations cannot be negative")
        return 1

    evolution_config = EvolutionConfig(
        population_size=args.population,
        generations=args.generations,
        step=args.step,
        seed=args.seed,
    )
    registry = default_registry()

    def report(population: Population) -> None:
        print(format_generation_report(population, registry, args.top, args.symbolic))

    try:
        if args.csv:
            dataset = load_csv_dataset(
                args.csv, args.time_column, args.position_column
            )
        else:
            dataset = demo_dataset()

        population = discover_ode(
            dataset, registry, evolution_config, on_generation=report
        )
        best = population.best_fit()
    except OdeFinderError as e:
        _logger.error("%s", e)
        print(f"Error: {e}")
        return 1

    print()
    print(f"Best: {format_individual(best, registry, symbolic=True)}")
    return 0
