"""Genetic Programming engine for ODE discovery."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable

import numpy as np

from .. import config as _config
from ..types import ValidationError
from .expression import Expression
from .ode_simulation import Dataset
from .ode_simulation import fitness
from .operator_registry import OperatorRegistry
from .operator_registry import default_registry
from .operators import crossover
from .operators import mutate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Individual:
    """An expression paired with its fitness (lower is better, NaN unscorable)."""

    expression: Expression
    fitness: float

    def __lt__(self, other: Individual) -> bool:
        return sort_key(self) < sort_key(other)


def sort_key(individual: Individual) -> tuple[bool, float]:
    """Total order on fitness: ascending, with NaN after every finite value.

    All NaN fitnesses share one key, so a stable sort keeps their order.
    """
    if math.isnan(individual.fitness):
        return (True, 0.0)
    return (False, individual.fitness)


@dataclass
class EvolutionConfig:
    """Configuration for ODE discovery."""

    population_size: int = _config.POPULATION_SIZE
    generations: int = _config.GENERATIONS
    step: float = _config.STEP_SIZE
    elite_fraction: float = _config.ELITE_FRACTION
    selection_rate: float = _config.SELECTION_RATE
    max_length: int = _config.MAX_EXPRESSION_LENGTH
    constant_range: float = _config.CONSTANT_RANGE
    seed: int | None = None


class Population:
    """A generation of individuals fitted against one dataset.

    The dataset is fixed for the life of the population and of every
    population evolved from it.

    Example:
        >>> dataset = Dataset.from_function(lambda t: -np.cos(t), range(11))
        >>> rng = np.random.default_rng(0)
        >>> population = Population(dataset)
        >>> population.grow(100, default_registry(), rng)
        >>> population = population.evolve(rng)
        >>> population.generation
        1
    """

    def __init__(
        self,
        dataset: Dataset,
        config: EvolutionConfig | None = None,
        individuals: list[Individual] | None = None,
        generation: int = 0,
    ):
        self.dataset = dataset
        self.config = config or EvolutionConfig()
        self.individuals: list[Individual] = list(individuals or [])
        self.generation = generation

    def __len__(self) -> int:
        return len(self.individuals)

    def score(self, expression: Expression) -> float:
        """Fitness of an expression against this population's dataset."""
        return fitness(expression, self.dataset, self.config.step)

    def grow(self, n: int, registry: OperatorRegistry, rng: np.random.Generator) -> None:
        """Append ``n`` freshly generated and scored individuals."""
        if n < 0:
            raise ValidationError(f"Cannot grow a population by {n} individuals.")

        for _ in range(n):
            expression = Expression.generate(
                registry,
                rng,
                max_length=self.config.max_length,
                constant_range=self.config.constant_range,
            )
            self.individuals.append(Individual(expression, self.score(expression)))

    def ranked(self) -> list[Individual]:
        """Individuals sorted best first (stable, NaN last)."""
        return sorted(self.individuals, key=sort_key)

    def best_fit(self) -> Individual:
        """Sort the population in place and return its best individual."""
        if not self.individuals:
            raise ValidationError("Population is empty.")
        self.individuals.sort(key=sort_key)
        return self.individuals[0]

    def elite_count(self) -> int:
        # Small epsilon so that e.g. 70 * 0.1 still floors to 7.
        return int(math.floor(len(self.individuals) * self.config.elite_fraction + 1e-9))

    def evolve(self, rng: np.random.Generator) -> Population:
        """Produce the next generation.

        The best ``elite_count()`` individuals are carried over unchanged.
        Every other slot is filled by an offspring
        ``mutate(crossover(parent1, parent2))`` whose parents are picked by
        ``select``. The receiver is left untouched.

        Returns:
            New Population with the generation counter incremented

        Raises:
            ValidationError: If the population is empty
        """
        if not self.individuals:
            raise ValidationError("Cannot evolve an empty population.")

        ranked = self.ranked()
        scored = np.array([ind.fitness for ind in ranked if not math.isnan(ind.fitness)])
        n_elite = self.elite_count()

        new_individuals = ranked[:n_elite]
        for _ in range(len(ranked) - n_elite):
            parent1 = self.select(ranked, scored, rng)
            parent2 = self.select(ranked, scored, rng)

            offspring = mutate(crossover(parent1.expression, parent2.expression, rng), rng)
            new_individuals.append(Individual(offspring, self.score(offspring)))

        return Population(
            self.dataset, self.config, new_individuals, self.generation + 1
        )

    def select(
        self,
        ranked: list[Individual],
        scored: np.ndarray,
        rng: np.random.Generator,
    ) -> Individual:
        """Pick a parent biased toward low fitness.

        A threshold ``best + Exp(selection_rate)`` is drawn and the first
        individual (in ranked order) whose fitness reaches it is returned.
        When nothing reaches it the best individual is returned.

        Args:
            ranked: Individuals sorted best first
            scored: Non-NaN fitness values of ``ranked``, in the same order
            rng: Random generator
        """
        best = ranked[0]
        threshold = best.fitness + rng.exponential(1.0 / self.config.selection_rate)
        if len(scored) == 0 or math.isnan(threshold):
            return best

        idx = int(np.searchsorted(scored, threshold, side="left"))
        if idx >= len(scored):
            return best
        return ranked[idx]

    def stats(self) -> dict:
        """Summary of the current generation's fitness values."""
        values = np.array([ind.fitness for ind in self.individuals], dtype=float)
        finite = values[np.isfinite(values)]
        lengths = [len(ind.expression) for ind in self.individuals]

        return {
            "generation": self.generation,
            "population_size": len(self.individuals),
            "best": float(finite.min()) if len(finite) else float("nan"),
            "median": float(np.median(finite)) if len(finite) else float("nan"),
            "worst": float(finite.max()) if len(finite) else float("nan"),
            "unscorable": int(len(values) - len(finite)),
            "mean_length": float(np.mean(lengths)) if lengths else 0.0,
        }


def discover_ode(
    dataset: Dataset,
    registry: OperatorRegistry | None = None,
    config: EvolutionConfig | None = None,
    rng: np.random.Generator | None = None,
    on_generation: Callable[[Population], None] | None = None,
) -> Population:
    """Convenience function to search for ``dx/dt = f(t, x)`` fitting a dataset.

    Args:
        dataset: Observed samples
        registry: Operators to build expressions from (default operator set
                  if None)
        config: Search configuration (defaults if None)
        rng: Random generator (seeded from ``config.seed`` if None)
        on_generation: Called with each population before it is evolved and
                       with the final population

    Returns:
        The final population; ``best_fit()`` gives the discovered expression
    """
    config = config or EvolutionConfig()
    registry = registry or default_registry()
    if rng is None:
        rng = np.random.default_rng(config.seed)

    population = Population(dataset, config)
    population.grow(config.population_size, registry, rng)
    logger.info(
        "Grew %d individuals against %d samples (h=%g)",
        len(population),
        len(dataset),
        config.step,
    )

    for _gen in range(config.generations):
        _report(population, on_generation)
        population = population.evolve(rng)

    _report(population, on_generation)
    return population


def _report(
    population: Population, on_generation: Callable[[Population], None] | None
) -> None:
    stats = population.stats()
    logger.info(
        "Generation %d: best=%.6g median=%.6g unscorable=%d mean_length=%.1f",
        stats["generation"],
        stats["best"],
        stats["median"],
        stats["unscorable"],
        stats["mean_length"],
    )
    if on_generation is not None:
        on_generation(population)
