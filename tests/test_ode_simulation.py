"""Tests for datasets, RK4 integration and the area fitness."""

import math

import numpy as np
import pytest

from odefinder_pkg.symbolic_regression import POSITION
from odefinder_pkg.symbolic_regression import Dataset
from odefinder_pkg.symbolic_regression import Expression
from odefinder_pkg.symbolic_regression import Operator
from odefinder_pkg.symbolic_regression import State
from odefinder_pkg.symbolic_regression import fitness
from odefinder_pkg.symbolic_regression import rk4_step
from odefinder_pkg.symbolic_regression import simulate
from odefinder_pkg.types import ValidationError


def constant(value):
    return Expression((Operator.constant(value),))


def test_zero_rhs_on_constant_trajectory_scores_zero():
    dataset = Dataset([0.0, 1.0, 2.0], [2.0, 2.0, 2.0])
    assert fitness(constant(0.0), dataset, 0.1) == 0.0


def test_unit_rhs_on_linear_trajectory_scores_near_zero():
    dataset = Dataset.from_function(lambda t: t, np.arange(0.0, 6.0))
    assert fitness(constant(1.0), dataset, 0.1) == pytest.approx(0.0, abs=1e-9)


def test_two_sample_dataset():
    dataset = Dataset([0.0, 1.0], [0.0, 1.0])
    assert fitness(constant(1.0), dataset, 0.1) == pytest.approx(0.0, abs=1e-9)
    assert fitness(constant(0.0), dataset, 0.1) > 0.0


def test_fitness_single_segment_value():
    # Points (0, 0) then (0.5, 0) against the chord (0, 0)-(1, 1)
    dataset = Dataset([0.0, 1.0], [0.0, 1.0])
    assert fitness(constant(0.0), dataset, 0.5) == 0.25


def test_fitness_window_advances_between_samples():
    # Window (0,0)-(1,1): areas 0 and 0.25; window (1,1)-(2,0): areas 0.5 and 0.25
    dataset = Dataset([0.0, 1.0, 2.0], [0.0, 1.0, 0.0])
    assert fitness(constant(0.0), dataset, 0.5) == 1.0


def test_fitness_with_moving_trajectory():
    # dx/dt = 1 from (0, 1): (0.5, 1.5) against the flat chord (0, 1)-(1, 1)
    dataset = Dataset([0.0, 1.0], [1.0, 1.0])
    assert fitness(constant(1.0), dataset, 0.5) == pytest.approx(0.25)


def test_fitness_terminates_for_large_sample_times():
    # 1e17 + 0.1 == 1e17 in float64
    dataset = Dataset([1e17, 1e17 + 100.0], [0.0, 1.0])
    value = fitness(constant(0.0), dataset, 0.1)
    assert math.isfinite(value)
    assert value >= 0.0


def test_wrong_rhs_scores_worse(cosine_dataset, registry):
    # x = -cos(t) solves dx/dt = sin(t)
    exact = Expression((registry.lookup_by_token("SIN"), registry.lookup_by_token("TIME")))
    good = fitness(exact, cosine_dataset, 0.1)
    bad = fitness(constant(1.0), cosine_dataset, 0.1)
    assert 0.0 <= good < bad


def test_fitness_is_non_negative_or_nan(cosine_dataset, registry):
    rng = np.random.default_rng(11)
    for _ in range(50):
        expr = Expression.generate(registry, rng, max_length=24)
        value = fitness(expr, cosine_dataset, 0.1)
        assert math.isnan(value) or value >= 0.0


def test_divergent_simulation_is_unscorable(registry):
    # dx/dt = x^2 from x = 1 blows up before t = 1
    dataset = Dataset([0.0, 1.0, 2.0, 3.0], [1.0, 2.0, 3.0, 4.0])
    expr = Expression((registry.lookup_by_token("SQUARE"), POSITION))
    value = fitness(expr, dataset, 0.1)
    assert math.isnan(value) or math.isinf(value)


@pytest.mark.parametrize("step", [0.0, -0.1, float("nan"), float("inf")])
def test_invalid_step_rejected(step, cosine_dataset):
    with pytest.raises(ValidationError):
        fitness(constant(0.0), cosine_dataset, step)


@pytest.mark.parametrize(
    "times, positions",
    [
        ([], []),
        ([0.0], [1.0]),
        ([0.0, 1.0], [1.0]),
        ([0.0, 0.0, 1.0], [1.0, 1.0, 1.0]),
        ([1.0, 0.0], [1.0, 1.0]),
        ([0.0, float("nan")], [1.0, 1.0]),
        ([[0.0, 1.0]], [[1.0, 1.0]]),
    ],
)
def test_invalid_dataset_rejected(times, positions):
    with pytest.raises(ValidationError):
        Dataset(times, positions)


def test_dataset_is_read_only():
    dataset = Dataset([0.0, 1.0], [2.0, 3.0])
    with pytest.raises(ValueError):
        dataset.times[0] = 5.0
    assert len(dataset) == 2
    assert dataset.states()[1] == State(1.0, 3.0)


def test_rk4_step_constant_rhs():
    state = rk4_step(constant(2.0), State(0.0, 1.0), 0.5)
    assert state.time == 0.5
    assert state.position == pytest.approx(2.0)


def test_simulate_exponential_growth():
    # dx/dt = x, x(0) = 1
    states = simulate(Expression((POSITION,)), State(0.0, 1.0), 0.125, 1.0)
    assert len(states) == 9
    assert states[0] == State(0.0, 1.0)
    assert states[-1].time == 1.0
    assert states[-1].position == pytest.approx(math.e, rel=1e-4)


def test_simulate_rejects_invalid_step():
    with pytest.raises(ValidationError):
        simulate(constant(1.0), State(0.0, 0.0), 0.0, 1.0)


def test_simulate_terminates_for_large_start_time():
    states = simulate(constant(1.0), State(1e17, 0.0), 0.1, 1e17 + 100.0)
    assert states[-1].time >= 1e17 + 100.0
    assert states[-1].position == pytest.approx(0.1 * (len(states) - 1))
