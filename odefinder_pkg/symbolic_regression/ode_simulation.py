"""ODE simulation and fitness for candidate right-hand sides.

A candidate Expression is read as ``dx/dt = f(t, x)`` and integrated with
the classical 4th-order Runge-Kutta method. Its fitness is the area between
the simulated trajectory and the piecewise-linear interpolation of the
observed samples, so lower is better and 0 is a perfect fit.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable
from typing import Sequence

import numpy as np

from ..types import ValidationError
from .expression import Expression

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class State:
    """A point (time, position) on a trajectory."""

    time: float
    position: float


@dataclass(frozen=True, eq=False)
class Dataset:
    """Observed trajectory samples.

    Attributes:
        times: Sample times, strictly increasing
        positions: Position observed at each time

    Both arrays are copied and made read-only, so a Dataset never changes
    after construction.
    """

    times: np.ndarray
    positions: np.ndarray

    def __post_init__(self):
        times = np.array(self.times, dtype=float)
        positions = np.array(self.positions, dtype=float)

        if times.ndim != 1 or positions.ndim != 1:
            raise ValidationError("Time and position data must be one-dimensional.")
        if len(times) != len(positions):
            raise ValidationError("Time and position data must be of equal lengths.")
        if len(times) == 0:
            raise ValidationError("Time and position data cannot be empty.")
        if len(times) < 2:
            raise ValidationError(
                "At least two samples are needed to form an interpolation segment."
            )
        if not np.all(np.isfinite(times)):
            raise ValidationError("Time data must be finite.")
        if not np.all(np.diff(times) > 0):
            raise ValidationError("Time data must be strictly increasing.")

        times.setflags(write=False)
        positions.setflags(write=False)
        object.__setattr__(self, "times", times)
        object.__setattr__(self, "positions", positions)

    def __len__(self) -> int:
        return len(self.times)

    @classmethod
    def from_function(
        cls, fn: Callable[[np.ndarray], np.ndarray], times: Sequence[float]
    ) -> Dataset:
        """Sample a known trajectory ``x = fn(t)`` at the given times."""
        times = np.asarray(times, dtype=float)
        return cls(times, fn(times))

    def states(self) -> list[State]:
        return [State(t, x) for t, x in zip(self.times.tolist(), self.positions.tolist())]


def _validate_step(step: float) -> None:
    if not (isinstance(step, (int, float)) and math.isfinite(step) and step > 0):
        raise ValidationError(f"Step size must be a positive finite number, got {step!r}.")


def rk4_step(expression: Expression, state: State, step: float) -> State:
    """Advance one classical Runge-Kutta step of ``dx/dt = expression(t, x)``."""
    t, x = state.time, state.position
    half = step / 2.0

    k1 = expression.evaluate(t, x)
    k2 = expression.evaluate(t + half, x + half * k1)
    k3 = expression.evaluate(t + half, x + half * k2)
    k4 = expression.evaluate(t + step, x + step * k3)

    return State(t + step, x + (step / 6.0) * (k1 + 2.0 * k2 + 2.0 * k3 + k4))


def _advance(
    expression: Expression, state: State, step: float, t0: float, n_steps: int
) -> State:
    # t0 + n*h, not a running sum: for large t, t + h rounds back to t.
    nxt = rk4_step(expression, state, step)
    return State(t0 + n_steps * step, nxt.position)


def _triangle_area(
    prev: tuple[float, float], nxt: tuple[float, float], cur: tuple[float, float]
) -> float:
    # Shoelace formula over (time, position) coordinates.
    return (
        abs(
            (cur[0] - nxt[0]) * (prev[1] - cur[1])
            - (cur[0] - prev[0]) * (nxt[1] - cur[1])
        )
        / 2.0
    )


def fitness(expression: Expression, dataset: Dataset, step: float) -> float:
    """Score an expression by simulating it against the dataset.

    Starting from the first sample, the simulation is stepped until the data
    runs out. Before every step the area of the triangle formed by the
    previous sample, the next sample and the current simulated point is
    accumulated; the sample window moves on once the simulated time reaches
    the next sample.

    Args:
        expression: Candidate right-hand side
        dataset: Observed samples
        step: RK4 step size h

    Returns:
        Accumulated area (>= 0), or NaN if the simulation diverged or an
        operator function raised an arithmetic error

    Raises:
        ValidationError: If the step is not a positive finite number
    """
    _validate_step(step)

    times = dataset.times.tolist()
    positions = dataset.positions.tolist()

    prev_idx, next_idx = 0, 1
    current = State(times[0], positions[0])
    n_steps = 0
    total = 0.0

    try:
        while next_idx < len(times):
            prev = (times[prev_idx], positions[prev_idx])
            nxt = (times[next_idx], positions[next_idx])
            total += _triangle_area(prev, nxt, (current.time, current.position))

            n_steps += 1
            current = _advance(expression, current, step, times[0], n_steps)

            if current.time >= nxt[0]:
                prev_idx = next_idx
                next_idx += 1
    except (ArithmeticError, ValueError) as e:
        logger.debug("Simulation failed at t=%s: %s", current.time, e)
        return float("nan")

    return float(total)


def simulate(
    expression: Expression, initial: State, step: float, until: float
) -> list[State]:
    """Integrate from ``initial`` until the simulated time reaches ``until``.

    Returns:
        All states visited, including the initial one
    """
    _validate_step(step)

    states = [initial]
    current = initial
    n_steps = 0
    while current.time < until:
        n_steps += 1
        current = _advance(expression, current, step, initial.time, n_steps)
        states.append(current)
    return states
