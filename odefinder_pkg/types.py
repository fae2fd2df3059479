"""Exception types shared across odefinder_pkg."""

from __future__ import annotations


class OdeFinderError(Exception):
    """Base class for all errors raised by odefinder_pkg."""


class ValidationError(OdeFinderError, ValueError):
    """Raised when input introduced at a public boundary is malformed.

    Covers invalid registry tokens, empty or mismatched datasets, a
    non-positive integration step, an empty population passed to
    ``evolve`` and descriptions that do not parse into a well-formed
    expression.
    """


class UnknownTokenError(OdeFinderError, LookupError):
    """Raised when a token is not registered in an OperatorRegistry."""

    def __init__(self, token: str):
        super().__init__(f"Unknown token: {token!r}")
        self.token = token


class UnknownOperatorError(OdeFinderError, LookupError):
    """Raised when describing an operator that has no registered token."""


class EvaluationError(OdeFinderError, RuntimeError):
    """Stack depth after evaluation was not exactly one.

    Expressions built by generation, crossover and mutation are well-formed
    by construction, so this signals a defect upstream. It is never caught
    inside the package.
    """
