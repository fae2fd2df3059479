"""Operator vocabulary for ODE right-hand-side expressions.

Key Classes:
    - OperatorKind: Enum for variable/constant/function operators
    - Operator: A single token of a prefix expression
    - OperatorRegistry: Bidirectional token <-> operator catalog
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from enum import auto
from typing import Any
from typing import Callable

import numpy as np
import sympy as sp

from ..types import UnknownTokenError
from ..types import ValidationError

TIME_TOKEN = "TIME"
POSITION_TOKEN = "POS"
RESERVED_TOKENS = (TIME_TOKEN, POSITION_TOKEN)


class OperatorKind(Enum):
    """Kinds of operators that may appear in an expression."""

    TIME = auto()  # Free variable t
    POSITION = auto()  # Free variable x
    CONSTANT = auto()  # Numeric constant, named or anonymous
    UNARY = auto()  # f(a)
    BINARY = auto()  # f(a, b)


@dataclass(frozen=True)
class Operator:
    """A single token of a prefix expression.

    Attributes:
        kind: Which variant this operator is
        value: For CONSTANT: the float value; for UNARY/BINARY: the function.
               Unused (None) for the two variables.
    """

    kind: OperatorKind
    value: Any = None

    @classmethod
    def constant(cls, value: float) -> Operator:
        return cls(OperatorKind.CONSTANT, float(value))

    @classmethod
    def unary(cls, fn: Callable[[float], float]) -> Operator:
        return cls(OperatorKind.UNARY, fn)

    @classmethod
    def binary(cls, fn: Callable[[float, float], float]) -> Operator:
        return cls(OperatorKind.BINARY, fn)

    @property
    def arity(self) -> int:
        """Number of operands this operator consumes."""
        if self.kind == OperatorKind.UNARY:
            return 1
        elif self.kind == OperatorKind.BINARY:
            return 2
        return 0

    @property
    def is_terminal(self) -> bool:
        """Whether this is a variable or a constant."""
        return self.arity == 0

    @property
    def is_variable(self) -> bool:
        return self.kind in (OperatorKind.TIME, OperatorKind.POSITION)

    @property
    def balance(self) -> int:
        """Change this token makes to the pending-operand counter.

        Terminals satisfy one pending operand (-1), unary operators replace
        the operand they fill with one of their own (0) and binary operators
        add one (+1).
        """
        return self.arity - 1

    def __repr__(self) -> str:
        if self.kind == OperatorKind.CONSTANT:
            return f"Operator.constant({self.value!r})"
        if self.is_variable:
            return f"Operator({self.kind.name})"
        name = getattr(self.value, "__name__", repr(self.value))
        return f"Operator({self.kind.name}, {name})"


TIME = Operator(OperatorKind.TIME)
POSITION = Operator(OperatorKind.POSITION)
VARIABLES = (TIME, POSITION)


def validate_token(token: str) -> None:
    """Check a display token against the naming rules.

    Tokens are non-empty, alphanumeric, do not start with a digit and do not
    collide with the reserved variable tokens.

    Raises:
        ValidationError: If the token breaks any rule
    """
    if not isinstance(token, str) or not token:
        raise ValidationError(f"Token {token!r} invalid, cannot be empty.")
    if not token.isalnum():
        raise ValidationError(
            f"Token {token!r} invalid, cannot contain non-alphanumeric characters."
        )
    if token[0].isdigit():
        raise ValidationError(
            f"Token {token!r} invalid, cannot begin with numeric characters."
        )
    if token in RESERVED_TOKENS:
        raise ValidationError(f"Token {token!r} is reserved for a free variable.")


class OperatorRegistry:
    """Bidirectional catalog of named operators.

    Always contains the two free variables under the reserved tokens
    ``TIME`` and ``POS``, so it is never empty. Functions and named constants
    are added by the caller before any expression is generated.

    Example:
        >>> registry = OperatorRegistry()
        >>> registry.insert(Operator.binary(np.add), "ADD", lambda a, b: a + b)
        >>> registry.lookup_by_token("ADD").arity
        2
    """

    def __init__(self):
        self._by_token: dict[str, Operator] = {}
        self._by_operator: dict[Operator, str] = {}
        self._sympy: dict[Operator, Callable | sp.Expr] = {}

        self._by_token[TIME_TOKEN] = TIME
        self._by_operator[TIME] = TIME_TOKEN
        self._by_token[POSITION_TOKEN] = POSITION
        self._by_operator[POSITION] = POSITION_TOKEN

    def __len__(self) -> int:
        return len(self._by_token)

    def __contains__(self, token: object) -> bool:
        return token in self._by_token

    def tokens(self) -> list[str]:
        """Registered tokens in insertion order (variables first)."""
        return list(self._by_token)

    def insert(
        self,
        operator: Operator,
        token: str,
        sympy_fn: Callable | sp.Expr | None = None,
    ) -> None:
        """Register an operator under a display token.

        Re-inserting an operator replaces its previous token; re-using a
        token for a different operator drops the operator it named before.

        Args:
            operator: Constant, unary or binary operator
            token: Display token (see validate_token)
            sympy_fn: Optional SymPy equivalent used by Expression.to_sympy:
                a callable for unary/binary operators, or a SymPy value
                (e.g. ``sp.pi``) for constants

        Raises:
            ValidationError: If the token is invalid or the operator is one
                of the reserved variables
        """
        validate_token(token)
        if operator.is_variable:
            raise ValidationError("The free variables cannot be re-registered.")

        old_token = self._by_operator.get(operator)
        if old_token is not None:
            del self._by_token[old_token]

        displaced = self._by_token.get(token)
        if displaced is not None and displaced != operator:
            del self._by_operator[displaced]
            self._sympy.pop(displaced, None)

        self._by_token[token] = operator
        self._by_operator[operator] = token
        if sympy_fn is not None:
            self._sympy[operator] = sympy_fn
        else:
            self._sympy.pop(operator, None)

    def lookup_by_token(self, token: str) -> Operator:
        """Return the operator registered under ``token``.

        Raises:
            UnknownTokenError: If the token is not registered
        """
        try:
            return self._by_token[token]
        except KeyError:
            raise UnknownTokenError(token) from None

    def lookup_by_operator(self, operator: Operator) -> str | None:
        """Return the token of a registered operator, or None.

        Anonymous constants are never registered, so they always return None.
        """
        return self._by_operator.get(operator)

    def sympy_equivalent(self, operator: Operator) -> Callable | sp.Expr | None:
        return self._sympy.get(operator)

    def random_operator(self, rng: np.random.Generator) -> tuple[Operator, str]:
        """Pick a registered entry uniformly, variables included."""
        tokens = list(self._by_token)
        token = tokens[int(rng.integers(len(tokens)))]
        return self._by_token[token], token


# Operator set of the original command line demo: (token, kind, numpy, sympy)
DEFAULT_OPERATORS: list[tuple[str, OperatorKind, Callable, Callable]] = [
    ("ADD", OperatorKind.BINARY, np.add, lambda a, b: a + b),
    ("SUB", OperatorKind.BINARY, np.subtract, lambda a, b: a - b),
    ("MUL", OperatorKind.BINARY, np.multiply, lambda a, b: a * b),
    ("DIV", OperatorKind.BINARY, np.divide, lambda a, b: a / b),
    ("SQUARE", OperatorKind.UNARY, np.square, lambda a: a**2),
    ("SQRT", OperatorKind.UNARY, np.sqrt, sp.sqrt),
    ("COS", OperatorKind.UNARY, np.cos, sp.cos),
    ("SIN", OperatorKind.UNARY, np.sin, sp.sin),
    ("TAN", OperatorKind.UNARY, np.tan, sp.tan),
]


def default_registry() -> OperatorRegistry:
    """Build a registry with basic arithmetic and trigonometric operators."""
    registry = OperatorRegistry()
    for token, kind, fn, sympy_fn in DEFAULT_OPERATORS:
        registry.insert(Operator(kind, fn), token, sympy_fn)
    return registry
