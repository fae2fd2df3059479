"""Prefix-notation expressions for ODE right-hand sides.

An Expression is an immutable sequence of Operators in Polish notation,
e.g. ``ADD TIME SQUARE POS`` for ``t + x**2``. Every expression is
well-formed: scanning left to right with a pending-operand counter that
starts at 1 (terminals -1, unary 0, binary +1), the counter reaches 0 at the
last token and never earlier.

Key Classes:
    - Expression: Token sequence with generation, evaluation and printing
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

import numpy as np
import sympy as sp

from .. import config
from ..types import EvaluationError
from ..types import UnknownOperatorError
from ..types import UnknownTokenError
from ..types import ValidationError
from .operator_registry import POSITION
from .operator_registry import TIME
from .operator_registry import Operator
from .operator_registry import OperatorKind
from .operator_registry import OperatorRegistry

logger = logging.getLogger(__name__)

# Separating character for descriptions. Tokens are alphanumeric only.
SEP_CHAR = " "

# Categories drawn during generation. The registry gets two of five slots.
_CATEGORY_TIME = 0
_CATEGORY_POSITION = 1
_CATEGORY_CONSTANT = 2
_N_TERMINAL_CATEGORIES = 3
_N_CATEGORIES = 5


def is_well_formed(operators: Iterable[Operator]) -> bool:
    """Check the arity-balance invariant of a token sequence."""
    operators = list(operators)
    pending = 1
    for i, operator in enumerate(operators):
        pending += operator.balance
        if pending == 0:
            return i == len(operators) - 1
    return False


@dataclass(frozen=True)
class Expression:
    """A well-formed prefix expression over TIME, POS and registered operators.

    Instances are never modified; genetic operators always build new ones.

    Attributes:
        operators: Tokens in prefix order
    """

    operators: tuple[Operator, ...]

    def __post_init__(self):
        object.__setattr__(self, "operators", tuple(self.operators))

    def __len__(self) -> int:
        return len(self.operators)

    def __iter__(self):
        return iter(self.operators)

    @staticmethod
    def generate(
        registry: OperatorRegistry,
        rng: np.random.Generator,
        max_length: int | None = None,
        constant_range: float | None = None,
    ) -> Expression:
        """Generate a random well-formed expression.

        Each token is drawn from five equally likely categories: TIME, POS,
        an anonymous constant, or (two slots) a uniformly chosen registry
        entry. Generation stops as soon as no operand is pending.

        Args:
            registry: Operators to draw from
            rng: Random generator
            max_length: Once the committed tokens plus pending operands could
                exceed this, only terminals are drawn (default from config)
            constant_range: Anonymous constants are uniform in
                [-constant_range, constant_range] (default from config)

        Returns:
            New random Expression of at most ``max_length`` tokens
        """
        if max_length is None:
            max_length = config.MAX_EXPRESSION_LENGTH
        if constant_range is None:
            constant_range = config.CONSTANT_RANGE
        if max_length < 1:
            raise ValidationError("max_length must be at least 1.")

        operators: list[Operator] = []
        pending = 1
        while pending > 0:
            # A binary draw grows committed + pending by two.
            if len(operators) + pending + 2 > max_length:
                category = int(rng.integers(_N_TERMINAL_CATEGORIES))
            else:
                category = int(rng.integers(_N_CATEGORIES))

            if category == _CATEGORY_TIME:
                operator = TIME
            elif category == _CATEGORY_POSITION:
                operator = POSITION
            elif category == _CATEGORY_CONSTANT:
                operator = Operator.constant(
                    rng.uniform(-constant_range, constant_range)
                )
            else:
                operator, _token = registry.random_operator(rng)

            operators.append(operator)
            pending += operator.balance

        return Expression(tuple(operators))

    def evaluate(self, time: float, position: float) -> float:
        """Evaluate the expression at a given time and position.

        Tokens are processed in reverse on a value stack. A binary operator
        pops ``arg1`` then ``arg2`` and pushes ``f(arg1, arg2)``, so the
        prefix tokens ``SUB A B`` mean ``A - B``.

        Arithmetic is carried out on numpy float64 with floating point
        warnings silenced; overflow and invalid operations give inf/NaN.

        Raises:
            EvaluationError: If the stack does not end with exactly one value
        """
        stack: list[np.float64] = []
        t = np.float64(time)
        x = np.float64(position)

        with np.errstate(all="ignore"):
            for operator in reversed(self.operators):
                kind = operator.kind
                if kind == OperatorKind.TIME:
                    stack.append(t)
                elif kind == OperatorKind.POSITION:
                    stack.append(x)
                elif kind == OperatorKind.CONSTANT:
                    stack.append(np.float64(operator.value))
                elif kind == OperatorKind.UNARY:
                    if not stack:
                        self._malformed("no operand left for a unary operator")
                    arg = stack.pop()
                    stack.append(operator.value(arg))
                else:
                    if len(stack) < 2:
                        self._malformed("fewer than two operands for a binary operator")
                    arg1 = stack.pop()
                    arg2 = stack.pop()
                    stack.append(operator.value(arg1, arg2))

        if len(stack) == 0:
            self._malformed("no operands remaining in the stack")
        if len(stack) > 1:
            self._malformed("more than one operand remaining in the stack")
        return float(stack[0])

    def _malformed(self, reason: str):
        logger.error("Malformed expression of %d tokens: %s", len(self), reason)
        raise EvaluationError(f"Malformed expression, {reason}.")

    def describe(self, registry: OperatorRegistry) -> str:
        """Render the expression as space-separated prefix tokens.

        Registered operators print as their token and anonymous constants as
        their decimal value. Constants compare by value, so a constant equal to
        a named one prints as that name.

        Raises:
            UnknownOperatorError: For an unregistered unary/binary operator
        """
        return SEP_CHAR.join(_token_for(operator, registry) for operator in self)

    @classmethod
    def parse(cls, description: str, registry: OperatorRegistry) -> Expression:
        """Build an expression from the output of ``describe``.

        Registered tokens take precedence; any other token must be a number
        and becomes an anonymous constant.

        Raises:
            UnknownTokenError: For a token that is neither registered nor numeric
            ValidationError: If the tokens do not form a well-formed expression
        """
        operators = []
        for token in description.split():
            if token in registry:
                operators.append(registry.lookup_by_token(token))
                continue
            try:
                operators.append(Operator.constant(float(token)))
            except ValueError:
                raise UnknownTokenError(token) from None

        if not is_well_formed(operators):
            raise ValidationError(
                f"Description {description!r} is not a well-formed prefix expression."
            )
        return cls(tuple(operators))

    def to_sympy(self, registry: OperatorRegistry) -> sp.Expr:
        """Convert to a SymPy expression over symbols ``t`` and ``x``.

        Operators registered without a SymPy equivalent become undefined
        SymPy functions named after their token.
        """
        t, x = sp.symbols("t x")
        stack: list[sp.Expr] = []
        for operator in reversed(self.operators):
            kind = operator.kind
            if kind == OperatorKind.TIME:
                stack.append(t)
            elif kind == OperatorKind.POSITION:
                stack.append(x)
            elif kind == OperatorKind.CONSTANT:
                equivalent = registry.sympy_equivalent(operator)
                stack.append(
                    equivalent if equivalent is not None else sp.Float(operator.value)
                )
            else:
                fn = registry.sympy_equivalent(operator)
                if fn is None:
                    fn = sp.Function(_token_for(operator, registry))
                args = [stack.pop() for _ in range(operator.arity)]
                stack.append(fn(*args))
        return stack[0]

    def __str__(self) -> str:
        return f"Expression({len(self)} tokens)"


def _token_for(operator: Operator, registry: OperatorRegistry) -> str:
    token = registry.lookup_by_operator(operator)
    if operator.kind == OperatorKind.CONSTANT:
        # Constants are identified by value: one equal to a named constant
        # is that constant.
        return token if token is not None else repr(float(operator.value))
    if token is not None:
        return token
    raise UnknownOperatorError(f"Encountered operator not in registry: {operator!r}")


def describe(expression: Expression, registry: OperatorRegistry) -> str:
    """Module-level alias of ``Expression.describe`` for reporting code."""
    return expression.describe(registry)
