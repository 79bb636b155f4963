"""
Tree-Walking Interpreter
========================

Evaluates arithc expression trees directly instead of compiling them.
Used by `arithc --interpret` and as a reference for what the generated
code prints.

The arithmetic follows the generated x86-64 code:
- every intermediate result wraps to a signed 64-bit value
- division truncates toward zero (idiv), not toward negative infinity
- division by zero and the one overflowing quotient (-2**63 / -1) are
  errors, since idiv traps on both
"""

from typing import Iterable

from arithc.cc.ast import (
    Expression,
    IntegerLiteral,
    BinaryExpression,
    BinaryOperator,
    PrintStatement,
)
from arithc.cc.errors import EvaluationError


WORD_BITS = 64
_WORD_MASK = (1 << WORD_BITS) - 1
_SIGN_BIT = 1 << (WORD_BITS - 1)
WORD_MIN = -_SIGN_BIT


def wrap_word(value: int) -> int:
    """Reduce an integer to a signed 64-bit value."""
    value &= _WORD_MASK
    return value - (1 << WORD_BITS) if value & _SIGN_BIT else value


def _divide(left: int, right: int, expr: BinaryExpression) -> int:
    if right == 0:
        raise EvaluationError("division by zero", expr.location)
    # The quotient 2**63 does not fit; idiv traps just as for zero
    if left == WORD_MIN and right == -1:
        raise EvaluationError("division overflow", expr.location)
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def _apply(expr: BinaryExpression, left: int, right: int) -> int:
    if expr.operator == BinaryOperator.ADD:
        result = left + right
    elif expr.operator == BinaryOperator.SUBTRACT:
        result = left - right
    elif expr.operator == BinaryOperator.MULTIPLY:
        result = left * right
    else:
        result = _divide(left, right, expr)
    return wrap_word(result)


def evaluate(expr: Expression) -> int:
    """
    Compute the value of an expression tree.

    The left spine is walked in a loop, so long left-associative chains
    do not deepen the Python stack.
    """
    spine = []
    node = expr
    while isinstance(node, BinaryExpression):
        spine.append(node)
        node = node.left

    if not isinstance(node, IntegerLiteral):
        raise EvaluationError(
            f"cannot evaluate {type(node).__name__}",
            getattr(node, "location", None),
        )

    value = wrap_word(node.value)
    for parent in reversed(spine):
        value = _apply(parent, value, evaluate(parent.right))
    return value


class Interpreter:
    """Runs print statements and records what they print."""

    def __init__(self):
        self.printed: list[int] = []

    def execute(self, stmt: PrintStatement) -> int:
        value = evaluate(stmt.expression)
        self.printed.append(value)
        return value

    def run(self, statements: Iterable[PrintStatement]) -> list[int]:
        for stmt in statements:
            self.execute(stmt)
        return self.printed
