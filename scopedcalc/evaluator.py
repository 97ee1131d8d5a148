"""Binary arithmetic dispatch for scopedcalc.

Selects one of four integer operations by operator code. Division by zero
and unknown operator codes are failures, never numeric results.

Integer width: operands and results are Python ints, which are arbitrary
precision. Add, Subtract and Multiply therefore never overflow or wrap,
unlike a fixed-width implementation. Results wider than 64 bits are still
returned as-is; they simply cannot be stored in a Buffer slot.
"""

from __future__ import annotations

import operator
from typing import Callable, Union

from scopedcalc.errors import DivisionByZero, EvaluationFailure
from scopedcalc.models import Operation, Outcome


def _truncating_div(a: int, b: int) -> int:
    """Integer division rounding toward zero (-7 / 2 == -3)."""
    if b == 0:
        raise DivisionByZero(a)
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


_DISPATCH: dict[Operation, tuple[Callable[[int, int], int], str]] = {
    Operation.ADD: (operator.add, "Add"),
    Operation.SUBTRACT: (operator.sub, "Subtract"),
    Operation.MULTIPLY: (operator.mul, "Multiply"),
    Operation.DIVIDE: (_truncating_div, "Divide (truncating, b != 0)"),
}


def evaluate(a: int, b: int, op: Union[Operation, str]) -> int:
    """Apply the operation selected by `op` to a and b.

    Args:
        a: Left operand.
        b: Right operand.
        op: Operation member or operator code ('+', '-', '*', '/').

    Returns:
        The integer result.

    Raises:
        DivisionByZero: op is divide and b is 0.
        UnsupportedOperation: op is not one of the four operators.
    """
    fn, _ = _DISPATCH[Operation.parse(op)]
    return fn(a, b)


def try_evaluate(a: int, b: int, op: Union[Operation, str]) -> Outcome:
    """Like evaluate(), but returns a tagged Outcome instead of raising."""
    try:
        return Outcome.success(evaluate(a, b, op))
    except EvaluationFailure as e:
        return Outcome.from_error(e)


def list_operations() -> list[tuple[str, str]]:
    """(code, description) for every supported operation, in dispatch order."""
    return [(op.value, desc) for op, (_, desc) in _DISPATCH.items()]
