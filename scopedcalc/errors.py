"""Exception hierarchy for scopedcalc.

Two independent failure kinds reach the driver:
- AllocationFailure: no buffer exists, the whole run ends in failure.
- EvaluationFailure (DivisionByZero | UnsupportedOperation): the computation
  fails, the buffer is still released and the run still terminates.

BufferReleasedError guards the buffer's single-release invariant.
"""

from __future__ import annotations

from enum import Enum


class FailureKind(str, Enum):
    """Kinds of evaluation failure carried by a failed Outcome."""

    DIVISION_BY_ZERO = "division-by-zero"
    UNSUPPORTED_OPERATION = "unsupported-operation"


class ScopedCalcError(Exception):
    """Base exception for all scopedcalc errors."""


class AllocationFailure(ScopedCalcError):
    """The buffer could not be acquired. No release is owed."""

    def __init__(self, size: int, reason: str = "") -> None:
        self.size = size
        self.reason = reason
        msg = f"cannot allocate {size} slots"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class EvaluationFailure(ScopedCalcError):
    """An arithmetic evaluation failed. Terminal for that computation only."""

    kind: FailureKind


class DivisionByZero(EvaluationFailure, ZeroDivisionError):
    kind = FailureKind.DIVISION_BY_ZERO

    def __init__(self, dividend: int) -> None:
        self.dividend = dividend
        super().__init__(f"cannot divide {dividend} by zero")


class UnsupportedOperation(EvaluationFailure, ValueError):
    kind = FailureKind.UNSUPPORTED_OPERATION

    def __init__(self, code: object) -> None:
        self.code = code
        super().__init__(f"unsupported operator: {code!r}")


class BufferReleasedError(ScopedCalcError, RuntimeError):
    """A released buffer was read, written, or released again."""
