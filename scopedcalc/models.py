"""Data models for scopedcalc.

Operation enum, OperandPair, Outcome, RunState, ExitCode and RunReport: the
typed structures that flow through evaluator → runner → CLI.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from pathlib import Path
from typing import Optional

from scopedcalc.errors import EvaluationFailure, FailureKind, UnsupportedOperation


class Operation(str, Enum):
    """Supported binary arithmetic operations, keyed by operator code."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"

    @classmethod
    def parse(cls, code: object) -> Operation:
        """Map an operator code to an Operation.

        Raises UnsupportedOperation for anything outside the four operators.
        Invalid codes are rejected, never defaulted.
        """
        if isinstance(code, cls):
            return code
        if isinstance(code, str):
            try:
                return cls(code)
            except ValueError:
                pass
        raise UnsupportedOperation(code)


@dataclass(frozen=True)
class OperandPair:
    """Two integer operands, supplied once per evaluation."""

    a: int
    b: int


class RunState(str, Enum):
    """Driver states, visited strictly in order."""

    START = "start"
    ALLOCATED = "allocated"
    INITIALIZED = "initialized"
    EVALUATED = "evaluated"
    RELEASED = "released"
    TERMINATED = "terminated"


class ExitCode(IntEnum):
    """Process completion codes for the CLI."""

    OK = 0
    ALLOCATION_FAILED = 1
    USAGE = 2
    EVALUATION_FAILED = 3


@dataclass(frozen=True)
class Outcome:
    """Tagged evaluation result: a value on success, a failure kind otherwise."""

    value: Optional[int] = None
    kind: Optional[FailureKind] = None
    message: str = ""

    @classmethod
    def success(cls, value: int) -> Outcome:
        return cls(value=value)

    @classmethod
    def failure(cls, kind: FailureKind, message: str = "") -> Outcome:
        return cls(kind=kind, message=message)

    @classmethod
    def from_error(cls, exc: EvaluationFailure) -> Outcome:
        return cls.failure(exc.kind, str(exc))

    @property
    def ok(self) -> bool:
        return self.kind is None

    def to_dict(self) -> dict:
        if self.ok:
            return {"ok": True, "value": self.value}
        return {"ok": False, "kind": self.kind.value, "message": self.message}

    @classmethod
    def from_dict(cls, d: dict) -> Outcome:
        if d.get("ok"):
            return cls.success(d.get("value", 0))
        return cls.failure(FailureKind(d["kind"]), d.get("message", ""))


@dataclass
class RunReport:
    """Complete record of a single driver run."""

    size: int
    a: int
    b: int
    op: str
    expected: Optional[int] = None
    outcome: Optional[Outcome] = None
    states: list[RunState] = field(default_factory=list)
    allocation_error: str = ""
    # Sum of the slots read back before release
    buffer_checksum: Optional[int] = None
    wall_clock_s: float = 0.0

    @property
    def released(self) -> bool:
        return RunState.RELEASED in self.states

    @property
    def terminated(self) -> bool:
        return bool(self.states) and self.states[-1] == RunState.TERMINATED

    @property
    def exit_code(self) -> ExitCode:
        if self.allocation_error:
            return ExitCode.ALLOCATION_FAILED
        if self.outcome is not None and not self.outcome.ok:
            return ExitCode.EVALUATION_FAILED
        return ExitCode.OK

    @property
    def verdict(self) -> str:
        if self.allocation_error:
            return "allocation-failed"
        if self.outcome is None:
            return "incomplete"
        if not self.outcome.ok:
            return self.outcome.kind.value
        if self.expected is None:
            return "ok"
        return "correct" if self.outcome.value == self.expected else "wrong"

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        d = {
            "size": self.size,
            "a": self.a,
            "b": self.b,
            "op": self.op,
            "expected": self.expected,
            "states": [s.value for s in self.states],
            "allocation_error": self.allocation_error,
            "buffer_checksum": self.buffer_checksum,
            "wall_clock_s": self.wall_clock_s,
            "verdict": self.verdict,
            "exit_code": int(self.exit_code),
        }
        if self.outcome:
            d["outcome"] = self.outcome.to_dict()
        return d

    @classmethod
    def from_dict(cls, d: dict) -> RunReport:
        """Deserialize from a JSON dict."""
        outcome_data = d.get("outcome")
        return cls(
            size=d.get("size", 0),
            a=d.get("a", 0),
            b=d.get("b", 0),
            op=d.get("op", ""),
            expected=d.get("expected"),
            outcome=Outcome.from_dict(outcome_data) if outcome_data else None,
            states=[RunState(s) for s in d.get("states", [])],
            allocation_error=d.get("allocation_error", ""),
            buffer_checksum=d.get("buffer_checksum"),
            wall_clock_s=d.get("wall_clock_s", 0.0),
        )

    def save(self, path: Path) -> None:
        """Write the report as JSON."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")

    @classmethod
    def load(cls, path: Path) -> Optional[RunReport]:
        """Load a report written by save(). Returns None if missing or corrupt."""
        if not path.exists():
            return None
        try:
            return cls.from_dict(json.loads(path.read_text(encoding="utf-8")))
        except (ValueError, KeyError, TypeError, AttributeError, OSError):
            return None
