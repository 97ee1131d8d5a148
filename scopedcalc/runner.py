"""scopedcalc runner: orchestrates allocate → fill → evaluate → release.

Data flow per run:
1. Start: resolve settings, open a RunReport
2. Allocated: acquire a buffer of `size` slots (failure → Terminated, nothing to release)
3. Initialized: fill the buffer with 0..N-1
4. Evaluated: evaluate(a, b, op) into a tagged Outcome
5. Released: the buffer's `with` scope closes, whatever step 4 produced
6. Terminated

No retries, no loops back. The buffer is released exactly once whenever it
was allocated, including when an unexpected exception escapes steps 3-4.
"""

from __future__ import annotations

import logging
import time
from typing import Optional, Union

from scopedcalc.buffer import allocate, fill_indices
from scopedcalc.config import Settings
from scopedcalc.errors import AllocationFailure
from scopedcalc.evaluator import try_evaluate
from scopedcalc.models import OperandPair, Operation, RunReport, RunState

logger = logging.getLogger(__name__)


def _enter(report: RunReport, state: RunState) -> None:
    report.states.append(state)
    logger.debug("state → %s", state.value)


def run(
    size: Optional[int] = None,
    a: int = 10,
    b: int = 5,
    op: Union[Operation, str] = Operation.ADD,
    expected: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> RunReport:
    """Execute one run of the allocate/fill/evaluate/release sequence.

    Args:
        size: Slot count. Defaults to settings.buffer_size.
        a: Left operand.
        b: Right operand.
        op: Operation member or operator code.
        expected: Optional value a successful result is checked against.
        settings: Runtime settings. Read from the environment when omitted.

    Returns:
        RunReport with the visited states and the evaluation Outcome.

    Raises:
        ValueError: size is not a positive integer.
    """
    settings = settings or Settings.from_env()
    if size is None:
        size = settings.buffer_size
    op_code = op.value if isinstance(op, Operation) else str(op)
    report = RunReport(size=size, a=a, b=b, op=op_code, expected=expected)
    start = time.monotonic()

    # 1. Start
    _enter(report, RunState.START)

    # 2. Allocate
    try:
        buf = allocate(size, max_slots=settings.max_slots)
    except AllocationFailure as e:
        logger.warning("allocation failed: %s", e)
        report.allocation_error = str(e)
        _enter(report, RunState.TERMINATED)
        report.wall_clock_s = round(time.monotonic() - start, 6)
        return report

    with buf:
        _enter(report, RunState.ALLOCATED)

        # 3. Fill
        fill_indices(buf)
        _enter(report, RunState.INITIALIZED)

        # 4. Evaluate
        operands = OperandPair(a, b)
        report.outcome = try_evaluate(operands.a, operands.b, op)
        if not report.outcome.ok:
            logger.warning("evaluation failed: %s", report.outcome.message)
        _enter(report, RunState.EVALUATED)
        report.buffer_checksum = sum(buf)

    # 5. Released by the `with` scope above
    _enter(report, RunState.RELEASED)

    # 6. Terminate
    _enter(report, RunState.TERMINATED)
    report.wall_clock_s = round(time.monotonic() - start, 6)
    return report
