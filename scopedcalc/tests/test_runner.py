"""End-to-end tests for the driver.

Each run must visit the states in order, release the buffer whenever one
was allocated, and reach the terminal state whatever the evaluation did.
"""

import logging

import pytest

from scopedcalc import runner
from scopedcalc.buffer import Buffer
from scopedcalc.config import Settings
from scopedcalc.errors import BufferReleasedError, FailureKind
from scopedcalc.models import ExitCode, Operation, RunState
from scopedcalc.runner import run

FULL_PATH = [
    RunState.START,
    RunState.ALLOCATED,
    RunState.INITIALIZED,
    RunState.EVALUATED,
    RunState.RELEASED,
    RunState.TERMINATED,
]


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def allocations(monkeypatch):
    """Record every buffer the driver allocates."""
    seen: list[Buffer] = []
    real_allocate = runner.allocate

    def tracking_allocate(size, max_slots=None):
        buf = real_allocate(size, max_slots=max_slots)
        seen.append(buf)
        return buf

    monkeypatch.setattr(runner, "allocate", tracking_allocate)
    return seen


# --- Success path ---

def test_default_run_adds_and_releases(settings, allocations):
    report = run(size=100, a=10, b=5, op="+", settings=settings)

    assert report.outcome.ok
    assert report.outcome.value == 15
    assert report.states == FULL_PATH
    assert report.released and report.terminated
    assert report.exit_code == ExitCode.OK
    assert report.buffer_checksum == sum(range(100))
    assert len(allocations) == 1
    assert allocations[0].released


def test_size_defaults_to_settings(allocations):
    report = run(settings=Settings(buffer_size=7))
    assert report.size == 7
    assert report.buffer_checksum == sum(range(7))
    assert allocations[0].size == 7


def test_accepts_operation_member(settings):
    report = run(size=1, a=3, b=4, op=Operation.MULTIPLY, settings=settings)
    assert report.op == "*"
    assert report.outcome.value == 12


@pytest.mark.parametrize("expected,verdict", [(15, "correct"), (16, "wrong"), (None, "ok")])
def test_expected_value_sets_verdict(settings, expected, verdict):
    report = run(size=10, a=10, b=5, op="+", expected=expected, settings=settings)
    assert report.verdict == verdict
    assert report.exit_code == ExitCode.OK


# --- Evaluation failure ---

def test_division_by_zero_still_releases(settings, allocations):
    report = run(size=100, a=10, b=0, op="/", settings=settings)

    assert not report.outcome.ok
    assert report.outcome.kind == FailureKind.DIVISION_BY_ZERO
    assert report.states == FULL_PATH
    assert report.terminated
    assert allocations[0].released
    assert report.buffer_checksum == sum(range(100))
    assert report.exit_code == ExitCode.EVALUATION_FAILED


def test_unsupported_operator_still_releases(settings, allocations):
    report = run(size=5, a=1, b=2, op="%", settings=settings)

    assert report.outcome.kind == FailureKind.UNSUPPORTED_OPERATION
    assert report.states == FULL_PATH
    assert allocations[0].released
    assert report.verdict == "unsupported-operation"


def test_evaluation_failure_is_logged(settings, caplog):
    with caplog.at_level(logging.WARNING, logger="scopedcalc"):
        run(size=1, a=1, b=0, op="/", settings=settings)
    assert "evaluation failed" in caplog.text


# --- Allocation failure ---

def test_allocation_failure_terminates_without_release(allocations):
    report = run(size=500, settings=Settings(max_slots=100))

    assert report.allocation_error
    assert report.states == [RunState.START, RunState.TERMINATED]
    assert not report.released
    assert report.terminated
    assert report.outcome is None
    assert report.buffer_checksum is None
    assert report.exit_code == ExitCode.ALLOCATION_FAILED
    assert report.verdict == "allocation-failed"
    assert allocations == []


def test_non_positive_size_is_a_caller_error(settings):
    with pytest.raises(ValueError):
        run(size=0, settings=settings)


# --- Unexpected faults ---

def test_downstream_fault_releases_then_propagates(settings, allocations, monkeypatch):
    def broken_fill(buf):
        raise RuntimeError("fill exploded")

    monkeypatch.setattr(runner, "fill_indices", broken_fill)

    with pytest.raises(RuntimeError, match="fill exploded"):
        run(size=10, settings=settings)
    assert allocations[0].released


def test_buffer_cannot_be_used_after_run(settings, allocations):
    run(size=10, settings=settings)
    with pytest.raises(BufferReleasedError):
        allocations[0][0]
    with pytest.raises(BufferReleasedError):
        allocations[0].release()


def test_transitions_logged_at_debug(settings, caplog):
    with caplog.at_level(logging.DEBUG, logger="scopedcalc"):
        run(size=2, settings=settings)
    for state in FULL_PATH:
        assert f"state → {state.value}" in caplog.text
