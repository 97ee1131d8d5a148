"""Owned integer buffer with a single release event.

allocate() hands out a Buffer of fixed-width signed 64-bit slots. The buffer
is bounds checked and, once released, refuses every further read, write or
release with BufferReleasedError. acquire() ties the release to a `with`
block so it happens on every exit path.
"""

from __future__ import annotations

import logging
from array import array
from contextlib import contextmanager
from typing import Iterator, Optional

from scopedcalc.errors import AllocationFailure, BufferReleasedError

logger = logging.getLogger(__name__)

SLOT_TYPECODE = "q"


class Buffer:
    """Contiguous block of integer slots with exactly one owner."""

    def __init__(self, slots: array) -> None:
        self._slots: Optional[array] = slots
        self._size = len(slots)

    @property
    def size(self) -> int:
        """Slot count fixed at creation. Still readable after release."""
        return self._size

    @property
    def released(self) -> bool:
        return self._slots is None

    def _live(self) -> array:
        if self._slots is None:
            raise BufferReleasedError(f"buffer of {self._size} slots already released")
        return self._slots

    def __len__(self) -> int:
        return len(self._live())

    def __getitem__(self, index: int) -> int:
        return self._live()[index]

    def __setitem__(self, index: int, value: int) -> None:
        self._live()[index] = value

    def __iter__(self) -> Iterator[int]:
        self._live()
        return self._iter_slots()

    def _iter_slots(self) -> Iterator[int]:
        # Re-checked per slot so an iterator outliving release() fails too
        for i in range(self._size):
            yield self._live()[i]

    def __repr__(self) -> str:
        state = "released" if self.released else "live"
        return f"Buffer(size={self._size}, {state})"

    def release(self) -> None:
        """Release the slots. A second call raises BufferReleasedError."""
        self._live()
        self._slots = None
        logger.debug("released buffer of %d slots", self._size)

    def __enter__(self) -> Buffer:
        self._live()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


def allocate(size: int, max_slots: Optional[int] = None) -> Buffer:
    """Acquire a buffer of `size` slots.

    Args:
        size: Positive slot count.
        max_slots: Optional limit; larger requests fail as the system would.

    Returns:
        A live Buffer owned by the caller. Content is not guaranteed zeroed.

    Raises:
        ValueError: size is not a positive int.
        AllocationFailure: the request cannot be satisfied. No buffer exists.
    """
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise ValueError(f"size must be a positive integer, got {size!r}")
    if max_slots is not None and size > max_slots:
        raise AllocationFailure(size, f"limit is {max_slots} slots")
    try:
        slots = array(SLOT_TYPECODE, [0]) * size
    except (MemoryError, OverflowError) as e:
        raise AllocationFailure(size, type(e).__name__) from e
    logger.debug("allocated buffer of %d slots", size)
    return Buffer(slots)


@contextmanager
def acquire(size: int, max_slots: Optional[int] = None) -> Iterator[Buffer]:
    """Allocate a buffer and release it when the block exits, however it exits."""
    buf = allocate(size, max_slots=max_slots)
    try:
        yield buf
    finally:
        buf.release()


def fill_indices(buf: Buffer) -> Buffer:
    """Write 0, 1, ..., N-1 into successive slots. Returns the same buffer."""
    for i in range(len(buf)):
        buf[i] = i
    return buf
