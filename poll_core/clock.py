"""
Clock
=====
Monotonic time source used to measure elapsed time of a poll run.

Production code uses SystemClock. Tests inject ManualClock and advance it
explicitly, so time-based stop policies can be exercised without sleeping.
"""

import time
from typing import Protocol


class Clock(Protocol):
    """Source of monotonic time in seconds."""

    def monotonic(self) -> float:
        ...


class SystemClock:
    """Clock backed by time.monotonic()."""

    def monotonic(self) -> float:
        return time.monotonic()


class ManualClock:
    """
    Clock that only moves when told to.

    Example:
        clock = ManualClock()
        clock.advance(0.5)
        assert clock.monotonic() == 0.5
    """

    def __init__(self, start: float = 0.0):
        self._current = start

    def monotonic(self) -> float:
        return self._current

    def advance(self, seconds: float) -> None:
        """Move time forward. Negative amounts are rejected."""
        if seconds < 0:
            raise ValueError(f"Cannot advance time by negative amount: {seconds}")
        self._current += seconds


DEFAULT_CLOCK: Clock = SystemClock()
