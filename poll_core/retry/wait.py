"""
Wait Strategies
===============
Compute the delay before the next attempt from the attempt that just ran.

A wait strategy is any callable taking an Attempt and returning a
non-negative number of seconds, so plain functions work as well as the
built-ins below.
"""

import random
from typing import Optional, Protocol, Sequence

from .exceptions import PollerConfigError
from .models import Attempt


class WaitStrategy(Protocol):
    def __call__(self, attempt: Attempt) -> float:
        ...


def _require_non_negative(name: str, value: float) -> None:
    if value < 0:
        raise PollerConfigError(f"{name} must be >= 0, got {value}")


class NoWait:
    """Poll again immediately."""

    def __call__(self, attempt: Attempt) -> float:
        return 0.0

    def __repr__(self) -> str:
        return "NoWait()"


class FixedWait:
    """Same delay after every attempt."""

    def __init__(self, delay: float):
        _require_non_negative("delay", delay)
        self.delay = delay

    def __call__(self, attempt: Attempt) -> float:
        return self.delay

    def __repr__(self) -> str:
        return f"FixedWait(delay={self.delay})"


class RandomWait:
    """Uniformly random delay within [min_delay, max_delay]."""

    def __init__(
        self,
        min_delay: float,
        max_delay: float,
        rng: Optional[random.Random] = None,
    ):
        _require_non_negative("min_delay", min_delay)
        if max_delay < min_delay:
            raise PollerConfigError(
                f"max_delay ({max_delay}) must be >= min_delay ({min_delay})"
            )
        self.min_delay = min_delay
        self.max_delay = max_delay
        self._rng = rng or random.Random()

    def __call__(self, attempt: Attempt) -> float:
        return self._rng.uniform(self.min_delay, self.max_delay)

    def __repr__(self) -> str:
        return f"RandomWait(min_delay={self.min_delay}, max_delay={self.max_delay})"


class IncrementingWait:
    """Delay grows linearly: start + increment * (n - 1), capped at max_delay."""

    def __init__(self, start: float = 0.0, increment: float = 1.0, max_delay: Optional[float] = None):
        _require_non_negative("start", start)
        _require_non_negative("increment", increment)
        self.start = start
        self.increment = increment
        self.max_delay = max_delay

    def __call__(self, attempt: Attempt) -> float:
        delay = self.start + self.increment * (attempt.number - 1)
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return max(0.0, delay)


class ExponentialWait:
    """
    Exponential backoff.

    The delay after attempt n is ``min(base * multiplier ** (n - 1), max_delay)``.
    """

    def __init__(self, base: float = 1.0, multiplier: float = 2.0, max_delay: float = 60.0):
        _require_non_negative("base", base)
        _require_non_negative("max_delay", max_delay)
        if multiplier < 1:
            raise PollerConfigError(f"multiplier must be >= 1, got {multiplier}")
        self.base = base
        self.multiplier = multiplier
        self.max_delay = max_delay

    def __call__(self, attempt: Attempt) -> float:
        try:
            delay = self.base * (self.multiplier ** (attempt.number - 1))
        except OverflowError:
            return self.max_delay
        return min(delay, self.max_delay)

    def __repr__(self) -> str:
        return (
            f"ExponentialWait(base={self.base}, multiplier={self.multiplier}, "
            f"max_delay={self.max_delay})"
        )


class FibonacciWait:
    """
    Fibonacci backoff: base * fib(n) after attempt n, capped at max_delay.

    fib(1) = fib(2) = 1, so the sequence of delays is base, base, 2*base, 3*base, 5*base...
    """

    def __init__(self, base: float = 1.0, max_delay: float = 60.0):
        _require_non_negative("base", base)
        _require_non_negative("max_delay", max_delay)
        self.base = base
        self.max_delay = max_delay

    def __call__(self, attempt: Attempt) -> float:
        previous, current = 0, 1
        for _ in range(attempt.number - 1):
            if self.base * current >= self.max_delay:
                return self.max_delay
            previous, current = current, previous + current
        return min(self.base * current, self.max_delay)

    def __repr__(self) -> str:
        return f"FibonacciWait(base={self.base}, max_delay={self.max_delay})"


class CombinedWait:
    """Sum of several strategies, e.g. exponential backoff plus random jitter."""

    def __init__(self, strategies: Sequence[WaitStrategy]):
        if not strategies:
            raise PollerConfigError("CombinedWait needs at least one strategy")
        self.strategies = tuple(strategies)

    def __call__(self, attempt: Attempt) -> float:
        return sum(strategy(attempt) for strategy in self.strategies)


def no_wait() -> NoWait:
    return NoWait()


def fixed_wait(delay: float) -> FixedWait:
    return FixedWait(delay)


def random_wait(min_delay: float, max_delay: float) -> RandomWait:
    return RandomWait(min_delay, max_delay)


def incrementing_wait(start: float = 0.0, increment: float = 1.0, max_delay: Optional[float] = None) -> IncrementingWait:
    return IncrementingWait(start, increment, max_delay)


def exponential_wait(base: float = 1.0, multiplier: float = 2.0, max_delay: float = 60.0) -> ExponentialWait:
    return ExponentialWait(base, multiplier, max_delay)


def fibonacci_wait(base: float = 1.0, max_delay: float = 60.0) -> FibonacciWait:
    return FibonacciWait(base, max_delay)


def combine_waits(*strategies: WaitStrategy) -> WaitStrategy:
    if len(strategies) == 1:
        return strategies[0]
    return CombinedWait(strategies)
