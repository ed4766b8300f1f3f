"""
Stop Strategies
===============
Decide whether to abandon polling after an attempt reported Continue.

Like wait strategies, any callable taking an Attempt and returning a bool
can be used. Several strategies combine by logical OR.
"""

from typing import Protocol, Sequence

from .exceptions import PollerConfigError
from .models import Attempt


class StopStrategy(Protocol):
    def __call__(self, attempt: Attempt) -> bool:
        ...


class StopNever:
    """Poll until the operation finishes or breaks."""

    def __call__(self, attempt: Attempt) -> bool:
        return False

    def __repr__(self) -> str:
        return "StopNever()"


class StopAfterAttempt:
    """Stop once ``max_attempts`` attempts have been made."""

    def __init__(self, max_attempts: int):
        if max_attempts < 1:
            raise PollerConfigError(f"max_attempts must be >= 1, got {max_attempts}")
        self.max_attempts = max_attempts

    def __call__(self, attempt: Attempt) -> bool:
        return attempt.number >= self.max_attempts

    def __repr__(self) -> str:
        return f"StopAfterAttempt(max_attempts={self.max_attempts})"


class StopAfterDelay:
    """Stop once ``max_elapsed`` seconds have passed since the run started."""

    def __init__(self, max_elapsed: float):
        if max_elapsed < 0:
            raise PollerConfigError(f"max_elapsed must be >= 0, got {max_elapsed}")
        self.max_elapsed = max_elapsed

    def __call__(self, attempt: Attempt) -> bool:
        return attempt.elapsed >= self.max_elapsed

    def __repr__(self) -> str:
        return f"StopAfterDelay(max_elapsed={self.max_elapsed})"


class StopAny:
    """Stop when any of the wrapped strategies says so."""

    def __init__(self, strategies: Sequence[StopStrategy]):
        self.strategies = tuple(strategies)

    def __call__(self, attempt: Attempt) -> bool:
        return any(strategy(attempt) for strategy in self.strategies)

    def __repr__(self) -> str:
        return f"StopAny({list(self.strategies)!r})"


def stop_never() -> StopNever:
    return StopNever()


def stop_after_attempt(max_attempts: int) -> StopAfterAttempt:
    return StopAfterAttempt(max_attempts)


def stop_after_delay(max_elapsed: float) -> StopAfterDelay:
    return StopAfterDelay(max_elapsed)


def stop_any(*strategies: StopStrategy) -> StopAny:
    return StopAny(strategies)
