"""
Poll Models
===========
Outcome variants reported by a polled operation and the Attempt record
produced for each invocation.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar, Union

T = TypeVar("T")


class OutcomeKind(str, Enum):
    """Classification of a single attempt."""
    FINISHED = "finished"
    CONTINUE = "continue"
    BROKEN = "broken"
    ERROR = "error"      # Operation raised instead of reporting an outcome


class TerminalState(str, Enum):
    """How a poll run ended."""
    SUCCEEDED = "succeeded"
    USER_BROKEN = "user_broken"
    STOP_TRIGGERED = "stop_triggered"
    ERRORED = "errored"
    INTERRUPTED = "interrupted"


@dataclass(frozen=True)
class Finished(Generic[T]):
    """The operation completed; ``value`` is returned to the caller."""
    value: T


@dataclass(frozen=True)
class Continue:
    """Not done yet; poll again unless a stop policy says otherwise."""
    reason: Optional[str] = None


@dataclass(frozen=True)
class Broken:
    """Unrecoverable condition; polling ends without further attempts."""
    reason: str


Outcome = Union[Finished, Continue, Broken]


def finished(value: Any = None) -> Finished:
    return Finished(value)


def proceed(reason: Optional[str] = None) -> Continue:
    return Continue(reason)


def broken(reason: str) -> Broken:
    return Broken(reason)


@dataclass(frozen=True)
class Attempt:
    """
    Record of one invocation of the polled operation.

    ``number`` is 1-based. ``elapsed`` is seconds since the poll run started,
    measured on the run's clock right after the invocation returned.
    """
    number: int
    elapsed: float
    kind: OutcomeKind
    value: Any = None
    reason: Optional[str] = None
    error: Optional[BaseException] = None

    @classmethod
    def from_outcome(cls, number: int, elapsed: float, outcome: Outcome) -> "Attempt":
        if isinstance(outcome, Finished):
            return cls(number, elapsed, OutcomeKind.FINISHED, value=outcome.value)
        if isinstance(outcome, Continue):
            return cls(number, elapsed, OutcomeKind.CONTINUE, reason=outcome.reason)
        if isinstance(outcome, Broken):
            return cls(number, elapsed, OutcomeKind.BROKEN, reason=outcome.reason)
        raise TypeError(
            f"Operation must return Finished, Continue or Broken, got {type(outcome).__name__}"
        )

    @classmethod
    def from_error(cls, number: int, elapsed: float, error: BaseException) -> "Attempt":
        return cls(number, elapsed, OutcomeKind.ERROR, error=error)
