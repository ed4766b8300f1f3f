"""
Poll Exceptions
===============
Terminal failures of a poll run. Every failure is a PollError exposing the
kind of failure, the last attempt and the original cause.
"""

from enum import Enum
from typing import Optional

from .models import Attempt, TerminalState


class ErrorKind(str, Enum):
    """Failure categories surfaced to callers."""
    USER_BREAK = "user_break"
    STOP_TRIGGERED = "stop_triggered"
    UNCAUGHT = "uncaught"
    INTERRUPTED = "interrupted"


class PollError(Exception):
    """Base class for every terminal poll failure."""

    kind: ErrorKind
    state: TerminalState

    def __init__(
        self,
        message: str,
        attempt: Optional[Attempt] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.attempt = attempt
        self.cause = cause

    @property
    def attempts(self) -> int:
        """Number of attempts completed before the run ended."""
        return self.attempt.number if self.attempt else 0


class UserBreakError(PollError):
    """The operation reported Broken."""

    kind = ErrorKind.USER_BREAK
    state = TerminalState.USER_BROKEN

    def __init__(self, reason: str, attempt: Optional[Attempt] = None):
        super().__init__(f"Polling broken by operation: {reason}", attempt=attempt)
        self.reason = reason


class StopTriggeredError(PollError):
    """A stop policy fired before the operation finished."""

    kind = ErrorKind.STOP_TRIGGERED
    state = TerminalState.STOP_TRIGGERED

    def __init__(self, attempt: Attempt):
        super().__init__(
            f"Stopped polling after {attempt.number} attempts ({attempt.elapsed:.3f}s)",
            attempt=attempt,
        )


class UncaughtError(PollError):
    """The operation (or an attempt listener) raised an exception."""

    kind = ErrorKind.UNCAUGHT
    state = TerminalState.ERRORED

    def __init__(self, cause: BaseException, attempt: Optional[Attempt] = None):
        super().__init__(
            f"Operation raised {type(cause).__name__}: {cause}",
            attempt=attempt,
            cause=cause,
        )


class PollInterruptedError(PollError):
    """The run was cancelled or interrupted while waiting between attempts."""

    kind = ErrorKind.INTERRUPTED
    state = TerminalState.INTERRUPTED

    def __init__(
        self,
        attempt: Optional[Attempt] = None,
        cause: Optional[BaseException] = None,
    ):
        number = attempt.number if attempt else 0
        super().__init__(
            f"Polling interrupted after {number} attempts",
            attempt=attempt,
            cause=cause,
        )


class PollerConfigError(ValueError):
    """Raised when a poller or policy is constructed with invalid settings."""
    pass
