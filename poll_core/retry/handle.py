"""
Poll Handle
===========
Future-like handle for a poll run submitted to an executor.
"""

import threading
from concurrent.futures import CancelledError, Future
from typing import TYPE_CHECKING, Generic, Optional, TypeVar

from .exceptions import PollInterruptedError
from .models import Attempt

if TYPE_CHECKING:
    from .poller import _PollRun

T = TypeVar("T")


class PollHandle(Generic[T]):
    """
    Handle returned by Poller.start_async().

    Example:
        handle = poller.start_async()
        ...
        handle.cancel()     # wakes the run at its next wait
        handle.get()        # raises PollInterruptedError
    """

    def __init__(self, future: Future, interrupt: threading.Event, run: "_PollRun"):
        self._future = future
        self._interrupt = interrupt
        self._run = run
        self._cancel_lock = threading.Lock()
        self._interrupted: Optional[PollInterruptedError] = None

    def get(self, timeout: Optional[float] = None) -> T:
        """
        Wait for the run to end and return its value.

        Raises:
            concurrent.futures.TimeoutError: If the run is still going after ``timeout``
            PollError: The run's terminal failure
        """
        try:
            return self._future.result(timeout)
        except CancelledError as exc:
            # Cancelled before the executor picked it up; cancel() recorded the run
            with self._cancel_lock:
                error = self._interrupted
            raise error from exc

    def cancel(self) -> bool:
        """
        Request cancellation.

        A run still queued never starts and is recorded as interrupted right
        away; a running one ends with PollInterruptedError at its next wait.
        An operation call in progress is not interrupted. Returns False if
        the run had already ended.
        """
        if self._future.done():
            return False
        self._interrupt.set()
        with self._cancel_lock:
            if self._future.cancel():
                self._interrupted = self._run.interrupted()
        return True

    def cancelled(self) -> bool:
        return self._interrupt.is_set()

    def done(self) -> bool:
        return self._future.done()

    @property
    def attempts(self) -> int:
        """Attempts completed so far."""
        return self._run.attempts

    @property
    def last_attempt(self) -> Optional[Attempt]:
        return self._run.last_attempt
