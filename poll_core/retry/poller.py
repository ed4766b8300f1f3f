"""
Poller
======
The poll loop: invoke an operation until it reports Finished or Broken, or
until a stop strategy gives up, waiting between attempts.

Three execution modes share the same semantics:

- ``Poller.start()`` blocks the calling thread.
- ``Poller.start_async()`` runs on an executor and returns a PollHandle.
- ``await Poller.poll()`` runs on the asyncio event loop.
"""

import asyncio
import inspect
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, Generic, Optional, Tuple, TypeVar

import structlog

from poll_core.clock import DEFAULT_CLOCK, Clock
from poll_core.metrics import record_attempt, record_run

from .exceptions import (
    PollError,
    PollInterruptedError,
    StopTriggeredError,
    UncaughtError,
    UserBreakError,
)
from .handle import PollHandle
from .models import Attempt, OutcomeKind, TerminalState
from .stop import StopStrategy
from .wait import NoWait, WaitStrategy

logger = structlog.get_logger(__name__)

T = TypeVar("T")

AttemptListener = Callable[[Attempt], None]


@dataclass(frozen=True)
class PollerConfig:
    """Immutable description of what to poll and how."""
    operation: Callable[[], Any]
    wait: WaitStrategy = field(default_factory=NoWait)
    stops: Tuple[StopStrategy, ...] = ()
    executor: Optional[Executor] = None
    name: Optional[str] = None
    listeners: Tuple[AttemptListener, ...] = ()
    clock: Clock = DEFAULT_CLOCK
    record_metrics: bool = True


def _operation_name(operation: Callable) -> str:
    """Stable name for metrics labels: never includes bound arguments or addresses."""
    while isinstance(operation, partial):
        operation = operation.func
    return getattr(operation, "__qualname__", None) or type(operation).__qualname__


class _PollRun:
    """State owned by a single poll run: attempt counter and elapsed clock."""

    def __init__(self, config: PollerConfig, name: str):
        self.config = config
        self.name = name
        self.last_attempt: Optional[Attempt] = None
        self._started: Optional[float] = None

    @property
    def attempts(self) -> int:
        return self.last_attempt.number if self.last_attempt else 0

    def begin(self) -> None:
        self._started = self.config.clock.monotonic()
        logger.debug("poll_started", poller=self.name)

    def elapsed(self) -> float:
        if self._started is None:
            return 0.0
        elapsed = self.config.clock.monotonic() - self._started
        if self.last_attempt is not None:
            elapsed = max(elapsed, self.last_attempt.elapsed)
        return max(0.0, elapsed)

    def attempt_from_result(self, result: Any) -> Attempt:
        number = self.attempts + 1
        elapsed = self.elapsed()
        try:
            return Attempt.from_outcome(number, elapsed, result)
        except TypeError as exc:
            return Attempt.from_error(number, elapsed, exc)

    def attempt_from_error(self, error: BaseException) -> Attempt:
        return Attempt.from_error(self.attempts + 1, self.elapsed(), error)

    def settle(self, attempt: Attempt) -> Optional[float]:
        """
        Act on an attempt.

        Returns None when the operation finished, otherwise the delay in
        seconds before the next attempt. Raises a PollError for every other
        terminal state.
        """
        self.last_attempt = attempt
        if self.config.record_metrics:
            record_attempt(self.name, attempt.kind.value)

        logger.debug(
            "poll_attempt",
            poller=self.name,
            attempt=attempt.number,
            outcome=attempt.kind.value,
            elapsed=round(attempt.elapsed, 3),
        )

        try:
            for listener in self.config.listeners:
                listener(attempt)
        except Exception as exc:
            raise self.fail(UncaughtError(exc, attempt)) from exc

        if attempt.kind is OutcomeKind.FINISHED:
            self.finish(TerminalState.SUCCEEDED)
            logger.info(
                "poll_succeeded",
                poller=self.name,
                attempts=attempt.number,
                elapsed=round(attempt.elapsed, 3),
            )
            return None

        if attempt.kind is OutcomeKind.ERROR:
            raise self.fail(UncaughtError(attempt.error, attempt)) from attempt.error

        if attempt.kind is OutcomeKind.BROKEN:
            raise self.fail(UserBreakError(attempt.reason, attempt))

        try:
            should_stop = any(stop(attempt) for stop in self.config.stops)
            delay = None if should_stop else float(self.config.wait(attempt))
        except Exception as exc:
            raise self.fail(UncaughtError(exc, attempt)) from exc

        if should_stop:
            raise self.fail(StopTriggeredError(attempt))

        if delay < 0:
            error = ValueError(f"Wait strategy returned negative delay: {delay}")
            raise self.fail(UncaughtError(error, attempt)) from error

        logger.debug(
            "poll_waiting",
            poller=self.name,
            attempt=attempt.number,
            delay=round(delay, 3),
            reason=attempt.reason,
        )
        return delay

    def interrupted(self, cause: Optional[BaseException] = None) -> PollInterruptedError:
        return self.fail(PollInterruptedError(self.last_attempt, cause))

    def finish(self, state: TerminalState) -> None:
        if self.config.record_metrics:
            record_run(self.name, state.value, self.elapsed())

    def fail(self, error: PollError) -> PollError:
        self.finish(error.state)
        log = logger.error if isinstance(error, UncaughtError) else logger.warning
        log(
            "poll_failed",
            poller=self.name,
            state=error.state.value,
            attempts=error.attempts,
            error=str(error),
        )
        return error


class Poller(Generic[T]):
    """
    Runs a poll loop described by a PollerConfig.

    A Poller holds no per-run state, so the same instance can run any number
    of independent polls concurrently.

    Example:
        poller = (
            PollerBuilder()
            .operation(check_job)
            .wait(exponential_wait(base=0.5, max_delay=10))
            .stop(stop_after_attempt(20))
            .build()
        )

        result = poller.start()             # blocking
        handle = poller.start_async()       # background
        result = handle.get(timeout=30)
    """

    def __init__(self, config: PollerConfig):
        self._config = config
        self._name = config.name or _operation_name(config.operation)
        self._owned_executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = threading.Lock()

    @property
    def config(self) -> PollerConfig:
        return self._config

    @property
    def name(self) -> str:
        return self._name

    def start(self, interrupt: Optional[threading.Event] = None) -> T:
        """
        Poll on the calling thread until a terminal state is reached.

        Args:
            interrupt: Event another thread may set to abandon the run. The
                wait between attempts returns as soon as it is set.

        Returns:
            The value carried by Finished

        Raises:
            UserBreakError, StopTriggeredError, UncaughtError, PollInterruptedError
        """
        run = _PollRun(self._config, self._name)
        return self._run(run, interrupt or threading.Event())

    def start_async(self, executor: Optional[Executor] = None) -> PollHandle[T]:
        """
        Submit the poll to an executor and return immediately.

        The executor is, in order of preference: the argument, the one in the
        config, or a thread pool owned by this Poller.
        """
        executor = executor or self._config.executor or self._default_executor()
        run = _PollRun(self._config, self._name)
        interrupt = threading.Event()
        future = executor.submit(self._run, run, interrupt)
        return PollHandle(future, interrupt, run)

    async def poll(self) -> T:
        """
        Poll on the running event loop.

        The operation may be a plain callable or return an awaitable.
        Cancelling the task while it waits between attempts ends the run
        with PollInterruptedError. Cancelling it while an async operation
        is being awaited propagates the CancelledError unchanged.
        """
        run = _PollRun(self._config, self._name)
        run.begin()
        while True:
            try:
                result = self._config.operation()
                if inspect.isawaitable(result):
                    result = await result
            except Exception as exc:
                attempt = run.attempt_from_error(exc)
            else:
                attempt = run.attempt_from_result(result)

            delay = run.settle(attempt)
            if delay is None:
                return attempt.value

            try:
                await asyncio.sleep(delay)
            except asyncio.CancelledError as exc:
                # The cancellation is consumed here and surfaced as PollInterruptedError
                task = asyncio.current_task()
                if task is not None and hasattr(task, "uncancel"):
                    task.uncancel()
                raise run.interrupted(exc) from exc

    def shutdown(self, wait: bool = True) -> None:
        """Shut down the executor this Poller created, if any."""
        with self._executor_lock:
            executor, self._owned_executor = self._owned_executor, None
        if executor is not None:
            executor.shutdown(wait=wait)

    def __enter__(self) -> "Poller[T]":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown()
        return False

    def _default_executor(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._owned_executor is None:
                self._owned_executor = ThreadPoolExecutor(thread_name_prefix=f"poller-{self._name}")
            return self._owned_executor

    def _run(self, run: _PollRun, interrupt: threading.Event) -> T:
        if interrupt.is_set():
            raise run.interrupted()

        run.begin()
        while True:
            try:
                result = self._config.operation()
            except Exception as exc:
                attempt = run.attempt_from_error(exc)
            else:
                attempt = run.attempt_from_result(result)

            delay = run.settle(attempt)
            if delay is None:
                return attempt.value

            if interrupt.wait(delay):
                raise run.interrupted()
