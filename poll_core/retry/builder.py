"""
Poller Builder
==============
Fluent construction of Poller instances.
"""

from concurrent.futures import Executor
from typing import TYPE_CHECKING, Any, Callable, List, Optional

from poll_core.clock import DEFAULT_CLOCK, Clock

from .exceptions import PollerConfigError
from .poller import AttemptListener, Poller, PollerConfig
from .stop import StopStrategy
from .wait import NoWait, WaitStrategy, combine_waits

if TYPE_CHECKING:
    from poll_core.config import PollerSettings


class PollerBuilder:
    """
    Collects the pieces of a PollerConfig.

    Example:
        poller = (
            PollerBuilder()
            .operation(lambda: finished(42) if ready() else proceed())
            .wait(fixed_wait(0.5))
            .stop(stop_after_attempt(10))
            .stop(stop_after_delay(30))
            .build()
        )
    """

    def __init__(self):
        self._operation: Optional[Callable[[], Any]] = None
        self._waits: List[WaitStrategy] = []
        self._stops: List[StopStrategy] = []
        self._listeners: List[AttemptListener] = []
        self._executor: Optional[Executor] = None
        self._name: Optional[str] = None
        self._clock: Clock = DEFAULT_CLOCK
        self._record_metrics = True

    @classmethod
    def from_settings(cls, settings: "PollerSettings") -> "PollerBuilder":
        """Builder pre-loaded with the wait and stop strategies from settings."""
        builder = cls().wait(settings.build_wait()).record_metrics(settings.metrics_enabled)
        for stop in settings.build_stops():
            builder.stop(stop)
        return builder

    def operation(self, operation: Callable[[], Any]) -> "PollerBuilder":
        if not callable(operation):
            raise PollerConfigError("operation must be callable")
        self._operation = operation
        return self

    def wait(self, strategy: WaitStrategy) -> "PollerBuilder":
        """Replace the wait strategy."""
        self._waits = [strategy]
        return self

    def wait_strategies(self, *strategies: WaitStrategy) -> "PollerBuilder":
        """Use the sum of several wait strategies."""
        self._waits = list(strategies)
        return self

    def stop(self, strategy: StopStrategy) -> "PollerBuilder":
        """Add a stop strategy. Polling stops when any of them fires."""
        self._stops.append(strategy)
        return self

    def on_attempt(self, listener: AttemptListener) -> "PollerBuilder":
        self._listeners.append(listener)
        return self

    def executor(self, executor: Executor) -> "PollerBuilder":
        self._executor = executor
        return self

    def name(self, name: str) -> "PollerBuilder":
        self._name = name
        return self

    def clock(self, clock: Clock) -> "PollerBuilder":
        self._clock = clock
        return self

    def record_metrics(self, enabled: bool) -> "PollerBuilder":
        self._record_metrics = enabled
        return self

    def build_config(self) -> PollerConfig:
        if self._operation is None:
            raise PollerConfigError("PollerBuilder needs an operation")
        wait = combine_waits(*self._waits) if self._waits else NoWait()
        return PollerConfig(
            operation=self._operation,
            wait=wait,
            stops=tuple(self._stops),
            executor=self._executor,
            name=self._name,
            listeners=tuple(self._listeners),
            clock=self._clock,
            record_metrics=self._record_metrics,
        )

    def build(self) -> Poller:
        return Poller(self.build_config())
