"""
Poll / Retry Engine
===================
Poll an operation until it finishes, with pluggable wait and stop strategies.

Usage:
    from poll_core.retry import (
        PollerBuilder, finished, proceed, broken,
        exponential_wait, stop_after_attempt,
    )

    def check():
        status = client.status(job_id)
        if status == "failed":
            return broken("job failed")
        return finished(status) if status == "done" else proceed()

    poller = (
        PollerBuilder()
        .operation(check)
        .wait(exponential_wait(base=0.5, max_delay=10))
        .stop(stop_after_attempt(20))
        .build()
    )
    poller.start()
"""

from .models import (
    Attempt,
    Outcome,
    OutcomeKind,
    TerminalState,
    Finished,
    Continue,
    Broken,
    finished,
    proceed,
    broken,
)

from .exceptions import (
    ErrorKind,
    PollError,
    UserBreakError,
    StopTriggeredError,
    UncaughtError,
    PollInterruptedError,
    PollerConfigError,
)

from .wait import (
    WaitStrategy,
    NoWait,
    FixedWait,
    RandomWait,
    IncrementingWait,
    ExponentialWait,
    FibonacciWait,
    CombinedWait,
    no_wait,
    fixed_wait,
    random_wait,
    incrementing_wait,
    exponential_wait,
    fibonacci_wait,
    combine_waits,
)

from .stop import (
    StopStrategy,
    StopNever,
    StopAfterAttempt,
    StopAfterDelay,
    StopAny,
    stop_never,
    stop_after_attempt,
    stop_after_delay,
    stop_any,
)

from .handle import PollHandle
from .poller import Poller, PollerConfig
from .builder import PollerBuilder
from .decorators import poll_until

__all__ = [
    # Models
    "Attempt",
    "Outcome",
    "OutcomeKind",
    "TerminalState",
    "Finished",
    "Continue",
    "Broken",
    "finished",
    "proceed",
    "broken",
    # Exceptions
    "ErrorKind",
    "PollError",
    "UserBreakError",
    "StopTriggeredError",
    "UncaughtError",
    "PollInterruptedError",
    "PollerConfigError",
    # Wait
    "WaitStrategy",
    "NoWait",
    "FixedWait",
    "RandomWait",
    "IncrementingWait",
    "ExponentialWait",
    "FibonacciWait",
    "CombinedWait",
    "no_wait",
    "fixed_wait",
    "random_wait",
    "incrementing_wait",
    "exponential_wait",
    "fibonacci_wait",
    "combine_waits",
    # Stop
    "StopStrategy",
    "StopNever",
    "StopAfterAttempt",
    "StopAfterDelay",
    "StopAny",
    "stop_never",
    "stop_after_attempt",
    "stop_after_delay",
    "stop_any",
    # Engine
    "PollHandle",
    "Poller",
    "PollerConfig",
    "PollerBuilder",
    "poll_until",
]
