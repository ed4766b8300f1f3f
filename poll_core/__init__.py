"""
Poll Core Library
=================
Poll, retry and back off: run an operation until it reports completion.
"""

__version__ = "0.1.0"

# Retry engine
from poll_core.retry import (
    Attempt,
    OutcomeKind,
    TerminalState,
    Finished,
    Continue,
    Broken,
    finished,
    proceed,
    broken,
    ErrorKind,
    PollError,
    UserBreakError,
    StopTriggeredError,
    UncaughtError,
    PollInterruptedError,
    PollerConfigError,
    fixed_wait,
    random_wait,
    incrementing_wait,
    exponential_wait,
    fibonacci_wait,
    no_wait,
    combine_waits,
    stop_after_attempt,
    stop_after_delay,
    stop_never,
    stop_any,
    Poller,
    PollerConfig,
    PollerBuilder,
    PollHandle,
    poll_until,
)

# Configuration
from poll_core.config import PollerSettings

# Clock
from poll_core.clock import Clock, SystemClock, ManualClock

# Logging
from poll_core.logging_config import setup_logging

# Metrics
from poll_core.metrics import get_metrics_text

__all__ = [
    # Retry engine
    "Attempt",
    "OutcomeKind",
    "TerminalState",
    "Finished",
    "Continue",
    "Broken",
    "finished",
    "proceed",
    "broken",
    "ErrorKind",
    "PollError",
    "UserBreakError",
    "StopTriggeredError",
    "UncaughtError",
    "PollInterruptedError",
    "PollerConfigError",
    "fixed_wait",
    "random_wait",
    "incrementing_wait",
    "exponential_wait",
    "fibonacci_wait",
    "no_wait",
    "combine_waits",
    "stop_after_attempt",
    "stop_after_delay",
    "stop_never",
    "stop_any",
    "Poller",
    "PollerConfig",
    "PollerBuilder",
    "PollHandle",
    "poll_until",
    # Configuration
    "PollerSettings",
    # Clock
    "Clock",
    "SystemClock",
    "ManualClock",
    # Logging
    "setup_logging",
    # Metrics
    "get_metrics_text",
]
