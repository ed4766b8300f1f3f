"""
Metrics Recording Functions
===========================
Functions for recording poll attempts and runs.
"""

from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .definitions import (
    POLL_ATTEMPTS_TOTAL,
    POLL_REGISTRY,
    POLL_RUN_DURATION,
    POLL_RUNS_TOTAL,
)


def record_attempt(poller: str, outcome: str) -> None:
    """
    Record one invocation of a polled operation.

    Args:
        poller: Name of the poller
        outcome: finished, continue, broken or error
    """
    POLL_ATTEMPTS_TOTAL.labels(poller=poller, outcome=outcome).inc()


def record_run(poller: str, state: str, duration_seconds: float) -> None:
    """
    Record a finished poll run.

    Args:
        poller: Name of the poller
        state: Terminal state (succeeded, user_broken, stop_triggered, errored, interrupted)
        duration_seconds: Time from the first attempt to the terminal state
    """
    POLL_RUNS_TOTAL.labels(poller=poller, state=state).inc()
    POLL_RUN_DURATION.labels(poller=poller, state=state).observe(duration_seconds)


def get_metrics_text() -> bytes:
    """Poll metrics in Prometheus exposition format."""
    return generate_latest(POLL_REGISTRY)


def get_sample_value(name: str, labels: dict) -> float:
    """Current value of a sample, 0.0 if it has not been recorded yet."""
    value = POLL_REGISTRY.get_sample_value(name, labels)
    return value if value is not None else 0.0


METRICS_CONTENT_TYPE = CONTENT_TYPE_LATEST
