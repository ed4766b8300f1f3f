"""
Prometheus Metrics Definitions
==============================
Prometheus metric definitions for poll runs.
"""

from prometheus_client import CollectorRegistry, Counter, Histogram

# Custom registry so poll metrics can be exported on their own
POLL_REGISTRY = CollectorRegistry()

POLL_RUNS_TOTAL = Counter(
    name="poll_runs_total",
    documentation="Completed poll runs by terminal state",
    labelnames=["poller", "state"],
    registry=POLL_REGISTRY,
)

POLL_ATTEMPTS_TOTAL = Counter(
    name="poll_attempts_total",
    documentation="Operation invocations by outcome",
    labelnames=["poller", "outcome"],
    registry=POLL_REGISTRY,
)

POLL_RUN_DURATION = Histogram(
    name="poll_run_duration_seconds",
    documentation="Wall time of poll runs from first attempt to terminal state",
    labelnames=["poller", "state"],
    buckets=[
        0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0,
        10.0, 30.0, 60.0, 300.0, 900.0,
    ],
    registry=POLL_REGISTRY,
)
