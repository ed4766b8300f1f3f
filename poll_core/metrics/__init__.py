"""
Poll Metrics
============
Prometheus counters and histograms describing poll runs.

Usage:
    from poll_core.metrics import METRICS_CONTENT_TYPE, get_metrics_text

    # expose on your /metrics endpoint
    body = get_metrics_text()
    headers = {"Content-Type": METRICS_CONTENT_TYPE}
"""

from .definitions import (
    POLL_REGISTRY,
    POLL_RUNS_TOTAL,
    POLL_ATTEMPTS_TOTAL,
    POLL_RUN_DURATION,
)

from .recording import (
    record_attempt,
    record_run,
    get_metrics_text,
    get_sample_value,
    METRICS_CONTENT_TYPE,
)

__all__ = [
    # Definitions
    "POLL_REGISTRY",
    "POLL_RUNS_TOTAL",
    "POLL_ATTEMPTS_TOTAL",
    "POLL_RUN_DURATION",
    # Recording
    "record_attempt",
    "record_run",
    "get_metrics_text",
    "get_sample_value",
    "METRICS_CONTENT_TYPE",
]
