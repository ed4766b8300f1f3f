"""
Poller Configuration
====================
Default polling settings read from environment variables.

    POLL_MAX_ATTEMPTS          Stop after this many attempts (0 = no limit)
    POLL_MAX_ELAPSED_SECONDS   Stop after this many seconds (0 = no limit)
    POLL_WAIT_STRATEGY         none | fixed | random | exponential | fibonacci
    POLL_BASE_DELAY            Base/fixed delay in seconds
    POLL_MIN_DELAY             Lower bound for the random strategy
    POLL_MAX_DELAY             Upper bound / cap in seconds
    POLL_MULTIPLIER            Exponential multiplier
    POLL_LOG_LEVEL             Log level passed to setup_logging
    POLL_LOG_JSON              Render logs as JSON ("true"/"false")
    POLL_METRICS_ENABLED       Record Prometheus metrics ("true"/"false")
"""

import os
from dataclasses import dataclass, field
from typing import List

from poll_core.retry.exceptions import PollerConfigError
from poll_core.retry.stop import StopStrategy, stop_after_attempt, stop_after_delay
from poll_core.retry.wait import (
    WaitStrategy,
    exponential_wait,
    fibonacci_wait,
    fixed_wait,
    no_wait,
    random_wait,
)

WAIT_STRATEGIES = ("none", "fixed", "random", "exponential", "fibonacci")

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, default)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise PollerConfigError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise PollerConfigError(f"{name} must be a number, got {raw!r}") from None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in _TRUE_VALUES


@dataclass
class PollerSettings:
    """Polling defaults, overridable through the environment."""
    max_attempts: int = field(default_factory=lambda: _env_int("POLL_MAX_ATTEMPTS", 10))
    max_elapsed_seconds: float = field(default_factory=lambda: _env_float("POLL_MAX_ELAPSED_SECONDS", 0.0))
    wait_strategy: str = field(default_factory=lambda: _env_str("POLL_WAIT_STRATEGY", "exponential"))
    base_delay: float = field(default_factory=lambda: _env_float("POLL_BASE_DELAY", 1.0))
    min_delay: float = field(default_factory=lambda: _env_float("POLL_MIN_DELAY", 0.0))
    max_delay: float = field(default_factory=lambda: _env_float("POLL_MAX_DELAY", 60.0))
    multiplier: float = field(default_factory=lambda: _env_float("POLL_MULTIPLIER", 2.0))
    log_level: str = field(default_factory=lambda: _env_str("POLL_LOG_LEVEL", "INFO"))
    log_json: bool = field(default_factory=lambda: _env_bool("POLL_LOG_JSON", True))
    metrics_enabled: bool = field(default_factory=lambda: _env_bool("POLL_METRICS_ENABLED", True))

    def __post_init__(self):
        self.wait_strategy = self.wait_strategy.strip().lower()
        if self.wait_strategy not in WAIT_STRATEGIES:
            raise PollerConfigError(
                f"wait_strategy must be one of {', '.join(WAIT_STRATEGIES)}, "
                f"got {self.wait_strategy!r}"
            )
        if self.max_attempts < 0:
            raise PollerConfigError("max_attempts must be >= 0")
        if self.max_elapsed_seconds < 0:
            raise PollerConfigError("max_elapsed_seconds must be >= 0")

    @classmethod
    def from_env(cls) -> "PollerSettings":
        """Build settings from the current environment."""
        return cls()

    def build_wait(self) -> WaitStrategy:
        """Turn the configured wait strategy name into a strategy object."""
        if self.wait_strategy == "none":
            return no_wait()
        if self.wait_strategy == "fixed":
            return fixed_wait(self.base_delay)
        if self.wait_strategy == "random":
            return random_wait(self.min_delay, self.max_delay)
        if self.wait_strategy == "fibonacci":
            return fibonacci_wait(self.base_delay, self.max_delay)
        return exponential_wait(self.base_delay, self.multiplier, self.max_delay)

    def build_stops(self) -> List[StopStrategy]:
        """Stop strategies for every non-zero limit."""
        stops: List[StopStrategy] = []
        if self.max_attempts:
            stops.append(stop_after_attempt(self.max_attempts))
        if self.max_elapsed_seconds:
            stops.append(stop_after_delay(self.max_elapsed_seconds))
        return stops
