"""
Unit Tests for Wait and Stop Strategies
=======================================
"""

import random

import pytest

from poll_core.retry import (
    Attempt,
    OutcomeKind,
    PollerConfigError,
    combine_waits,
    exponential_wait,
    fibonacci_wait,
    fixed_wait,
    incrementing_wait,
    no_wait,
    stop_after_attempt,
    stop_after_delay,
    stop_any,
    stop_never,
)
from poll_core.retry.wait import RandomWait


def attempt(number=1, elapsed=0.0):
    return Attempt(number=number, elapsed=elapsed, kind=OutcomeKind.CONTINUE)


class TestWaitStrategies:
    """Tests for built-in wait strategies."""

    def test_no_wait(self):
        assert no_wait()(attempt(5)) == 0.0

    def test_fixed_wait(self):
        """Same delay regardless of attempt."""
        wait = fixed_wait(1.5)
        assert [wait(attempt(n)) for n in (1, 2, 10)] == [1.5, 1.5, 1.5]

    def test_fixed_wait_rejects_negative(self):
        with pytest.raises(PollerConfigError):
            fixed_wait(-1)

    def test_random_wait_within_bounds(self):
        """Random delays stay within [min, max]."""
        wait = RandomWait(0.5, 2.0, rng=random.Random(7))
        delays = [wait(attempt(n)) for n in range(1, 200)]

        assert all(0.5 <= d <= 2.0 for d in delays)
        assert len(set(delays)) > 1

    def test_random_wait_rejects_inverted_bounds(self):
        with pytest.raises(PollerConfigError):
            RandomWait(3.0, 1.0)

    def test_exponential_wait(self):
        """Delay after attempt i is min(B * M^(i-1), C)."""
        wait = exponential_wait(base=0.5, multiplier=3.0, max_delay=10.0)

        for i in range(1, 8):
            assert wait(attempt(i)) == pytest.approx(min(0.5 * 3.0 ** (i - 1), 10.0))

    def test_exponential_wait_caps_huge_attempt_numbers(self):
        wait = exponential_wait(base=1.0, multiplier=10.0, max_delay=30.0)
        assert wait(attempt(5000)) == 30.0

    def test_exponential_wait_rejects_shrinking_multiplier(self):
        with pytest.raises(PollerConfigError):
            exponential_wait(multiplier=0.5)

    def test_fibonacci_wait(self):
        """Delays follow base * fib(n)."""
        wait = fibonacci_wait(base=0.1, max_delay=100.0)
        delays = [wait(attempt(n)) for n in range(1, 9)]

        assert delays == pytest.approx([0.1, 0.1, 0.2, 0.3, 0.5, 0.8, 1.3, 2.1])

    def test_fibonacci_wait_capped(self):
        wait = fibonacci_wait(base=1.0, max_delay=4.0)
        assert [wait(attempt(n)) for n in range(1, 7)] == [1.0, 1.0, 2.0, 3.0, 4.0, 4.0]

    def test_incrementing_wait(self):
        wait = incrementing_wait(start=1.0, increment=0.5, max_delay=2.0)
        assert [wait(attempt(n)) for n in range(1, 6)] == [1.0, 1.5, 2.0, 2.0, 2.0]

    def test_combine_waits_sums(self):
        wait = combine_waits(fixed_wait(1.0), incrementing_wait(start=0.0, increment=1.0))
        assert wait(attempt(3)) == 3.0

    def test_plain_function_is_a_strategy(self):
        """Any callable taking an Attempt works as a wait strategy."""
        wait = combine_waits(lambda a: a.number * 0.25)
        assert wait(attempt(4)) == 1.0


class TestStopStrategies:
    """Tests for built-in stop strategies."""

    def test_stop_never(self):
        assert stop_never()(attempt(10_000, 1e6)) is False

    def test_stop_after_attempt(self):
        stop = stop_after_attempt(3)
        assert [stop(attempt(n)) for n in (1, 2, 3, 4)] == [False, False, True, True]

    def test_stop_after_attempt_rejects_zero(self):
        with pytest.raises(PollerConfigError):
            stop_after_attempt(0)

    def test_stop_after_delay(self):
        stop = stop_after_delay(1.0)
        assert stop(attempt(1, 0.99)) is False
        assert stop(attempt(1, 1.0)) is True

    def test_stop_any_is_logical_or(self):
        stop = stop_any(stop_after_attempt(3), stop_after_delay(1.0))

        assert stop(attempt(1, 0.1)) is False
        assert stop(attempt(3, 0.1)) is True
        assert stop(attempt(1, 1.5)) is True
