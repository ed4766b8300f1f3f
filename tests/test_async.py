"""
Unit Tests for Asynchronous Execution
=====================================
Executor-backed handles and asyncio polling.
"""

import asyncio
import sys
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from tests.helpers import ScriptedOperation
from poll_core.metrics import get_sample_value
from poll_core.retry import (
    PollerBuilder,
    PollInterruptedError,
    StopTriggeredError,
    UncaughtError,
    UserBreakError,
    broken,
    finished,
    fixed_wait,
    proceed,
    stop_after_attempt,
)


def build(operation, *stops, wait=None):
    builder = PollerBuilder().operation(operation).record_metrics(False)
    if wait is not None:
        builder.wait(wait)
    for stop in stops:
        builder.stop(stop)
    return builder.build()


class TestPollHandle:
    """Tests for Poller.start_async()."""

    def test_handle_returns_value(self, finish_on_third):
        """Same semantics as the blocking run."""
        with build(finish_on_third, stop_after_attempt(5)) as poller:
            handle = poller.start_async()

            assert handle.get(timeout=5) == "done"
            assert handle.done()
            assert handle.attempts == 3
            assert finish_on_third.calls == 3

    def test_handle_surfaces_stop(self, always_continue):
        with build(always_continue, stop_after_attempt(2)) as poller:
            handle = poller.start_async()

            with pytest.raises(StopTriggeredError) as exc_info:
                handle.get(timeout=5)

        assert exc_info.value.attempts == 2

    def test_handle_surfaces_break_and_errors(self):
        with build(ScriptedOperation(broken("gone"))) as poller:
            with pytest.raises(UserBreakError):
                poller.start_async().get(timeout=5)

        with build(ScriptedOperation(ValueError("bad"))) as poller:
            with pytest.raises(UncaughtError):
                poller.start_async().get(timeout=5)

    def test_uses_supplied_executor(self, finish_on_third):
        executor = ThreadPoolExecutor(max_workers=1)
        try:
            handle = build(finish_on_third).start_async(executor)
            assert handle.get(timeout=5) == "done"
        finally:
            executor.shutdown()

    def test_cancel_during_wait(self):
        """Cancelling wakes the wait at once; attempts stay at 1."""
        first_call = threading.Event()

        def operation():
            first_call.set()
            return proceed()

        with build(operation, wait=fixed_wait(30)) as poller:
            handle = poller.start_async()
            assert first_call.wait(5)

            assert handle.cancel() is True
            with pytest.raises(PollInterruptedError) as exc_info:
                handle.get(timeout=5)

        assert exc_info.value.attempts == 1
        assert handle.cancelled()

    def test_cancel_before_start(self):
        """A queued run that is cancelled never invokes the operation and is recorded as interrupted."""
        operation = ScriptedOperation(finished(1))
        poller = PollerBuilder().operation(operation).name("queued-cancel").build()
        executor = ThreadPoolExecutor(max_workers=1)
        blocker = threading.Event()
        try:
            executor.submit(blocker.wait, 5)
            handle = poller.start_async(executor)

            assert handle.cancel() is True
            blocker.set()

            with pytest.raises(PollInterruptedError) as exc_info:
                handle.get(timeout=5)
        finally:
            blocker.set()
            executor.shutdown()

        assert exc_info.value.attempts == 0
        assert operation.calls == 0
        labels = {"poller": "queued-cancel", "state": "interrupted"}
        assert get_sample_value("poll_runs_total", labels) == 1.0
        assert get_sample_value("poll_run_duration_seconds_count", labels) == 1.0

    def test_get_twice_after_cancel_before_start(self):
        """Every get() on a cancelled queued run raises the same error."""
        executor = ThreadPoolExecutor(max_workers=1)
        blocker = threading.Event()
        try:
            executor.submit(blocker.wait, 5)
            handle = build(ScriptedOperation(finished(1))).start_async(executor)
            handle.cancel()

            with pytest.raises(PollInterruptedError) as first:
                handle.get(timeout=5)
            with pytest.raises(PollInterruptedError) as second:
                handle.get(timeout=5)
        finally:
            blocker.set()
            executor.shutdown()

        assert first.value is second.value

    def test_cancel_after_done_returns_false(self):
        with build(ScriptedOperation(finished(1))) as poller:
            handle = poller.start_async()
            handle.get(timeout=5)

            assert handle.cancel() is False

    def test_concurrent_runs_are_independent(self):
        """Each run keeps its own attempt count."""
        with build(ScriptedOperation(proceed()), stop_after_attempt(3)) as poller:
            handles = [poller.start_async() for _ in range(4)]

            for handle in handles:
                with pytest.raises(StopTriggeredError) as exc_info:
                    handle.get(timeout=5)
                assert exc_info.value.attempts == 3


class TestAsyncioPoll:
    """Tests for Poller.poll() on the event loop."""

    @pytest.mark.asyncio
    async def test_poll_sync_operation(self, finish_on_third):
        result = await build(finish_on_third, stop_after_attempt(5)).poll()

        assert result == "done"
        assert finish_on_third.calls == 3

    @pytest.mark.asyncio
    async def test_poll_async_operation(self):
        """Awaitable results are awaited before being classified."""
        call_count = 0

        async def check():
            nonlocal call_count
            call_count += 1
            await asyncio.sleep(0)
            return finished("ready") if call_count == 2 else proceed()

        result = await build(check, wait=fixed_wait(0.01)).poll()

        assert result == "ready"
        assert call_count == 2

    @pytest.mark.asyncio
    async def test_poll_stop_triggered(self, always_continue):
        with pytest.raises(StopTriggeredError):
            await build(always_continue, stop_after_attempt(3)).poll()

        assert always_continue.calls == 3

    @pytest.mark.asyncio
    async def test_poll_async_operation_raises(self):
        async def check():
            raise ConnectionError("refused")

        with pytest.raises(UncaughtError) as exc_info:
            await build(check).poll()

        assert isinstance(exc_info.value.cause, ConnectionError)

    @pytest.mark.asyncio
    async def test_task_cancel_during_wait(self):
        """Cancelling the task while it sleeps ends with PollInterruptedError."""
        operation = ScriptedOperation(proceed())
        task = asyncio.ensure_future(build(operation, wait=fixed_wait(30)).poll())

        for _ in range(100):
            if operation.calls:
                break
            await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(PollInterruptedError) as exc_info:
            await task

        assert exc_info.value.attempts == 1
        assert isinstance(exc_info.value.cause, asyncio.CancelledError)

    @pytest.mark.asyncio
    async def test_task_cancel_during_operation(self):
        """Cancelling while an async operation is awaited propagates CancelledError."""
        entered = asyncio.Event()

        async def check():
            entered.set()
            await asyncio.Event().wait()

        task = asyncio.ensure_future(build(check, wait=fixed_wait(30)).poll())
        await asyncio.wait_for(entered.wait(), timeout=5)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert task.cancelled()

    @pytest.mark.skipif(sys.version_info < (3, 11), reason="Task.cancelling() needs Python 3.11")
    @pytest.mark.asyncio
    async def test_interrupted_task_is_not_left_cancelling(self):
        """A caller that handles PollInterruptedError keeps running normally."""
        operation = ScriptedOperation(proceed())
        poller = build(operation, wait=fixed_wait(30))

        async def caller():
            try:
                await poller.poll()
            except PollInterruptedError:
                await asyncio.sleep(0)
                return asyncio.current_task().cancelling()

        task = asyncio.ensure_future(caller())
        for _ in range(100):
            if operation.calls:
                break
            await asyncio.sleep(0.01)
        task.cancel()

        assert await task == 0
