"""
Poll Decorator
==============
Decorator turning an Outcome-returning function into one that polls.
"""

import inspect
from functools import partial, wraps
from typing import Callable, Optional, Sequence, Union

from .builder import PollerBuilder
from .stop import StopStrategy
from .wait import WaitStrategy


def poll_until(
    wait: Optional[WaitStrategy] = None,
    stop: Union[StopStrategy, Sequence[StopStrategy], None] = None,
    name: Optional[str] = None,
):
    """
    Decorator for polling a function until it reports Finished.

    Works for both sync and async functions; async functions are polled
    on the event loop.

    Usage:
        @poll_until(wait=fixed_wait(2), stop=stop_after_delay(60))
        def job_result(job_id):
            job = client.get_job(job_id)
            if job.failed:
                return broken(job.error)
            return finished(job.output) if job.done else proceed()
    """
    if stop is None:
        stops = []
    elif callable(stop):
        stops = [stop]
    else:
        stops = list(stop)

    def decorator(func: Callable) -> Callable:
        def make_poller(args, kwargs):
            builder = PollerBuilder().operation(partial(func, *args, **kwargs))
            builder.name(name or func.__qualname__)
            if wait is not None:
                builder.wait(wait)
            for strategy in stops:
                builder.stop(strategy)
            return builder.build()

        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                return await make_poller(args, kwargs).poll()
            return async_wrapper

        @wraps(func)
        def wrapper(*args, **kwargs):
            return make_poller(args, kwargs).start()
        return wrapper

    return decorator
