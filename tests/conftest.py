"""
Shared fixtures for poll-core tests.
"""

import pytest

from poll_core.clock import ManualClock
from poll_core.retry import finished, proceed
from tests.helpers import ScriptedOperation


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def finish_on_third():
    return ScriptedOperation(proceed(), proceed(), finished("done"))


@pytest.fixture
def always_continue():
    return ScriptedOperation(proceed("not ready"))
