"""
Shared fixtures: a conductor driven by a manual scheduler.
"""

import pytest

from conductor.runtime import Conductor
from conductor.scheduler import ManualScheduler


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def conductor(scheduler) -> Conductor:
    return Conductor(scheduler=scheduler)
