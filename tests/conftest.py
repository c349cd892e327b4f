"""Shared fixtures: an in-memory store, a fixed clock and a small household."""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from homehelper.adapters.clock import FixedClock
from homehelper.adapters.memory_store import MemoryStore
from homehelper.chores import ChoreService
from homehelper.core.tasks import Frequency, Priority, Task
from homehelper.core.users import Role, User

HK = ZoneInfo("Asia/Hong_Kong")


@pytest.fixture
def tz():
    return HK


@pytest.fixture
def now():
    """Wednesday, 10:00 in Hong Kong."""
    return datetime(2025, 1, 15, 10, 0, tzinfo=HK)


@pytest.fixture
def clock(now):
    return FixedClock(now)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def owner():
    return User(id="owner-1", name="Madam", role=Role.OWNER, email="madam@home.com")


@pytest.fixture
def helper():
    return User(id="helper-1", name="Ana", role=Role.HELPER, email="ana@home.com")


@pytest.fixture
def other_helper():
    return User(id="helper-2", name="Bea", role=Role.HELPER, email="bea@home.com")


@pytest.fixture
def service(store, clock, owner, helper, other_helper):
    svc = ChoreService(store, clock)
    for user in (owner, helper, other_helper):
        svc.save_user(user)
    return svc


def _make_task(
    task_id: str = "t1",
    frequency: Frequency = Frequency.WEEKLY,
    priority: Priority = Priority.MEDIUM,
    **kwargs,
) -> Task:
    kwargs.setdefault("title", f"Task {task_id}")
    return Task(id=task_id, frequency=frequency, priority=priority, **kwargs)


@pytest.fixture
def make_task():
    """Factory for tasks with sensible defaults."""
    return _make_task
