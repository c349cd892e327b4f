"""Ports - interfaces/protocols for external dependencies."""

from .clock import Clock
from .store import ARRIVAL_SCHEDULES, COMPLETION_LOGS, INDEXES, TASKS, USERS, RecordStore

__all__ = [
    "Clock",
    "RecordStore",
    "INDEXES",
    "TASKS",
    "COMPLETION_LOGS",
    "USERS",
    "ARRIVAL_SCHEDULES",
]
