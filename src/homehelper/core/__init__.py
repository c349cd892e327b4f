"""Functional core - pure business logic with no I/O."""

from .errors import HomeHelperError, InvalidStateError, NotFoundError, StaleUndoError
from .tasks import CompletionLog, Frequency, Priority, Task, TaskStatus, validate_assignment
from .users import Role, User
from .schedule import classify, compute_next_due, start_of_day
from .ledger import UNDO_WINDOW, can_undo, last_three, undo_remaining_seconds
from .enrich import enrich
from .query import (
    filter_tasks,
    filter_tasks_by_assignee,
    filter_tasks_by_frequency,
    filter_tasks_by_priority,
    group_tasks_by_status,
    reminder_tasks,
    sort_tasks_by_status,
)
from .alarms import ActiveAlarm, ArrivalSchedule, ArrivalType, find_due_alarm

__all__ = [
    # Errors
    "HomeHelperError",
    "InvalidStateError",
    "NotFoundError",
    "StaleUndoError",
    # Tasks
    "Task",
    "CompletionLog",
    "Frequency",
    "Priority",
    "TaskStatus",
    "validate_assignment",
    # Users
    "Role",
    "User",
    # Scheduling
    "classify",
    "compute_next_due",
    "start_of_day",
    "enrich",
    # Ledger
    "UNDO_WINDOW",
    "can_undo",
    "last_three",
    "undo_remaining_seconds",
    # Query
    "filter_tasks",
    "filter_tasks_by_assignee",
    "filter_tasks_by_frequency",
    "filter_tasks_by_priority",
    "group_tasks_by_status",
    "reminder_tasks",
    "sort_tasks_by_status",
    # Alarms
    "ActiveAlarm",
    "ArrivalSchedule",
    "ArrivalType",
    "find_due_alarm",
]
