"""Display formatting for tasks and completion times."""

from datetime import datetime

from .schedule import start_of_day
from .tasks import Task, TaskStatus

STATUS_LABELS = {
    TaskStatus.OVERDUE: "Overdue",
    TaskStatus.DUE_TODAY: "Due Today",
    TaskStatus.UPCOMING: "Upcoming",
    TaskStatus.OK: "On Track",
}


def format_date(value: datetime) -> str:
    """e.g. 29-Jan-26 09:05"""
    return value.strftime("%d-%b-%y %H:%M")


def format_date_short(value: datetime) -> str:
    """e.g. 29-Jan-26"""
    return value.strftime("%d-%b-%y")


def format_countdown(seconds: int) -> str:
    """mm:ss"""
    seconds = max(0, int(seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


def relative_day(value: datetime, now: datetime) -> str:
    """Today / Yesterday / Tomorrow / N days ago / in N days."""
    tz = now.tzinfo
    diff = (start_of_day(now, tz).date() - start_of_day(value, tz).date()).days
    if diff == 0:
        return "Today"
    if diff == 1:
        return "Yesterday"
    if diff == -1:
        return "Tomorrow"
    if diff > 1:
        return f"{diff} days ago"
    return f"in {-diff} days"


def status_label(status: TaskStatus | None) -> str:
    return STATUS_LABELS.get(status, "Unknown")


def format_task_line(task: Task, now: datetime) -> str:
    """One-line summary: [status] title (priority, frequency, due ...)."""
    parts = [task.priority.value, task.frequency.value]
    if task.next_due_at:
        parts.append(f"due {format_date_short(task.next_due_at.astimezone(now.tzinfo))}")
        parts.append(relative_day(task.next_due_at, now).lower())
    if not task.is_active:
        parts.append("inactive")
    return f"[{status_label(task.status)}] {task.title} ({', '.join(parts)})"
