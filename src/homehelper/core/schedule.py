"""Due-date calculation and status classification - no I/O dependencies."""

from datetime import datetime, timedelta, tzinfo

from dateutil.relativedelta import relativedelta

from .tasks import Frequency, Task, TaskStatus

WEEKLY_UPCOMING_DAYS = 3
MONTHLY_UPCOMING_DAYS = 5

UPCOMING_DAYS = {
    Frequency.WEEKLY: WEEKLY_UPCOMING_DAYS,
    Frequency.MONTHLY: MONTHLY_UPCOMING_DAYS,
}


def start_of_day(value: datetime, tz: tzinfo | None = None) -> datetime:
    """
    Midnight of the calendar day `value` falls on in `tz`.

    Naive datetimes are taken to already be wall-clock time in `tz`.
    """
    if tz is not None:
        value = value.astimezone(tz) if value.tzinfo else value.replace(tzinfo=tz)
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def baseline(task: Task) -> datetime | None:
    """Last completion, else start date, else creation date."""
    return task.last_completed_at or task.start_date or task.created_at


def compute_next_due(task: Task, tz: tzinfo | None = None) -> datetime | None:
    """
    Next due date: the baseline's day plus one period.

    Time-of-day on the baseline is discarded before the arithmetic.
    Monthly periods clamp to the last day of shorter months (Jan 31 -> Feb 28).
    """
    base = baseline(task)
    if base is None:
        return None

    day = start_of_day(base, tz)
    if task.frequency is Frequency.WEEKLY:
        return day + timedelta(days=7)
    if task.frequency is Frequency.MONTHLY:
        return day + relativedelta(months=1)
    return None


def days_until_due(next_due: datetime, now: datetime) -> int:
    """Whole calendar days from today to the due day (negative if overdue)."""
    tz = now.tzinfo
    return (start_of_day(next_due, tz).date() - start_of_day(now, tz).date()).days


def classify(task: Task, now: datetime) -> TaskStatus:
    """
    Classify a task relative to `now`.

    Day boundaries are taken in now's time zone, so callers pass a clock
    reading already normalized to the household zone.
    """
    next_due = compute_next_due(task, now.tzinfo)
    if next_due is None:
        return TaskStatus.OK

    days = days_until_due(next_due, now)
    if days < 0:
        return TaskStatus.OVERDUE
    if days == 0:
        return TaskStatus.DUE_TODAY
    if days <= UPCOMING_DAYS[task.frequency]:
        return TaskStatus.UPCOMING
    return TaskStatus.OK
