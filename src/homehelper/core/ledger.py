"""Completion ledger helpers - no I/O dependencies."""

import uuid
from datetime import datetime, timedelta

from .errors import InvalidStateError
from .tasks import MAX_PHOTOS, CompletionLog

UNDO_WINDOW = timedelta(minutes=5)
LAST_N = 3


def new_log_id() -> str:
    return f"log-{uuid.uuid4().hex[:12]}"


def new_completion_log(
    task_id: str,
    completed_by: str,
    now: datetime,
    *,
    completed_by_name: str = "",
    note: str | None = None,
    photos: list[str] | None = None,
    undo_window: timedelta = UNDO_WINDOW,
) -> CompletionLog:
    """Build a completion log whose undo window is fixed at creation time."""
    photos = list(photos or [])
    if len(photos) > MAX_PHOTOS:
        raise InvalidStateError(f"At most {MAX_PHOTOS} photos per completion (got {len(photos)})")

    return CompletionLog(
        id=new_log_id(),
        task_id=task_id,
        completed_at=now,
        completed_by=completed_by,
        completed_by_name=completed_by_name,
        note=(note or "").strip(),
        photos=photos,
        undo_until=now + undo_window,
        created_at=now,
    )


def sort_logs(logs: list[CompletionLog]) -> list[CompletionLog]:
    """Most recent first."""
    return sorted(logs, key=lambda log: log.completed_at, reverse=True)


def last_three(logs: list[CompletionLog]) -> list[datetime]:
    """Completion times of the newest three logs, descending."""
    return [log.completed_at for log in sort_logs(logs)[:LAST_N]]


def latest_completion(logs: list[CompletionLog]) -> datetime | None:
    if not logs:
        return None
    return max(log.completed_at for log in logs)


def can_undo(log: CompletionLog, now: datetime) -> bool:
    return now < log.undo_until


def undo_remaining_seconds(log: CompletionLog, now: datetime) -> int:
    """Whole seconds left in the undo window, never negative."""
    remaining = (log.undo_until - now).total_seconds()
    return max(0, int(remaining))
