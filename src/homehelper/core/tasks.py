"""Pure task domain logic - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from .errors import InvalidStateError

MAX_PHOTOS = 3


class Frequency(Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, raw: "str | Frequency") -> "Frequency":
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).lower())
        except ValueError:
            raise InvalidStateError(f"Unknown frequency: {raw!r}") from None


class Priority(Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @property
    def rank(self) -> int:
        """High sorts first."""
        return PRIORITY_RANK[self]

    @classmethod
    def parse(cls, raw: "str | Priority") -> "Priority":
        if isinstance(raw, cls):
            return raw
        for member in cls:
            if member.value.lower() == str(raw).lower():
                return member
        raise InvalidStateError(f"Unknown priority: {raw!r}")


class TaskStatus(Enum):
    OVERDUE = "Overdue"
    DUE_TODAY = "DueToday"
    UPCOMING = "Upcoming"
    OK = "OK"

    @property
    def rank(self) -> int:
        """Severity rank used for display ordering (Overdue first)."""
        return STATUS_RANK[self]


STATUS_RANK = {
    TaskStatus.OVERDUE: 0,
    TaskStatus.DUE_TODAY: 1,
    TaskStatus.UPCOMING: 2,
    TaskStatus.OK: 3,
}

PRIORITY_RANK = {
    Priority.HIGH: 0,
    Priority.MEDIUM: 1,
    Priority.LOW: 2,
}


def to_timestamp(value: datetime | None) -> float | None:
    """Absolute instant as epoch seconds, for storage."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp()


def from_timestamp(value: float | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromtimestamp(float(value), tz=timezone.utc)


@dataclass
class Task:
    """
    A recurring household chore.

    next_due_at, status and last_three_completions are a derived cache:
    they are rewritten on every enrichment pass and never trusted on load.
    """

    id: str
    title: str
    frequency: Frequency
    priority: Priority
    description: str = ""
    is_active: bool = True
    assigned_to_all_helpers: bool = True
    assignees: list[str] = field(default_factory=list)
    start_date: datetime | None = None
    last_completed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    # Derived
    next_due_at: datetime | None = None
    status: TaskStatus | None = None
    last_three_completions: list[datetime] = field(default_factory=list)

    def is_visible_to(self, user_id: str) -> bool:
        """Whether a helper with this id may see the task."""
        return self.assigned_to_all_helpers or user_id in self.assignees

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "frequency": self.frequency.value,
            "priority": self.priority.value,
            "is_active": self.is_active,
            "assigned_to_all_helpers": self.assigned_to_all_helpers,
            "assignees": list(self.assignees),
            "start_date": to_timestamp(self.start_date),
            "last_completed_at": to_timestamp(self.last_completed_at),
            "created_at": to_timestamp(self.created_at),
            "updated_at": to_timestamp(self.updated_at),
            "next_due_at": to_timestamp(self.next_due_at),
            "status": self.status.value if self.status else None,
            "last_three_completions": [to_timestamp(d) for d in self.last_three_completions],
        }

    @classmethod
    def from_record(cls, data: dict) -> "Task":
        status = data.get("status")
        return cls(
            id=data["id"],
            title=data["title"],
            description=data.get("description") or "",
            frequency=Frequency.parse(data["frequency"]),
            priority=Priority.parse(data["priority"]),
            is_active=data.get("is_active", True),
            assigned_to_all_helpers=data.get("assigned_to_all_helpers", True),
            assignees=list(data.get("assignees") or []),
            start_date=from_timestamp(data.get("start_date")),
            last_completed_at=from_timestamp(data.get("last_completed_at")),
            created_at=from_timestamp(data.get("created_at")),
            updated_at=from_timestamp(data.get("updated_at")),
            next_due_at=from_timestamp(data.get("next_due_at")),
            status=TaskStatus(status) if status else None,
            last_three_completions=[
                from_timestamp(ts) for ts in data.get("last_three_completions") or []
            ],
        )


@dataclass
class CompletionLog:
    """One completion event. Immutable once written; undo deletes it."""

    id: str
    task_id: str
    completed_at: datetime
    completed_by: str
    undo_until: datetime
    completed_by_name: str = ""
    note: str = ""
    photos: list[str] = field(default_factory=list)
    created_at: datetime | None = None

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "task_id": self.task_id,
            "completed_at": to_timestamp(self.completed_at),
            "completed_by": self.completed_by,
            "completed_by_name": self.completed_by_name,
            "note": self.note,
            "photos": list(self.photos),
            "undo_until": to_timestamp(self.undo_until),
            "created_at": to_timestamp(self.created_at),
        }

    @classmethod
    def from_record(cls, data: dict) -> "CompletionLog":
        return cls(
            id=data["id"],
            task_id=data["task_id"],
            completed_at=from_timestamp(data["completed_at"]),
            completed_by=data.get("completed_by", ""),
            completed_by_name=data.get("completed_by_name") or "",
            note=data.get("note") or "",
            photos=list(data.get("photos") or []),
            undo_until=from_timestamp(data["undo_until"]),
            created_at=from_timestamp(data.get("created_at")),
        )


def validate_assignment(assigned_to_all_helpers: bool, assignees: list[str]) -> None:
    """
    Assignment is either "all helpers" or an explicit non-empty list.

    Raises InvalidStateError otherwise.
    """
    if assigned_to_all_helpers and assignees:
        raise InvalidStateError("Task assigned to all helpers must not list explicit assignees")
    if not assigned_to_all_helpers and not assignees:
        raise InvalidStateError("Task must be assigned to all helpers or at least one helper")


def validate_task(task: Task) -> None:
    """Reject tasks that cannot be stored."""
    if not task.title or not task.title.strip():
        raise InvalidStateError("Task title is required")
    validate_assignment(task.assigned_to_all_helpers, task.assignees)
