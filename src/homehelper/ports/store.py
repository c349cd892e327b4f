"""Record store interface."""

from typing import Any, Protocol

TASKS = "tasks"
COMPLETION_LOGS = "completion_logs"
USERS = "users"
ARRIVAL_SCHEDULES = "arrival_schedules"

# table -> index name -> record field. List-valued fields index every element.
INDEXES: dict[str, dict[str, str]] = {
    TASKS: {"by_assignee": "assignees"},
    COMPLETION_LOGS: {"by_task": "task_id", "by_completed_by": "completed_by"},
    USERS: {"by_email": "email"},
    ARRIVAL_SCHEDULES: {},
}


class RecordStore(Protocol):
    """Interface for a local key/value store of JSON-like records keyed by "id"."""

    def put(self, table: str, record: dict) -> None:
        """Insert or replace a record by its id."""
        ...

    def get(self, table: str, record_id: str) -> dict | None:
        """Fetch one record. Returns None if not found."""
        ...

    def get_all(self, table: str) -> list[dict]:
        """Fetch every record in a table."""
        ...

    def get_all_by_index(self, table: str, index: str, value: Any) -> list[dict]:
        """Fetch records whose indexed field equals (or contains) value."""
        ...

    def delete(self, table: str, record_id: str) -> None:
        """Remove a record. Missing ids are ignored."""
        ...
