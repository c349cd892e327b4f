"""Chore service - the shell around the functional core.

Every operation loads records from the store, runs pure core logic against
the injected clock, and writes the results back. Derived task fields are
recomputed on each pass and persisted only as a cache for list rendering.
"""

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timedelta

from .core import ledger
from .core.enrich import enrich as enrich_task
from .core.errors import InvalidStateError, NotFoundError, StaleUndoError
from .core.query import ALL, filter_tasks, reminder_tasks, sort_tasks_by_status
from .core.tasks import CompletionLog, Frequency, Priority, Task, validate_task
from .core.users import User
from .ports.clock import Clock
from .ports.store import COMPLETION_LOGS, TASKS, USERS, RecordStore

logger = logging.getLogger(__name__)

# Trivial credential check; real authentication is out of scope.
DEMO_PASSWORD = "password"


class ChoreService:
    """Task, completion and history operations over a RecordStore."""

    def __init__(
        self,
        store: RecordStore,
        clock: Clock,
        undo_window: timedelta = ledger.UNDO_WINDOW,
        enforce_undo_window: bool = True,
    ):
        self.store = store
        self.clock = clock
        self.undo_window = undo_window
        self.enforce_undo_window = enforce_undo_window

    # ============== Users ==============

    def save_user(self, user: User) -> None:
        self.store.put(USERS, replace(user, email=user.email.strip().lower()).to_record())

    def list_users(self) -> list[User]:
        return [User.from_record(r) for r in self.store.get_all(USERS)]

    def get_user(self, user_id: str) -> User:
        record = self.store.get(USERS, user_id)
        if record is None:
            raise NotFoundError("user", user_id)
        return User.from_record(record)

    def find_user_by_email(self, email: str) -> User | None:
        records = self.store.get_all_by_index(USERS, "by_email", email.strip().lower())
        return User.from_record(records[0]) if records else None

    def authenticate(self, email: str, password: str) -> User | None:
        """Demo credential check: active user with the shared demo password."""
        if password != DEMO_PASSWORD:
            return None
        user = self.find_user_by_email(email)
        if user is None or not user.is_active:
            return None
        return user

    def check_assignees(self, assignees: list[str]) -> None:
        """Every explicit assignee must be a known helper."""
        helpers = {u.id for u in self.list_users() if not u.is_owner}
        unknown = [a for a in assignees if a not in helpers]
        if unknown:
            raise InvalidStateError(f"Unknown helper(s): {', '.join(unknown)}")

    # ============== Tasks ==============

    def completion_logs(self, task_id: str) -> list[CompletionLog]:
        return [
            CompletionLog.from_record(r)
            for r in self.store.get_all_by_index(COMPLETION_LOGS, "by_task", task_id)
        ]

    def enrich(self, task: Task) -> Task:
        """Recompute derived fields from the task and its logs. Nothing is written."""
        return enrich_task(task, self.completion_logs(task.id), self.clock.now())

    def load_tasks(self) -> list[Task]:
        """All tasks, freshly enriched."""
        now = self.clock.now()
        return [
            enrich_task(task, self.completion_logs(task.id), now)
            for task in (Task.from_record(r) for r in self.store.get_all(TASKS))
        ]

    def _stored_task(self, task_id: str) -> Task:
        """The task as persisted, without enrichment."""
        record = self.store.get(TASKS, task_id)
        if record is None:
            raise NotFoundError("task", task_id)
        return Task.from_record(record)

    def get_task(self, task_id: str) -> Task:
        return self.enrich(self._stored_task(task_id))

    def _save_task(self, task: Task) -> Task:
        task = replace(task, updated_at=self.clock.now())
        self.store.put(TASKS, task.to_record())
        return task

    def create_task(
        self,
        title: str,
        frequency: Frequency | str,
        priority: Priority | str = Priority.MEDIUM,
        *,
        description: str = "",
        assigned_to_all_helpers: bool = True,
        assignees: list[str] | None = None,
        start_date: datetime | None = None,
        is_active: bool = True,
        task_id: str | None = None,
    ) -> Task:
        now = self.clock.now()
        task = Task(
            id=task_id or f"task-{uuid.uuid4().hex[:12]}",
            title=title.strip(),
            description=description.strip(),
            frequency=Frequency.parse(frequency),
            priority=Priority.parse(priority),
            is_active=is_active,
            assigned_to_all_helpers=assigned_to_all_helpers,
            assignees=list(assignees or []),
            start_date=start_date,
            created_at=now,
        )
        validate_task(task)
        task = self._save_task(self.enrich(task))
        logger.info(f"Created task {task.id} ({task.title}, {task.frequency.value})")
        return task

    def update_task(self, task: Task) -> Task:
        """
        Persist edits to an existing task after re-validating it.

        last_completed_at always comes from the task's logs, never from the
        caller's copy, which may predate a completion or an undo.
        """
        self._stored_task(task.id)
        validate_task(task)
        task = replace(task, last_completed_at=ledger.latest_completion(self.completion_logs(task.id)))
        return self._save_task(self.enrich(task))

    def delete_task(self, task_id: str) -> int:
        """Delete a task and all of its completion logs. Returns logs removed."""
        if self.store.get(TASKS, task_id) is None:
            raise NotFoundError("task", task_id)

        logs = self.completion_logs(task_id)
        for log in logs:
            self.store.delete(COMPLETION_LOGS, log.id)
        self.store.delete(TASKS, task_id)
        logger.info(f"Deleted task {task_id} and {len(logs)} completion log(s)")
        return len(logs)

    # ============== Completion ledger ==============

    def last_three(self, task_id: str) -> list[datetime]:
        """Most recent completion times for a task, newest first, at most three."""
        return ledger.last_three(self.completion_logs(task_id))

    def record_completion(
        self,
        task: Task,
        completed_by: User,
        note: str | None = None,
        photos: list[str] | None = None,
    ) -> tuple[Task, CompletionLog]:
        """
        Log a completion, move last_completed_at to now, and re-enrich.

        Works from the stored task, so edits made since the caller fetched
        `task` are kept.
        """
        stored = self._stored_task(task.id)

        now = self.clock.now()
        log = ledger.new_completion_log(
            task.id,
            completed_by.id,
            now,
            completed_by_name=completed_by.name,
            note=note,
            photos=photos,
            undo_window=self.undo_window,
        )
        self.store.put(COMPLETION_LOGS, log.to_record())

        updated = self._save_task(self.enrich(replace(stored, last_completed_at=now)))
        logger.info(f"Task {task.id} completed by {completed_by.id} (log {log.id})")
        return updated, log

    def _get_log(self, log_id: str) -> CompletionLog:
        record = self.store.get(COMPLETION_LOGS, log_id)
        if record is None:
            raise NotFoundError("completion log", log_id)
        return CompletionLog.from_record(record)

    def _remove_log(self, task: Task, log_id: str) -> Task:
        """Delete one log and recompute the task's completion cache from what remains."""
        self.store.delete(COMPLETION_LOGS, log_id)
        remaining = self.completion_logs(task.id)
        updated = replace(task, last_completed_at=ledger.latest_completion(remaining))
        return self._save_task(self.enrich(updated))

    def undo_completion(self, task: Task, log_id: str) -> Task:
        """
        Reverse a completion inside its undo window.

        Raises NotFoundError if the log does not exist or belongs to another
        task, and StaleUndoError once the window has closed (unless the
        service was built with enforce_undo_window=False).
        """
        log = self._get_log(log_id)
        if log.task_id != task.id:
            raise NotFoundError("completion log", log_id)

        now = self.clock.now()
        if self.enforce_undo_window and not ledger.can_undo(log, now):
            logger.warning(f"Rejected undo of {log_id}: window closed at {log.undo_until.isoformat()}")
            raise StaleUndoError(log_id, log.undo_until)

        updated = self._remove_log(self._stored_task(task.id), log_id)
        logger.info(f"Undid completion {log_id} of task {task.id}")
        return updated

    def undo_remaining_seconds(self, log: CompletionLog) -> int:
        return ledger.undo_remaining_seconds(log, self.clock.now())

    # ============== History ==============

    def list_history(
        self,
        task_id: str | None = None,
        completed_by: str | None = None,
    ) -> list[CompletionLog]:
        """Completion logs across tasks, newest first, optionally filtered."""
        by_task = bool(task_id) and task_id != ALL
        by_user = bool(completed_by) and completed_by != ALL
        if by_task:
            records = self.store.get_all_by_index(COMPLETION_LOGS, "by_task", task_id)
        elif by_user:
            records = self.store.get_all_by_index(COMPLETION_LOGS, "by_completed_by", completed_by)
        else:
            records = self.store.get_all(COMPLETION_LOGS)
        logs = [CompletionLog.from_record(r) for r in records]
        if by_task and by_user:
            logs = [log for log in logs if log.completed_by == completed_by]
        return ledger.sort_logs(logs)

    def delete_completion(self, log_id: str) -> Task | None:
        """
        Remove a log from history regardless of the undo window.

        Returns the owning task with its completion cache recomputed, or
        None when the task no longer exists.
        """
        log = self._get_log(log_id)
        record = self.store.get(TASKS, log.task_id)
        if record is None:
            self.store.delete(COMPLETION_LOGS, log_id)
            logger.warning(f"Deleted orphaned completion log {log_id} (task {log.task_id} missing)")
            return None

        updated = self._remove_log(Task.from_record(record), log_id)
        logger.info(f"Deleted completion {log_id} from history of task {log.task_id}")
        return updated

    # ============== Views ==============

    def task_list(
        self,
        user: User,
        *,
        frequency: Frequency | str = ALL,
        priority: Priority | str = ALL,
        helper_id: str = ALL,
    ) -> list[Task]:
        """Tasks page: everything the user may see, filtered, most urgent first."""
        tasks = filter_tasks(
            self.load_tasks(),
            user=user,
            frequency=frequency,
            priority=priority,
            helper_id=helper_id,
        )
        return sort_tasks_by_status(tasks)

    def reminders(self, user: User) -> list[Task]:
        """Reminders page: visible active tasks, most urgent first."""
        return reminder_tasks(self.load_tasks(), user)
