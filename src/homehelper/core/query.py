"""Filtering, sorting and grouping of enriched tasks - no I/O dependencies."""

from .tasks import Frequency, Priority, Task, TaskStatus
from .users import User

ALL = "all"


def filter_tasks_by_assignee(tasks: list[Task], user_id: str, is_owner: bool) -> list[Task]:
    """Owners see everything; helpers see tasks for all helpers or naming them."""
    if is_owner:
        return list(tasks)
    return [t for t in tasks if t.is_visible_to(user_id)]


def filter_tasks_for_user(tasks: list[Task], user: User) -> list[Task]:
    return filter_tasks_by_assignee(tasks, user.id, user.is_owner)


def filter_active(tasks: list[Task]) -> list[Task]:
    return [t for t in tasks if t.is_active]


def filter_tasks_by_frequency(tasks: list[Task], frequency: "Frequency | str") -> list[Task]:
    """Keep tasks of one frequency; "all" keeps everything."""
    if frequency == ALL:
        return list(tasks)
    wanted = Frequency.parse(frequency)
    return [t for t in tasks if t.frequency is wanted]


def filter_tasks_by_priority(tasks: list[Task], priority: "Priority | str") -> list[Task]:
    """Keep tasks of one priority; "all" keeps everything."""
    if priority == ALL:
        return list(tasks)
    wanted = Priority.parse(priority)
    return [t for t in tasks if t.priority is wanted]


def filter_tasks_by_helper(tasks: list[Task], helper_id: str) -> list[Task]:
    """
    Owner view: tasks a given helper is responsible for.

    Tasks assigned to all helpers count for every helper.
    """
    if helper_id == ALL:
        return list(tasks)
    return [t for t in tasks if t.is_visible_to(helper_id)]


def filter_tasks(
    tasks: list[Task],
    *,
    user: User | None = None,
    active_only: bool = False,
    frequency: "Frequency | str" = ALL,
    priority: "Priority | str" = ALL,
    helper_id: str = ALL,
) -> list[Task]:
    """
    Apply every filter in turn (AND-combined). Input order is preserved.

    helper_id is only honoured for owners; a helper's view is already
    restricted to their own tasks.
    """
    result = list(tasks)
    if user is not None:
        result = filter_tasks_for_user(result, user)
    if active_only:
        result = filter_active(result)
    result = filter_tasks_by_frequency(result, frequency)
    result = filter_tasks_by_priority(result, priority)
    if user is None or user.is_owner:
        result = filter_tasks_by_helper(result, helper_id)
    return result


def _status_of(task: Task) -> TaskStatus:
    return task.status or TaskStatus.OK


def sort_tasks_by_status(tasks: list[Task]) -> list[Task]:
    """
    Order by status severity, then priority (High first).

    Stable: ties keep their input order.
    """
    return sorted(tasks, key=lambda t: (_status_of(t).rank, t.priority.rank))


def group_tasks_by_status(tasks: list[Task]) -> dict[TaskStatus, list[Task]]:
    """Partition into one bucket per status, in severity order."""
    groups: dict[TaskStatus, list[Task]] = {status: [] for status in TaskStatus}
    for task in tasks:
        groups[_status_of(task)].append(task)
    return groups


def reminder_tasks(tasks: list[Task], user: User) -> list[Task]:
    """Reminder view: visible, active tasks, most urgent first."""
    return sort_tasks_by_status(filter_tasks(tasks, user=user, active_only=True))
