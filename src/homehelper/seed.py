"""Demo household: owners, a helper and a starter set of chores."""

import logging

from .core.alarms import ArrivalSchedule, ArrivalType
from .core.tasks import Frequency, Priority
from .core.users import Role, User
from .chores import ChoreService
from .ports.store import ARRIVAL_SCHEDULES, TASKS

logger = logging.getLogger(__name__)

DEFAULT_USERS = [
    User(id="owner-madam", name="Madam", role=Role.OWNER, email="madam@home.com"),
    User(id="owner-sir", name="Sir", role=Role.OWNER, email="sir@home.com"),
    User(id="helper-1", name="Helper", role=Role.HELPER, email="helper@home.com"),
]

# (id, title, frequency, priority, description)
DEFAULT_TASKS = [
    ("task-bedsheets", "Change bed sheets", Frequency.WEEKLY, Priority.HIGH, "All bedrooms"),
    ("task-fridge", "Clean the fridge", Frequency.WEEKLY, Priority.MEDIUM, "Throw out expired food"),
    ("task-windows", "Wash windows", Frequency.MONTHLY, Priority.LOW, ""),
    ("task-aircon", "Clean air-con filters", Frequency.MONTHLY, Priority.MEDIUM, ""),
    ("task-bathroom", "Deep clean bathrooms", Frequency.WEEKLY, Priority.HIGH, "Tiles and grout"),
]

DEFAULT_SCHEDULES = [
    ArrivalSchedule(
        id="arrival-school",
        title="Kids home from school",
        type=ArrivalType.RECURRING,
        days_of_week=[1, 2, 3, 4, 5],
        time_of_day="16:00",
        lead_time_minutes=15,
        message="Prepare snacks",
        created_by="owner-madam",
    ),
]


def seed_users(service: ChoreService) -> int:
    created = 0
    for user in DEFAULT_USERS:
        if service.find_user_by_email(user.email) is None:
            service.save_user(user)
            created += 1
    return created


def seed_tasks(service: ChoreService) -> int:
    if service.store.get_all(TASKS):
        return 0
    for task_id, title, frequency, priority, description in DEFAULT_TASKS:
        service.create_task(title, frequency, priority, description=description, task_id=task_id)
    return len(DEFAULT_TASKS)


def seed_schedules(service: ChoreService) -> int:
    if service.store.get_all(ARRIVAL_SCHEDULES):
        return 0
    for schedule in DEFAULT_SCHEDULES:
        service.store.put(ARRIVAL_SCHEDULES, schedule.to_record())
    return len(DEFAULT_SCHEDULES)


def seed_database(service: ChoreService) -> dict[str, int]:
    """Insert demo data where missing. Safe to run repeatedly."""
    counts = {
        "users": seed_users(service),
        "tasks": seed_tasks(service),
        "schedules": seed_schedules(service),
    }
    logger.info(f"Seeded {counts}")
    return counts
