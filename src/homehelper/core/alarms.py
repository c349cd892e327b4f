"""Arrival alarm schedules and trigger checks - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from enum import Enum

from .tasks import from_timestamp, to_timestamp

TRIGGER_TOLERANCE = timedelta(seconds=60)


class ArrivalType(Enum):
    ONE_OFF = "oneOff"
    RECURRING = "recurring"


@dataclass
class ArrivalSchedule:
    """
    Someone arriving at the house, announced ahead of time.

    One-off schedules carry an absolute arrival_time. Recurring schedules
    carry days_of_week (0=Sunday .. 6=Saturday) and a "HH:MM" time_of_day
    in the household time zone.
    """

    id: str
    title: str
    type: ArrivalType
    enabled: bool = True
    arrival_time: datetime | None = None
    days_of_week: list[int] = field(default_factory=list)
    time_of_day: str | None = None
    lead_time_minutes: int = 0
    message: str = ""
    notify_all_helpers: bool = True
    notify_helpers: list[str] = field(default_factory=list)
    created_by: str = ""

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "type": self.type.value,
            "enabled": self.enabled,
            "arrival_time": to_timestamp(self.arrival_time),
            "days_of_week": list(self.days_of_week),
            "time_of_day": self.time_of_day,
            "lead_time_minutes": self.lead_time_minutes,
            "message": self.message,
            "notify_all_helpers": self.notify_all_helpers,
            "notify_helpers": list(self.notify_helpers),
            "created_by": self.created_by,
        }

    @classmethod
    def from_record(cls, data: dict) -> "ArrivalSchedule":
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            type=ArrivalType(data.get("type", ArrivalType.ONE_OFF.value)),
            enabled=data.get("enabled", True),
            arrival_time=from_timestamp(data.get("arrival_time")),
            days_of_week=list(data.get("days_of_week") or []),
            time_of_day=data.get("time_of_day"),
            lead_time_minutes=int(data.get("lead_time_minutes") or 0),
            message=data.get("message") or "",
            notify_all_helpers=data.get("notify_all_helpers", True),
            notify_helpers=list(data.get("notify_helpers") or []),
            created_by=data.get("created_by", ""),
        )


@dataclass
class ActiveAlarm:
    """An alarm that is currently ringing."""

    schedule_id: str
    title: str
    scheduled_time: datetime
    message: str = ""


def _parse_time_of_day(value: str) -> time | None:
    try:
        hours, minutes = (int(part) for part in value.split(":"))
        return time(hours, minutes)
    except ValueError:
        return None


def _js_weekday(moment: datetime) -> int:
    """Sunday=0 numbering used by stored schedules."""
    return (moment.weekday() + 1) % 7


def arrival_for(schedule: ArrivalSchedule, now: datetime) -> datetime | None:
    """The arrival this schedule announces around `now`, if any."""
    if schedule.type is ArrivalType.ONE_OFF:
        if schedule.arrival_time is None:
            return None
        return schedule.arrival_time.astimezone(now.tzinfo) if now.tzinfo else schedule.arrival_time

    if not schedule.time_of_day or _js_weekday(now) not in schedule.days_of_week:
        return None
    at = _parse_time_of_day(schedule.time_of_day)
    if at is None:
        return None
    return datetime.combine(now.date(), at, tzinfo=now.tzinfo)


def trigger_time(schedule: ArrivalSchedule, now: datetime) -> datetime | None:
    arrival = arrival_for(schedule, now)
    if arrival is None:
        return None
    return arrival - timedelta(minutes=schedule.lead_time_minutes)


def should_trigger(schedule: ArrivalSchedule, now: datetime) -> bool:
    """True during the first minute after the schedule's trigger time."""
    if not schedule.enabled:
        return False
    trigger = trigger_time(schedule, now)
    if trigger is None:
        return False
    return timedelta(0) <= now - trigger < TRIGGER_TOLERANCE


def find_due_alarm(schedules: list[ArrivalSchedule] | None, now: datetime) -> ActiveAlarm | None:
    """
    First enabled schedule that should ring now, as an ActiveAlarm.

    Only one alarm is reported per check. An empty or None schedule list
    yields None.
    """
    for schedule in schedules or []:
        if should_trigger(schedule, now):
            return ActiveAlarm(
                schedule_id=schedule.id,
                title=schedule.title,
                scheduled_time=arrival_for(schedule, now),
                message=schedule.message,
            )
    return None
