"""Arrival alarm polling loop."""

import logging
from collections.abc import Callable
from datetime import timedelta

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

from .core.alarms import ActiveAlarm, ArrivalSchedule, find_due_alarm
from .ports.clock import Clock
from .ports.store import ARRIVAL_SCHEDULES, RecordStore

logger = logging.getLogger(__name__)

JOB_ID = "arrival_alarms"

# Fired alarms are remembered this long to suppress repeats
FIRED_RETENTION = timedelta(days=1)


class AlarmRunner:
    """
    Checks arrival schedules on a fixed interval and hands ringing alarms
    to `on_alarm`.

    Independent of the chore core: it only reads the arrival_schedules
    table, and an empty or unreadable schedule set is simply "no alarm".
    With auto_snooze, every alarm rings once more after snooze_minutes.
    """

    def __init__(
        self,
        store: RecordStore,
        clock: Clock,
        on_alarm: Callable[[ActiveAlarm], None],
        interval_seconds: int = 60,
        snooze_minutes: int = 5,
        auto_snooze: bool = False,
        scheduler: BackgroundScheduler | None = None,
    ):
        self.store = store
        self.clock = clock
        self.on_alarm = on_alarm
        self.interval_seconds = interval_seconds
        self.snooze_minutes = snooze_minutes
        self.auto_snooze = auto_snooze
        self.scheduler = scheduler or BackgroundScheduler(timezone=clock.now().tzinfo)
        self._fired: set[tuple[str, float]] = set()

    def save_schedule(self, schedule: ArrivalSchedule) -> None:
        self.store.put(ARRIVAL_SCHEDULES, schedule.to_record())

    def load_schedules(self) -> list[ArrivalSchedule]:
        schedules = []
        for record in self.store.get_all(ARRIVAL_SCHEDULES):
            try:
                schedules.append(ArrivalSchedule.from_record(record))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Skipping unreadable arrival schedule {record.get('id')}: {e}")
        return schedules

    def _forget_old(self, now) -> None:
        cutoff = (now - FIRED_RETENTION).timestamp()
        self._fired = {key for key in self._fired if key[1] >= cutoff}

    def check(self) -> ActiveAlarm | None:
        """One polling tick. Returns the alarm dispatched, if any."""
        now = self.clock.now()
        self._forget_old(now)

        alarm = find_due_alarm(self.load_schedules(), now)
        if alarm is None:
            return None

        key = (alarm.schedule_id, alarm.scheduled_time.timestamp())
        if key in self._fired:
            return None
        self._fired.add(key)

        self._dispatch(alarm)
        if self.auto_snooze:
            self.snooze(alarm)
        return alarm

    def _dispatch(self, alarm: ActiveAlarm) -> None:
        logger.info(f"Arrival alarm: {alarm.title} at {alarm.scheduled_time.strftime('%H:%M')}")
        self.on_alarm(alarm)

    def snooze(self, alarm: ActiveAlarm) -> None:
        """Ring the same alarm again after the snooze period."""
        run_date = self.clock.now() + timedelta(minutes=self.snooze_minutes)
        self.scheduler.add_job(
            self._dispatch,
            DateTrigger(run_date=run_date),
            args=[alarm],
            id=f"snooze-{alarm.schedule_id}",
            replace_existing=True,
        )
        logger.info(f"Snoozed {alarm.title} until {run_date.strftime('%H:%M')}")

    def start(self) -> None:
        self.check()
        self.scheduler.add_job(
            self.check,
            IntervalTrigger(seconds=self.interval_seconds),
            id=JOB_ID,
            replace_existing=True,
        )
        self.scheduler.start()
        logger.info(f"Alarm checks scheduled every {self.interval_seconds}s")

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
