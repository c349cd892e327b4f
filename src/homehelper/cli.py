"""HomeHelper CLI - household chore tracker."""

import json
import logging
import sys
import time
from datetime import datetime, timedelta

import click

from .adapters.clock import SystemClock
from .adapters.sqlite_store import SQLiteStore
from .alarm_runner import AlarmRunner
from .chores import ChoreService
from .config import Config, load_config
from .core.errors import HomeHelperError
from .core.format import format_countdown, format_date, format_task_line, status_label
from .core.query import ALL, group_tasks_by_status
from .core.tasks import Task
from .seed import seed_database

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def build_service(config: Config) -> ChoreService:
    """Wire the service to the configured store and clock."""
    return ChoreService(
        SQLiteStore(config.db_path),
        SystemClock(config.timezone),
        undo_window=timedelta(minutes=config.undo_window_minutes),
        enforce_undo_window=config.enforce_undo_window,
    )


def _service(ctx: click.Context) -> ChoreService:
    return ctx.obj["service"]


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _task_json(task: Task) -> dict:
    return {
        "id": task.id,
        "title": task.title,
        "frequency": task.frequency.value,
        "priority": task.priority.value,
        "is_active": task.is_active,
        "status": task.status.value if task.status else None,
        "next_due_at": task.next_due_at.isoformat() if task.next_due_at else None,
        "last_completed_at": task.last_completed_at.isoformat() if task.last_completed_at else None,
        "last_three_completions": [d.isoformat() for d in task.last_three_completions],
        "assigned_to_all_helpers": task.assigned_to_all_helpers,
        "assignees": task.assignees,
    }


@click.group()
@click.version_option(package_name="homehelper")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, debug: bool):
    """HomeHelper - household chore tracker."""
    config = load_config()
    logging.basicConfig(
        format=LOG_FORMAT,
        level=logging.DEBUG if debug else getattr(logging, config.log_level, logging.INFO),
    )
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    if "service" not in ctx.obj:
        ctx.obj["service"] = build_service(config)


user_option = click.option(
    "--user", "-u", "user_id", default="owner-madam", show_default=True, help="Acting user id"
)


@main.command()
@user_option
@click.option("--frequency", type=click.Choice(["all", "weekly", "monthly"]), default="all")
@click.option("--priority", type=click.Choice(["all", "High", "Medium", "Low"]), default="all")
@click.option("--helper", "helper_id", default=ALL, help="Owner view: only this helper's tasks")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def tasks(ctx, user_id: str, frequency: str, priority: str, helper_id: str, as_json: bool):
    """List tasks, most urgent first."""
    service = _service(ctx)
    try:
        user = service.get_user(user_id)
        task_list = service.task_list(
            user, frequency=frequency, priority=priority, helper_id=helper_id
        )
    except HomeHelperError as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps([_task_json(t) for t in task_list], indent=2))
        return

    if not task_list:
        click.echo("No tasks.")
        return

    now = service.clock.now()
    for task in task_list:
        click.echo(f"{task.id:16} {format_task_line(task, now)}")


@main.command()
@user_option
@click.pass_context
def reminders(ctx, user_id: str):
    """Show active tasks grouped by status."""
    service = _service(ctx)
    try:
        user = service.get_user(user_id)
        groups = group_tasks_by_status(service.reminders(user))
    except HomeHelperError as e:
        _fail(e)

    now = service.clock.now()
    shown = False
    for status, group in groups.items():
        if not group:
            continue
        if shown:
            click.echo()
        click.echo(f"### {status_label(status)} ({len(group)})")
        for task in group:
            click.echo(f"  {task.id:16} {format_task_line(task, now)}")
        shown = True

    if not shown:
        click.echo("Nothing to do.")


@main.command()
@click.argument("task_id")
@user_option
@click.option("--note", default="", help="Completion note")
@click.option("--photo", "photos", multiple=True, help="Photo reference (up to 3)")
@click.pass_context
def done(ctx, task_id: str, user_id: str, note: str, photos: tuple[str, ...]):
    """Mark a task as done."""
    service = _service(ctx)
    try:
        user = service.get_user(user_id)
        task = service.get_task(task_id)
        updated, log = service.record_completion(task, user, note=note, photos=list(photos))
    except HomeHelperError as e:
        _fail(e)

    remaining = format_countdown(service.undo_remaining_seconds(log))
    click.echo(f"✓ {updated.title} done ({status_label(updated.status)})")
    click.echo(f"  Undo within {remaining}: homehelper undo {task_id} {log.id}")


@main.command()
@click.argument("task_id")
@click.argument("log_id")
@click.pass_context
def undo(ctx, task_id: str, log_id: str):
    """Undo a recent completion."""
    service = _service(ctx)
    try:
        task = service.get_task(task_id)
        updated = service.undo_completion(task, log_id)
    except HomeHelperError as e:
        _fail(e)

    click.echo(f"Undone. {updated.title} is {status_label(updated.status)}")


@main.command()
@click.option("--task", "task_id", default=None, help="Only this task")
@click.option("--by", "completed_by", default=None, help="Only completions by this user id")
@click.option("--delete", "delete_log", default=None, help="Delete a completion log by id")
@click.pass_context
def history(ctx, task_id: str | None, completed_by: str | None, delete_log: str | None):
    """Show completion history, newest first."""
    service = _service(ctx)
    try:
        if delete_log:
            service.delete_completion(delete_log)
            click.echo(f"Deleted {delete_log}")
            return
        logs = service.list_history(task_id=task_id, completed_by=completed_by)
        titles = {t.id: t.title for t in service.load_tasks()}
    except HomeHelperError as e:
        _fail(e)

    if not logs:
        click.echo("No completions recorded.")
        return

    tz = service.clock.now().tzinfo
    for log in logs:
        who = log.completed_by_name or log.completed_by
        note = f" - {log.note}" if log.note else ""
        title = titles.get(log.task_id, "Unknown Task")
        click.echo(f"{format_date(log.completed_at.astimezone(tz))}  {title} by {who}{note}  [{log.id}]")


@main.command("add-task")
@click.argument("title")
@click.option("--frequency", type=click.Choice(["weekly", "monthly"]), required=True)
@click.option("--priority", type=click.Choice(["High", "Medium", "Low"]), default="Medium")
@click.option("--description", default="")
@click.option("--assignee", "assignees", multiple=True, help="Helper id (default: all helpers)")
@click.option("--start", "start", default=None, help="Start date (YYYY-MM-DD)")
@click.option("--inactive", is_flag=True, help="Create the task switched off")
@click.pass_context
def add_task(ctx, title, frequency, priority, description, assignees, start, inactive):
    """Create a recurring task."""
    service = _service(ctx)
    tz = service.clock.now().tzinfo
    try:
        start_date = datetime.fromisoformat(start).replace(tzinfo=tz) if start else None
    except ValueError:
        _fail(ValueError(f"Invalid start date: {start}"))

    try:
        if assignees:
            service.check_assignees(list(assignees))
        task = service.create_task(
            title,
            frequency,
            priority,
            description=description,
            assigned_to_all_helpers=not assignees,
            assignees=list(assignees),
            start_date=start_date,
            is_active=not inactive,
        )
    except HomeHelperError as e:
        _fail(e)

    click.echo(f"Created {task.id}: {format_task_line(task, service.clock.now())}")


@main.command("delete-task")
@click.argument("task_id")
@click.pass_context
def delete_task(ctx, task_id: str):
    """Delete a task and its completion history."""
    service = _service(ctx)
    try:
        removed = service.delete_task(task_id)
    except HomeHelperError as e:
        _fail(e)
    click.echo(f"Deleted {task_id} ({removed} completion log(s))")


@main.command()
@click.pass_context
def seed(ctx):
    """Load demo users, tasks and arrival schedules."""
    counts = seed_database(_service(ctx))
    click.echo(", ".join(f"{n} {kind}" for kind, n in counts.items()) + " added")


@main.command()
@click.option("--snooze", is_flag=True, help="Ring each alarm once more after ALARM_SNOOZE_MINUTES")
@click.pass_context
def alarms(ctx, snooze: bool):
    """Watch arrival schedules and ring alarms."""
    config: Config = ctx.obj["config"]
    service = _service(ctx)

    def ring(alarm):
        message = f" - {alarm.message}" if alarm.message else ""
        click.echo(f"🔔 {alarm.title} at {alarm.scheduled_time.strftime('%H:%M')}{message}")

    runner = AlarmRunner(
        service.store,
        service.clock,
        ring,
        interval_seconds=config.alarm_interval_seconds,
        snooze_minutes=config.alarm_snooze_minutes,
        auto_snooze=snooze,
    )
    click.echo("Watching arrival schedules. Press Ctrl+C to stop")
    runner.start()
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        click.echo("\nStopped.")
    finally:
        runner.shutdown()


if __name__ == "__main__":
    main()
