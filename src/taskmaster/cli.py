"""Taskmaster CLI - personal task manager."""

import json
import logging
import sys
import time
from datetime import date, datetime

import click

from .adapters.file_session import FileSession
from .adapters.http_api import ServiceError
from .config import SESSION_FILE, Config, load_config
from .core.calendar import get_occurrences_for_date, project_month, shift_month, sort_for_display
from .core.dates import today_in
from .core.reminders import ReminderOffset
from .core.stats import assemble_dashboard
from .core.tasks import (
    ListTab,
    Occurrence,
    Priority,
    RegularTask,
    Result,
    Task,
    TaskKind,
    Weekday,
    filter_tasks,
    is_completed,
    task_payload,
)
from .core.windows import get_todays_tasks
from .poller import Poller
from .workflows import TaskManager, build_manager


PRIORITY_NAMES = {p.name.lower(): p for p in Priority}


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _connect() -> tuple[Config, TaskManager]:
    """Load config, build the manager, and fetch the current tasks."""
    config = load_config()
    manager = build_manager(config)
    try:
        manager.refresh()
    except ServiceError as e:
        _fail(str(e))
    return config, manager


def _serialize_task(t: Task) -> dict:
    data = {
        "uuid": t.uuid,
        "kind": t.kind.value,
        "title": t.title,
        "priority": int(t.priority),
        "category_id": t.category_id,
        "archived": t.archived,
        "sequence_number": t.sequence_number,
    }
    match t.kind:
        case TaskKind.REGULAR:
            data["deadline"] = t.deadline.isoformat() if t.deadline else None
            data["completed"] = t.completed
        case TaskKind.RECURRING:
            data["recurrence_days"] = [d.value for d in Weekday if d in t.recurrence_days]
            data["done_dates"] = [d.isoformat() for d in t.done_dates]
    return data


def _serialize_occurrence(o: Occurrence) -> dict:
    return {**_serialize_task(o.task), "date": o.date.isoformat(), "completed": o.completed}


def _task_line(task: Task, completed: bool, config: Config) -> str:
    check = "x" if completed else " "
    marker = "!" * int(task.priority) if task.priority else " "
    match task.kind:
        case TaskKind.REGULAR:
            day = task.deadline_day(config.tz)
            when = f" (due {day})" if day else ""
        case TaskKind.RECURRING:
            days = ",".join(d.value[:3].title() for d in Weekday if d in task.recurrence_days)
            when = f" (every {days})" if days else " (never)"
    return f"[{check}] [{marker:3}] {task.title}{when}  {task.uuid}"


def _show_occurrences(items: list[Occurrence], as_json: bool, config: Config, empty_msg: str) -> None:
    if as_json:
        click.echo(json.dumps([_serialize_occurrence(o) for o in items], indent=2))
        return
    if not items:
        click.echo(empty_msg)
        return
    for o in items:
        click.echo(_task_line(o.task, o.completed, config))


def _report(result: Result, message: str) -> None:
    if not result.success:
        _fail(result.error or "Request failed")
    click.echo(message)


def _parse_date(value: str | None, config: Config) -> date:
    if not value:
        return today_in(config.tz)
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"Expected YYYY-MM-DD, got {value!r}")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.version_option(package_name="taskmaster")
def main(verbose: bool):
    """Taskmaster - personal task manager CLI."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if verbose else logging.WARNING,
    )


@main.command()
def login():
    """Store an API token for the task service."""
    token = click.prompt("Paste your API token", hide_input=True).strip()
    if not token:
        _fail("No token provided")
    FileSession(SESSION_FILE).set_token(token)
    click.echo("Signed in.")


@main.command()
def logout():
    """Forget the stored API token."""
    FileSession(SESSION_FILE).clear()
    click.echo("Signed out.")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def today(as_json: bool):
    """List today's tasks."""
    config, manager = _connect()
    snapshot = manager.store.snapshot
    todays = get_todays_tasks(
        list(snapshot.regular),
        list(snapshot.recurring),
        today_in(config.tz),
        config.policy,
        config.tz,
    )
    _show_occurrences(todays, as_json, config, "No tasks for today.")


@main.command("list")
@click.option(
    "--tab",
    type=click.Choice([t.value for t in ListTab]),
    default=ListTab.PENDING.value,
    show_default=True,
)
@click.option("--search", default="", help="Match title or description")
@click.option("--priority", type=click.Choice(list(PRIORITY_NAMES)), default=None)
@click.option("--category", "category_id", default=None, help="Category id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_tasks(tab: str, search: str, priority: str | None, category_id: str | None, as_json: bool):
    """List tasks in sequence order."""
    config, manager = _connect()
    on = today_in(config.tz)
    tasks = filter_tasks(
        manager.store.snapshot.all_tasks,
        tab=ListTab(tab),
        search=search,
        priority=PRIORITY_NAMES[priority] if priority else None,
        category_id=category_id,
        on=on,
    )

    if as_json:
        click.echo(json.dumps([_serialize_task(t) for t in tasks], indent=2))
        return
    if not tasks:
        click.echo("No tasks found.")
        return
    for t in tasks:
        click.echo(_task_line(t, is_completed(t, on), config))


@main.command()
@click.option("--month", "month_str", default=None, help="YYYY-MM (default: this month)")
@click.option("--offset", default=0, help="Months to move from --month")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def calendar(month_str: str | None, offset: int, as_json: bool):
    """Show a month grid with up to a few tasks per day."""
    config, manager = _connect()
    current = today_in(config.tz)
    if month_str:
        try:
            year, month = (int(p) for p in month_str.split("-"))
            date(year, month, 1)
        except ValueError:
            raise click.BadParameter(f"Expected YYYY-MM, got {month_str!r}")
    else:
        year, month = current.year, current.month
    year, month = shift_month(year, month, offset)

    snapshot = manager.store.snapshot
    grid = project_month(
        list(snapshot.regular),
        list(snapshot.recurring),
        year,
        month,
        week_start=config.first_weekday,
        limit=config.calendar_cell_limit,
        today=current,
        tz=config.tz,
    )

    if as_json:
        click.echo(
            json.dumps(
                {
                    "year": grid.year,
                    "month": grid.month,
                    "cells": [
                        {
                            "date": c.date.isoformat(),
                            "in_month": c.in_month,
                            "total": c.total,
                            "overflow": c.overflow_count,
                            "tasks": [_serialize_occurrence(o) for o in c.tasks],
                        }
                        for c in grid.cells
                    ],
                },
                indent=2,
            )
        )
        return

    click.echo(f"### {grid.title}")
    click.echo(" ".join(f"{h:>4}" for h in grid.weekday_headers()))
    for week in grid.weeks:
        row = []
        for cell in week:
            label = f"{cell.date.day:>2}" if cell.in_month else "  "
            badge = f"{cell.total}" if cell.has_tasks else " "
            row.append(f"{label}{'*' if cell.is_today else ' '}{badge}")
        click.echo(" ".join(row))

    for cell in grid.cells:
        if not cell.in_month or not cell.has_tasks:
            continue
        click.echo()
        click.echo(f"{cell.date.strftime('%a %d')} ({cell.total})")
        for o in cell.tasks:
            click.echo(f"  {_task_line(o.task, o.completed, config)}")
        if cell.overflow_count:
            click.echo(f"  +{cell.overflow_count} more")


@main.command()
@click.argument("day", required=False)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def day(day: str | None, as_json: bool):
    """List every task that applies on DAY (YYYY-MM-DD, default today)."""
    config, manager = _connect()
    target = _parse_date(day, config)
    snapshot = manager.store.snapshot
    occurrences = sort_for_display(
        get_occurrences_for_date(list(snapshot.regular), list(snapshot.recurring), target, config.tz)
    )
    if not as_json:
        click.echo(f"### {target.strftime('%A, %B %d, %Y')}")
    _show_occurrences(occurrences, as_json, config, "No tasks scheduled for this day.")


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def stats(as_json: bool):
    """Show dashboard statistics."""
    config, manager = _connect()
    snapshot = manager.store.snapshot
    dashboard = assemble_dashboard(
        list(snapshot.regular),
        list(snapshot.recurring),
        today_in(config.tz),
        policy=config.policy,
        week_start=config.first_weekday,
        tz=config.tz,
    )
    numbers = {
        "completed_today": dashboard.completed_today,
        "completed_this_week": dashboard.completed_this_week,
        "completed_this_month": dashboard.completed_this_month,
        "high_priority": dashboard.high_priority,
        "active": dashboard.active,
    }
    if as_json:
        click.echo(json.dumps({"date": dashboard.date.isoformat(), **numbers}, indent=2))
        return
    for key, value in numbers.items():
        click.echo(f"{key.replace('_', ' ').capitalize():22} {value}")


@main.command()
@click.argument("title")
@click.option("--description", default="")
@click.option("--priority", type=click.Choice(list(PRIORITY_NAMES)), default="low", show_default=True)
@click.option("--category", "category_id", default=None, help="Category id")
@click.option("--deadline", default=None, help="ISO timestamp, e.g. 2025-04-20T10:00")
@click.option("--days", default=None, help="Recurring weekdays, e.g. mon,wed,fri")
@click.option(
    "--reminder",
    type=click.Choice([r.value for r in ReminderOffset]),
    default=ReminderOffset.NONE.value,
    show_default=True,
)
def add(
    title: str,
    description: str,
    priority: str,
    category_id: str | None,
    deadline: str | None,
    days: str | None,
    reminder: str,
):
    """Create a task. With --days it recurs on those weekdays."""
    recurrence_days = None
    if days:
        try:
            recurrence_days = [Weekday.parse(d) for d in days.split(",") if d.strip()]
        except ValueError as e:
            raise click.BadParameter(str(e))

    deadline_at = None
    if deadline and not recurrence_days:
        config = load_config()
        try:
            deadline_at = datetime.fromisoformat(deadline)
        except ValueError:
            raise click.BadParameter(f"Expected an ISO timestamp, got {deadline!r}")
        if deadline_at.tzinfo is None:
            deadline_at = deadline_at.replace(tzinfo=config.tz)

    _, manager = _connect()
    result = manager.create(
        task_payload(
            title,
            description=description,
            priority=PRIORITY_NAMES[priority],
            category_id=category_id,
            deadline=deadline_at,
            recurrence_days=recurrence_days,
            reminder=ReminderOffset(reminder),
        )
    )
    uuid = result.task.uuid if result.task else ""
    _report(result, f"Created {title!r} {uuid}".rstrip())


def _set_completion(uuid: str, day_str: str | None, want_done: bool) -> None:
    config, manager = _connect()
    target = _parse_date(day_str, config)
    task = manager.store.snapshot.find(uuid)
    if task is None:
        _fail(f"Unknown task {uuid}")

    if is_completed(task, target) == want_done:
        state = "done" if want_done else "not done"
        click.echo(f"{task.title!r} is already {state}.")
        return

    result = manager.toggle_completed(uuid, target)
    _report(result, f"{'Completed' if want_done else 'Reopened'} {task.title!r}.")


@main.command()
@click.argument("uuid")
@click.option("--date", "day_str", default=None, help="Day for recurring tasks (YYYY-MM-DD)")
def done(uuid: str, day_str: str | None):
    """Mark a task completed (for one day if it recurs)."""
    _set_completion(uuid, day_str, want_done=True)


@main.command()
@click.argument("uuid")
@click.option("--date", "day_str", default=None, help="Day for recurring tasks (YYYY-MM-DD)")
def undo(uuid: str, day_str: str | None):
    """Undo a completion (for one day if it recurs)."""
    _set_completion(uuid, day_str, want_done=False)


@main.command()
@click.argument("uuid")
def archive(uuid: str):
    """Archive a task."""
    _, manager = _connect()
    _report(manager.set_archived(uuid, True), f"Archived {uuid}.")


@main.command()
@click.argument("uuid")
def unarchive(uuid: str):
    """Restore an archived task."""
    _, manager = _connect()
    _report(manager.set_archived(uuid, False), f"Restored {uuid}.")


@main.command("rm")
@click.argument("uuid")
def remove(uuid: str):
    """Delete a task."""
    _, manager = _connect()
    _report(manager.remove(uuid), f"Deleted {uuid}.")


@main.command()
@click.option("--all", "show_all", is_flag=True, help="Include archived categories")
def categories(show_all: bool):
    """List categories."""
    config = load_config()
    manager = build_manager(config)
    try:
        items = manager.list_categories()
    except ServiceError as e:
        _fail(str(e))
    items = [c for c in items if show_all or not c.archived]
    if not items:
        click.echo("No categories.")
        return
    for c in items:
        suffix = " (archived)" if c.archived else ""
        click.echo(f"{c.id:>6}  {c.name}{suffix}")


@main.command()
def watch():
    """Keep tasks fresh and print reminders as they fall due."""
    config = load_config()
    manager = build_manager(config)

    def notify(task: RegularTask) -> None:
        due = task.deadline.astimezone(config.tz).strftime("%H:%M") if task.deadline else ""
        click.echo(f"Reminder: {task.title} (due {due}, {task.reminder.label})")

    poller = Poller(manager, config, notify)
    poller.start()
    click.echo("Watching for reminders. Press Ctrl+C to stop.")
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        poller.stop()


if __name__ == "__main__":
    main()
