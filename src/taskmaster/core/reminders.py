"""Reminder checks for regular tasks - no I/O dependencies."""

from datetime import datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING

from .dates import UTC

if TYPE_CHECKING:
    from .tasks import RegularTask


class ReminderOffset(Enum):
    """How long before the deadline a reminder fires."""

    NONE = "none"
    MINUTES_30 = "30min"
    HOUR_1 = "1hour"
    HOURS_3 = "3hours"
    DAY_1 = "1day"

    @property
    def delta(self) -> timedelta | None:
        return _DELTAS.get(self)

    @property
    def label(self) -> str:
        return _LABELS[self]


_DELTAS = {
    ReminderOffset.MINUTES_30: timedelta(minutes=30),
    ReminderOffset.HOUR_1: timedelta(hours=1),
    ReminderOffset.HOURS_3: timedelta(hours=3),
    ReminderOffset.DAY_1: timedelta(days=1),
}

_LABELS = {
    ReminderOffset.NONE: "No reminder",
    ReminderOffset.MINUTES_30: "30 minutes before",
    ReminderOffset.HOUR_1: "1 hour before",
    ReminderOffset.HOURS_3: "3 hours before",
    ReminderOffset.DAY_1: "1 day before",
}


def reminder_time(task: "RegularTask") -> datetime | None:
    """When the task's reminder fires, or None if it has none."""
    delta = task.reminder.delta
    if delta is None or task.deadline is None:
        return None
    return task.deadline - delta


def due_reminders(tasks: list["RegularTask"], now: datetime | None = None) -> list["RegularTask"]:
    """
    Tasks whose reminder window contains ``now``.

    The window runs from the reminder time up to the deadline itself.
    Completed and archived tasks never remind.
    Pure function - no I/O.
    """
    now = now or datetime.now(UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)

    due = []
    for task in tasks:
        if task.completed or task.archived:
            continue
        fires_at = reminder_time(task)
        if fires_at is not None and fires_at <= now <= task.deadline:
            due.append(task)
    return due
