"""Recurrence evaluation - which weekdays a task falls on and when it was done."""

from dataclasses import replace
from datetime import date, datetime, tzinfo

from .dates import UTC, iter_days, to_day
from .tasks import RecurringTask, Weekday


def occurs_on(task: RecurringTask, day: date | datetime, tz: tzinfo = UTC) -> bool:
    """
    True iff the weekday of ``day`` is in the task's recurrence set.

    A task with no recurrence days never occurs. Datetimes are reduced to
    their calendar day first, so the time of day never matters.
    """
    if not task.recurrence_days:
        return False
    return Weekday.of(to_day(day, tz)) in task.recurrence_days


def is_completed_on(task: RecurringTask, day: date | datetime, tz: tzinfo = UTC) -> bool:
    """True iff the task was marked done on that calendar day."""
    target = to_day(day, tz)
    return any(to_day(done, tz) == target for done in task.done_dates or ())


def with_done_date(task: RecurringTask, day: date | datetime, tz: tzinfo = UTC) -> RecurringTask:
    """Return a copy of the task marked done on ``day``. Other days are untouched."""
    target = to_day(day, tz)
    if is_completed_on(task, target, tz):
        return task
    return replace(task, done_dates=(*task.done_dates, target))


def without_done_date(task: RecurringTask, day: date | datetime, tz: tzinfo = UTC) -> RecurringTask:
    """Return a copy of the task with ``day`` removed from its done dates."""
    target = to_day(day, tz)
    remaining = tuple(d for d in task.done_dates if to_day(d, tz) != target)
    if len(remaining) == len(task.done_dates):
        return task
    return replace(task, done_dates=remaining)


def occurrences_between(task: RecurringTask, start: date, end: date, tz: tzinfo = UTC) -> list[date]:
    """Days in [start, end] on which the task occurs."""
    return [d for d in iter_days(start, end) if occurs_on(task, d, tz)]


def done_dates_between(task: RecurringTask, start: date, end: date, tz: tzinfo = UTC) -> list[date]:
    """Done dates that fall inside [start, end]."""
    return [d for d in (to_day(x, tz) for x in task.done_dates) if start <= d <= end]
