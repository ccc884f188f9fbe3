"""Date-window aggregation: today's tasks and completion counts."""

import calendar as _calendar
from datetime import date, timedelta, tzinfo
from enum import Enum

from .calendar import start_of_week
from .dates import UTC
from .recurrence import done_dates_between, is_completed_on, occurs_on
from .tasks import Occurrence, RecurringTask, RegularTask, Weekday


class TodayPolicy(Enum):
    """Which regular tasks count as "today's tasks"."""

    ALL_ACTIVE = "all_active"  # every non-archived regular task, whatever its deadline
    DUE_TODAY = "due_today"  # only regular tasks whose deadline falls today


class Granularity(Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


def get_todays_tasks(
    regular: list[RegularTask],
    recurring: list[RecurringTask],
    today: date,
    policy: TodayPolicy = TodayPolicy.ALL_ACTIVE,
    tz: tzinfo = UTC,
) -> list[Occurrence]:
    """
    Tasks that apply today, regular first then recurring, in input order.

    Recurring tasks are stamped with their completion for ``today``.
    Pure function - no I/O.
    """
    todays = []
    for task in regular:
        if task.archived:
            continue
        if policy is TodayPolicy.DUE_TODAY and task.deadline_day(tz) != today:
            continue
        todays.append(Occurrence(task=task, date=today, completed=task.completed))

    for task in recurring:
        if task.archived or not occurs_on(task, today, tz):
            continue
        todays.append(Occurrence(task=task, date=today, completed=is_completed_on(task, today, tz)))

    return todays


def window_bounds(
    reference: date,
    granularity: Granularity,
    week_start: Weekday = Weekday.SUNDAY,
) -> tuple[date, date]:
    """First and last day (inclusive) of the window containing ``reference``."""
    match granularity:
        case Granularity.DAY:
            return reference, reference
        case Granularity.WEEK:
            start = start_of_week(reference, week_start)
            return start, start + timedelta(days=6)
        case Granularity.MONTH:
            last = _calendar.monthrange(reference.year, reference.month)[1]
            return reference.replace(day=1), reference.replace(day=last)
    raise ValueError(f"Unknown granularity: {granularity}")


def compute_window_stats(
    regular: list[RegularTask],
    recurring: list[RecurringTask],
    reference: date,
    granularity: Granularity,
    week_start: Weekday = Weekday.SUNDAY,
    tz: tzinfo = UTC,
) -> int:
    """
    Count completions inside the window containing ``reference``.

    A regular task counts if it is completed and its deadline is in the
    window. A recurring task counts once if any of its done dates is in the
    window, no matter how many.
    Pure function - no I/O.
    """
    start, end = window_bounds(reference, granularity, week_start)

    regular_count = 0
    for task in regular:
        if not task.completed:
            continue
        day = task.deadline_day(tz)
        if day is not None and start <= day <= end:
            regular_count += 1

    recurring_count = sum(1 for task in recurring if done_dates_between(task, start, end, tz))

    return regular_count + recurring_count
