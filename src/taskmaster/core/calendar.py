"""Pure calendar projection - no I/O dependencies."""

import calendar as _calendar
from dataclasses import dataclass, field
from datetime import date, timedelta, tzinfo

from .dates import UTC
from .recurrence import is_completed_on, occurs_on
from .tasks import Occurrence, RecurringTask, RegularTask, Weekday

CELL_LIMIT = 3


@dataclass
class CalendarCell:
    """One day of the month grid."""

    date: date
    in_month: bool
    is_today: bool
    tasks: list[Occurrence] = field(default_factory=list)
    total: int = 0

    @property
    def overflow_count(self) -> int:
        """How many candidates did not fit ("+N more")."""
        return max(0, self.total - len(self.tasks))

    @property
    def has_tasks(self) -> bool:
        return self.total > 0


@dataclass
class MonthGrid:
    """A month laid out in complete weeks."""

    year: int
    month: int
    week_start: Weekday
    weeks: list[list[CalendarCell]]

    @property
    def cells(self) -> list[CalendarCell]:
        return [cell for week in self.weeks for cell in week]

    def cell_for(self, day: date) -> CalendarCell | None:
        return next((c for c in self.cells if c.date == day), None)

    def weekday_headers(self) -> list[str]:
        return [day.value[:3].title() for day in week_order(self.week_start)]

    @property
    def title(self) -> str:
        return date(self.year, self.month, 1).strftime("%B %Y")


def week_order(week_start: Weekday = Weekday.SUNDAY) -> list[Weekday]:
    """All weekdays starting from ``week_start``."""
    days = list(Weekday)
    i = days.index(week_start)
    return days[i:] + days[:i]


def start_of_week(day: date, week_start: Weekday = Weekday.SUNDAY) -> date:
    """First day of the week containing ``day``."""
    offset = (day.weekday() - week_start.py_weekday) % 7
    return day - timedelta(days=offset)


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move ``delta`` months forward (or back) from year/month."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_grid_bounds(year: int, month: int, week_start: Weekday = Weekday.SUNDAY) -> tuple[date, date]:
    """First and last day shown for a month, padded out to whole weeks."""
    first = date(year, month, 1)
    last = date(year, month, _calendar.monthrange(year, month)[1])
    grid_start = start_of_week(first, week_start)
    grid_end = start_of_week(last, week_start) + timedelta(days=6)
    return grid_start, grid_end


def get_occurrences_for_date(
    regular: list[RegularTask],
    recurring: list[RecurringTask],
    day: date,
    tz: tzinfo = UTC,
) -> list[Occurrence]:
    """
    Every non-archived task that applies on ``day``, with its completion.

    Regular tasks apply on their deadline day; recurring tasks on each of
    their weekdays. Input order is preserved, regular tasks first.
    Pure function - no I/O.
    """
    occurrences = [
        Occurrence(task=t, date=day, completed=t.completed)
        for t in regular
        if not t.archived and t.deadline_day(tz) == day
    ]
    occurrences.extend(
        Occurrence(task=t, date=day, completed=is_completed_on(t, day, tz))
        for t in recurring
        if not t.archived and occurs_on(t, day, tz)
    )
    return occurrences


def sort_for_display(occurrences: list[Occurrence]) -> list[Occurrence]:
    """
    Priority descending, then sequence number ascending.

    Tasks without a sequence number keep their relative order after numbered ones.
    """

    def sort_key(o: Occurrence) -> tuple[int, bool, int]:
        seq = o.sequence_number
        return (-o.priority, seq is None, seq if seq is not None else 0)

    return sorted(occurrences, key=sort_key)


def project_day(
    regular: list[RegularTask],
    recurring: list[RecurringTask],
    day: date,
    in_month: bool = True,
    today: date | None = None,
    limit: int = CELL_LIMIT,
    tz: tzinfo = UTC,
) -> CalendarCell:
    """Build a single calendar cell, capped at ``limit`` visible tasks."""
    candidates = sort_for_display(get_occurrences_for_date(regular, recurring, day, tz))
    return CalendarCell(
        date=day,
        in_month=in_month,
        is_today=day == today,
        tasks=candidates[: max(0, limit)],
        total=len(candidates),
    )


def project_month(
    regular: list[RegularTask],
    recurring: list[RecurringTask],
    year: int,
    month: int,
    week_start: Weekday = Weekday.SUNDAY,
    limit: int = CELL_LIMIT,
    today: date | None = None,
    tz: tzinfo = UTC,
) -> MonthGrid:
    """
    Project both task kinds onto a month grid.

    The grid spans complete weeks, so leading and trailing days of the
    neighbouring months are included and flagged ``in_month=False``.
    Pure function - no I/O.
    """
    grid_start, grid_end = month_grid_bounds(year, month, week_start)

    weeks: list[list[CalendarCell]] = []
    day = grid_start
    while day <= grid_end:
        week = []
        for _ in range(7):
            week.append(
                project_day(
                    regular,
                    recurring,
                    day,
                    in_month=day.month == month,
                    today=today,
                    limit=limit,
                    tz=tz,
                )
            )
            day += timedelta(days=1)
        weeks.append(week)

    return MonthGrid(year=year, month=month, week_start=week_start, weeks=weeks)
