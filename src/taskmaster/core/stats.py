"""Dashboard statistics - no I/O dependencies."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, tzinfo

from .dates import UTC
from .tasks import Occurrence, Priority, RecurringTask, RegularTask, Task, TaskKind, Weekday
from .windows import Granularity, TodayPolicy, compute_window_stats, get_todays_tasks


@dataclass
class DashboardStats:
    """Numbers shown on the dashboard cards."""

    date: date
    completed_today: int
    completed_this_week: int
    completed_this_month: int
    high_priority: int
    active: int


def _is_completed(item: Occurrence | Task) -> bool:
    if isinstance(item, Occurrence):
        return item.completed
    match item.kind:
        case TaskKind.REGULAR:
            return item.completed
        case TaskKind.RECURRING:
            # Without a day there is nothing to be completed on
            return False
    raise ValueError(f"Unknown task kind: {item.kind}")


def count_high_priority(items: Iterable[Occurrence | Task]) -> int:
    """Count items with high priority."""
    return sum(1 for item in items if item.priority == Priority.HIGH)


def count_active(items: Iterable[Occurrence | Task]) -> int:
    """Count items that are neither completed nor archived."""
    return sum(1 for item in items if not _is_completed(item) and not item.archived)


def assemble_dashboard(
    regular: list[RegularTask],
    recurring: list[RecurringTask],
    today: date,
    policy: TodayPolicy = TodayPolicy.ALL_ACTIVE,
    week_start: Weekday = Weekday.SUNDAY,
    tz: tzinfo = UTC,
) -> DashboardStats:
    """
    Assemble dashboard numbers from the current task collections.

    Priority and active counts are taken over today's tasks.
    Pure function - no I/O.
    """
    todays = get_todays_tasks(regular, recurring, today, policy, tz)

    def completed_in(granularity: Granularity) -> int:
        return compute_window_stats(regular, recurring, today, granularity, week_start, tz)

    return DashboardStats(
        date=today,
        completed_today=completed_in(Granularity.DAY),
        completed_this_week=completed_in(Granularity.WEEK),
        completed_this_month=completed_in(Granularity.MONTH),
        high_priority=count_high_priority(todays),
        active=count_active(todays),
    )
