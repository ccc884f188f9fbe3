"""Functional core - pure business logic with no I/O."""

from .tasks import (
    Category,
    ListTab,
    Occurrence,
    Priority,
    RecurringTask,
    RegularTask,
    Result,
    Task,
    TaskKind,
    Weekday,
    filter_tasks,
    merge_and_sort,
    task_from_api,
)
from .recurrence import is_completed_on, occurs_on
from .calendar import CalendarCell, MonthGrid, get_occurrences_for_date, project_month
from .windows import Granularity, TodayPolicy, compute_window_stats, get_todays_tasks
from .stats import DashboardStats, assemble_dashboard, count_active, count_high_priority
from .reminders import ReminderOffset, due_reminders

__all__ = [
    # Tasks
    "Category",
    "ListTab",
    "Occurrence",
    "Priority",
    "RecurringTask",
    "RegularTask",
    "Result",
    "Task",
    "TaskKind",
    "Weekday",
    "filter_tasks",
    "merge_and_sort",
    "task_from_api",
    # Recurrence
    "is_completed_on",
    "occurs_on",
    # Calendar
    "CalendarCell",
    "MonthGrid",
    "get_occurrences_for_date",
    "project_month",
    # Windows
    "Granularity",
    "TodayPolicy",
    "compute_window_stats",
    "get_todays_tasks",
    # Stats
    "DashboardStats",
    "assemble_dashboard",
    "count_active",
    "count_high_priority",
    # Reminders
    "ReminderOffset",
    "due_reminders",
]
