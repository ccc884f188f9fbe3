"""Tests for calendar projection."""

from datetime import date, datetime, timedelta, timezone

import pytest

from taskmaster.core.calendar import (
    get_occurrences_for_date,
    month_grid_bounds,
    project_day,
    project_month,
    shift_month,
    sort_for_display,
    start_of_week,
    week_order,
)
from taskmaster.core.tasks import RecurringTask, RegularTask, Weekday


# Fixtures
@pytest.fixture
def sunday():
    return date(2025, 4, 20)


@pytest.fixture
def task_x():
    return RegularTask(
        uuid="x",
        title="Submission",
        priority=3,
        deadline=datetime(2025, 4, 20, 10, 0, tzinfo=timezone.utc),
        sequence_number=1,
    )


@pytest.fixture
def task_y():
    return RecurringTask(
        uuid="y",
        title="Weekly review",
        recurrence_days=frozenset({Weekday.SUNDAY}),
        sequence_number=2,
    )


@pytest.fixture
def make_regular():
    """Factory for regular tasks due on a given day."""

    def _make(uuid: str, day: date, priority: int = 0, seq: int | None = None, **kwargs) -> RegularTask:
        return RegularTask(
            uuid=uuid,
            title=f"Task {uuid}",
            priority=priority,
            deadline=datetime.combine(day, datetime.min.time(), tzinfo=timezone.utc) + timedelta(hours=9),
            sequence_number=seq,
            **kwargs,
        )

    return _make


class TestGetOccurrencesForDate:
    def test_regular_and_recurring_on_same_day(self, task_x, task_y, sunday):
        occurrences = get_occurrences_for_date([task_x], [task_y], sunday)
        assert [o.task.uuid for o in occurrences] == ["x", "y"]
        assert all(o.completed is False for o in occurrences)
        assert all(o.date == sunday for o in occurrences)

    def test_recurring_completion_for_that_day(self, task_x, task_y, sunday):
        done = RecurringTask(
            uuid="y",
            title="Weekly review",
            recurrence_days=frozenset({Weekday.SUNDAY}),
            done_dates=(sunday,),
        )
        [_, occ] = get_occurrences_for_date([task_x], [done], sunday)
        assert occ.completed is True

        [occ_next] = get_occurrences_for_date([], [done], sunday + timedelta(days=7))
        assert occ_next.completed is False

    def test_regular_completed_flag(self, make_regular, sunday):
        task = make_regular("a", sunday, completed=True)
        [occ] = get_occurrences_for_date([task], [], sunday)
        assert occ.completed is True

    def test_excludes_archived(self, make_regular, sunday):
        archived_regular = make_regular("a", sunday, archived=True)
        archived_recurring = RecurringTask(
            uuid="r", title="r", recurrence_days=frozenset({Weekday.SUNDAY}), archived=True
        )
        assert get_occurrences_for_date([archived_regular], [archived_recurring], sunday) == []

    def test_other_days_excluded(self, task_x, task_y, sunday):
        assert get_occurrences_for_date([task_x], [task_y], sunday + timedelta(days=1)) == []

    def test_missing_deadline_never_matches(self, sunday):
        task = RegularTask(uuid="a", title="No date")
        assert get_occurrences_for_date([task], [], sunday) == []

    def test_empty_inputs(self, sunday):
        assert get_occurrences_for_date([], [], sunday) == []


class TestSortForDisplay:
    def test_priority_then_sequence(self, make_regular, sunday):
        tasks = [
            make_regular("low", sunday, priority=1, seq=1),
            make_regular("high-late", sunday, priority=3, seq=9),
            make_regular("high-early", sunday, priority=3, seq=2),
            make_regular("none", sunday, priority=0, seq=0),
        ]
        ordered = sort_for_display(get_occurrences_for_date(tasks, [], sunday))
        assert [o.task.uuid for o in ordered] == ["high-early", "high-late", "low", "none"]


class TestProjectDay:
    def test_caps_visible_tasks(self, make_regular, sunday):
        tasks = [make_regular(str(i), sunday, priority=i % 4, seq=i) for i in range(5)]
        cell = project_day(tasks, [], sunday)
        assert cell.total == 5
        assert len(cell.tasks) == 3
        assert cell.overflow_count == 2
        assert [o.priority for o in cell.tasks] == [3, 2, 1]

    @pytest.mark.parametrize("count", [0, 1, 3, 4, 8])
    def test_overflow_plus_visible_equals_total(self, make_regular, sunday, count):
        tasks = [make_regular(str(i), sunday, seq=i) for i in range(count)]
        cell = project_day(tasks, [], sunday)
        assert cell.overflow_count + min(3, cell.total) == cell.total
        assert cell.total == count

    def test_custom_limit(self, make_regular, sunday):
        tasks = [make_regular(str(i), sunday, seq=i) for i in range(4)]
        cell = project_day(tasks, [], sunday, limit=1)
        assert len(cell.tasks) == 1
        assert cell.overflow_count == 3

    def test_today_flag(self, sunday):
        assert project_day([], [], sunday, today=sunday).is_today is True
        assert project_day([], [], sunday, today=sunday + timedelta(days=1)).is_today is False


class TestProjectMonth:
    def test_april_2025_grid(self, task_x, task_y):
        grid = project_month([task_x], [task_y], 2025, 4)
        assert len(grid.weeks) == 5
        assert all(len(week) == 7 for week in grid.weeks)
        assert grid.cells[0].date == date(2025, 3, 30)
        assert grid.cells[-1].date == date(2025, 5, 3)
        assert grid.cells[0].in_month is False
        assert grid.cell_for(date(2025, 4, 1)).in_month is True

    def test_rows_start_on_week_start(self):
        grid = project_month([], [], 2025, 4, week_start=Weekday.MONDAY)
        assert all(week[0].date.weekday() == 0 for week in grid.weeks)
        assert grid.weekday_headers()[0] == "Mon"

    def test_recurring_fills_every_matching_day(self, task_y):
        grid = project_month([], [task_y], 2025, 4)
        sundays = [c for c in grid.cells if c.total]
        assert [c.date for c in sundays] == [
            date(2025, 3, 30),
            date(2025, 4, 6),
            date(2025, 4, 13),
            date(2025, 4, 20),
            date(2025, 4, 27),
        ]

    def test_badge_counts_both_kinds(self, task_x, task_y):
        grid = project_month([task_x], [task_y], 2025, 4)
        cell = grid.cell_for(date(2025, 4, 20))
        assert cell.total == 2
        assert [o.task.uuid for o in cell.tasks] == ["x", "y"]

    def test_exact_four_week_month(self):
        # February 2026 starts on a Sunday and ends on a Saturday
        grid = project_month([], [], 2026, 2)
        assert len(grid.weeks) == 4
        assert all(c.in_month for c in grid.cells)

    def test_title_and_headers(self):
        grid = project_month([], [], 2025, 4)
        assert grid.title == "April 2025"
        assert grid.weekday_headers() == ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


class TestMonthHelpers:
    def test_shift_month_forward_across_year(self):
        assert shift_month(2025, 12, 1) == (2026, 1)

    def test_shift_month_back_across_year(self):
        assert shift_month(2025, 1, -1) == (2024, 12)

    def test_shift_month_zero(self):
        assert shift_month(2025, 4, 0) == (2025, 4)

    def test_start_of_week(self, sunday):
        assert start_of_week(date(2025, 4, 23)) == sunday
        assert start_of_week(date(2025, 4, 23), Weekday.MONDAY) == date(2025, 4, 21)
        assert start_of_week(sunday) == sunday

    def test_week_order(self):
        assert week_order(Weekday.MONDAY)[0] is Weekday.MONDAY
        assert week_order(Weekday.MONDAY)[-1] is Weekday.SUNDAY

    def test_month_grid_bounds(self):
        assert month_grid_bounds(2025, 4) == (date(2025, 3, 30), date(2025, 5, 3))
