"""Pure task domain logic - no I/O dependencies."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from enum import Enum, IntEnum

from .dates import UTC, parse_day, parse_instant, to_day
from .reminders import ReminderOffset

logger = logging.getLogger(__name__)


class TaskKind(Enum):
    """Discriminant shared by both task variants."""

    REGULAR = "regular"
    RECURRING = "recurring"


class Priority(IntEnum):
    NONE = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3


class Weekday(Enum):
    """Recurrence weekdays, in calendar-header order."""

    SUNDAY = "SUNDAY"
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"

    @classmethod
    def of(cls, day: date) -> "Weekday":
        """Weekday of a calendar day."""
        # date.weekday(): Monday == 0
        return _BY_PY_WEEKDAY[day.weekday()]

    @property
    def py_weekday(self) -> int:
        return _BY_PY_WEEKDAY.index(self)

    @classmethod
    def parse(cls, value: str) -> "Weekday":
        """Parse a weekday name, case-insensitive, full or three-letter."""
        text = value.strip().upper()
        for day in cls:
            if day.value == text or day.value[:3] == text:
                return day
        raise ValueError(f"Unknown weekday: {value!r}")


_BY_PY_WEEKDAY = [
    Weekday.MONDAY,
    Weekday.TUESDAY,
    Weekday.WEDNESDAY,
    Weekday.THURSDAY,
    Weekday.FRIDAY,
    Weekday.SATURDAY,
    Weekday.SUNDAY,
]


@dataclass(frozen=True)
class Category:
    """A task category. Read-only to the core."""

    id: str
    name: str
    color: str = ""
    archived: bool = False

    @classmethod
    def from_api(cls, data: dict) -> "Category":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            color=data.get("color", "") or "",
            archived=bool(data.get("archived", False)),
        )


@dataclass(frozen=True)
class RegularTask:
    """A one-shot task with a deadline."""

    uuid: str
    title: str
    description: str = ""
    priority: int = Priority.NONE
    category_id: str | None = None
    deadline: datetime | None = None
    completed: bool = False
    archived: bool = False
    sequence_number: int | None = None
    created_at: datetime | None = None
    reminder: ReminderOffset = ReminderOffset.NONE
    kind: TaskKind = field(default=TaskKind.REGULAR, init=False)

    def deadline_day(self, tz: tzinfo = UTC) -> date | None:
        """Calendar day of the deadline in the reference timezone."""
        if self.deadline is None:
            return None
        return to_day(self.deadline, tz)


@dataclass(frozen=True)
class RecurringTask:
    """A task due on a fixed set of weekdays, completed per day."""

    uuid: str
    title: str
    description: str = ""
    priority: int = Priority.NONE
    category_id: str | None = None
    recurrence_days: frozenset[Weekday] = frozenset()
    done_dates: tuple[date, ...] = ()
    archived: bool = False
    sequence_number: int | None = None
    created_at: datetime | None = None
    kind: TaskKind = field(default=TaskKind.RECURRING, init=False)

    def __post_init__(self):
        # Missing collections mean "none"
        object.__setattr__(self, "recurrence_days", frozenset(self.recurrence_days or ()))
        object.__setattr__(self, "done_dates", tuple(self.done_dates or ()))


Task =RegularTask | RecurringTask


@dataclass(frozen=True)
class Occurrence:
    """A task applied to one concrete day. Derived, never stored."""

    task: Task
    date: date
    completed: bool

    @property
    def title(self) -> str:
        return self.task.title

    @property
    def priority(self) -> int:
        return self.task.priority

    @property
    def archived(self) -> bool:
        return self.task.archived

    @property
    def sequence_number(self) -> int | None:
        return self.task.sequence_number

    @property
    def is_recurring(self) -> bool:
        return self.task.kind is TaskKind.RECURRING


@dataclass
class Result:
    """Outcome of a Task Service mutation."""

    success: bool
    task: Task | None = None
    error: str | None = None


# ============== API parsing ==============


def _parse_optional_instant(raw, uuid: str, field_name: str) -> datetime | None:
    if not raw:
        return None
    try:
        return parse_instant(str(raw))
    except ValueError:
        logger.warning(f"Task {uuid}: unparsable {field_name} {raw!r}, ignoring")
        return None


def _parse_weekdays(raw, uuid: str) -> frozenset[Weekday]:
    days = set()
    for value in raw or []:
        try:
            days.add(Weekday.parse(str(value)))
        except ValueError:
            logger.warning(f"Task {uuid}: unknown recurrence day {value!r}, skipping")
    return frozenset(days)


def _parse_done_dates(raw, uuid: str, tz: tzinfo) -> tuple[date, ...]:
    days: list[date] = []
    for value in raw or []:
        try:
            day = parse_day(str(value), tz)
        except ValueError:
            logger.warning(f"Task {uuid}: unparsable done date {value!r}, skipping")
            continue
        if day not in days:
            days.append(day)
    return tuple(days)


def _parse_priority(raw, uuid: str) -> Priority:
    """Accept a level number or a level name (``"high"``)."""
    if raw is None or raw == "":
        return Priority.NONE
    try:
        return Priority(int(raw))
    except (TypeError, ValueError):
        pass
    try:
        return Priority[str(raw).strip().upper()]
    except KeyError:
        logger.warning(f"Task {uuid}: unknown priority {raw!r}, using none")
        return Priority.NONE


def _parse_sequence(raw, uuid: str) -> int | None:
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning(f"Task {uuid}: unparsable sequenceNumber {raw!r}, ignoring")
        return None


def _is_recurring_payload(data: dict) -> bool:
    kind = data.get("type") or data.get("kind")
    if kind:
        return str(kind).lower() == TaskKind.RECURRING.value
    return "recurrenceDays" in data


def task_from_api(data: dict, tz: tzinfo = UTC) -> Task:
    """
    Create a RegularTask or RecurringTask from a Task Service payload.

    The variant is decided once, here. An explicit ``type`` field wins;
    otherwise a ``recurrenceDays`` key marks a recurring task.
    """
    uuid = str(data.get("uuid") or data["id"])
    common = dict(
        uuid=uuid,
        title=data.get("title", ""),
        description=data.get("description", "") or "",
        priority=_parse_priority(data.get("priority"), uuid),
        category_id=str(data["categoryId"]) if data.get("categoryId") is not None else None,
        archived=bool(data.get("archived", False)),
        sequence_number=_parse_sequence(data.get("sequenceNumber"), uuid),
        created_at=_parse_optional_instant(data.get("createdAt"), uuid, "createdAt"),
    )

    if _is_recurring_payload(data):
        return RecurringTask(
            recurrence_days=_parse_weekdays(data.get("recurrenceDays"), uuid),
            done_dates=_parse_done_dates(data.get("doneDates"), uuid, tz),
            **common,
        )

    reminder = ReminderOffset.NONE
    if data.get("reminderTime"):
        try:
            reminder = ReminderOffset(data["reminderTime"])
        except ValueError:
            logger.warning(f"Task {uuid}: unknown reminder {data['reminderTime']!r}, ignoring")

    return RegularTask(
        deadline=_parse_optional_instant(data.get("deadline"), uuid, "deadline"),
        completed=bool(data.get("completed", False)),
        reminder=reminder,
        **common,
    )


def task_payload(
    title: str,
    description: str = "",
    priority: int = Priority.NONE,
    category_id: str | None = None,
    deadline: datetime | None = None,
    recurrence_days: list[Weekday] | None = None,
    reminder: ReminderOffset = ReminderOffset.NONE,
) -> dict:
    """Build a create/update payload for the Task Service."""
    data: dict = {
        "title": title,
        "description": description,
        "priority": int(priority),
        "categoryId": category_id,
    }
    if recurrence_days:
        data["type"] = TaskKind.RECURRING.value
        ordered = [d for d in Weekday if d in set(recurrence_days)]
        data["recurrenceDays"] = [d.value for d in ordered]
    else:
        data["type"] = TaskKind.REGULAR.value
        if deadline is not None:
            if deadline.tzinfo is None:
                deadline = deadline.replace(tzinfo=UTC)
            data["deadline"] = deadline.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
        data["reminderTime"] = reminder.value
    return data


# ============== Ordering & list filters ==============


def merge_and_sort(regular: list[RegularTask], recurring: list[RecurringTask]) -> list[Task]:
    """
    Merge both collections ordered by sequence number.

    Stable: equal keys keep their input order, and tasks without a sequence
    number go last in input order. Sorting sorted output is a no-op.
    Pure function - no I/O.
    """

    def sort_key(t: Task) -> tuple[bool, int]:
        seq = t.sequence_number
        return (seq is None, seq if seq is not None else 0)

    return sorted([*regular, *recurring], key=sort_key)


class ListTab(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    ALL = "all"
    ARCHIVED = "archived"


def is_completed(task: Task, on: date) -> bool:
    """Completion of either variant, judged on a given day for recurring tasks."""
    match task.kind:
        case TaskKind.REGULAR:
            return task.completed
        case TaskKind.RECURRING:
            from .recurrence import is_completed_on

            return is_completed_on(task, on)
    raise ValueError(f"Unknown task kind: {task.kind}")


def filter_tasks(
    tasks: list[Task],
    tab: ListTab = ListTab.PENDING,
    search: str = "",
    priority: int | None = None,
    category_id: str | None = None,
    on: date | None = None,
) -> list[Task]:
    """
    Filter a task list the way the task list view does.

    Pending and completed exclude archived tasks; archived shows only those;
    all shows everything. Order is preserved.
    Pure function - no I/O.
    """
    on = on or date.today()
    needle = search.strip().lower()

    def matches_tab(t: Task) -> bool:
        match tab:
            case ListTab.PENDING:
                return not t.archived and not is_completed(t, on)
            case ListTab.COMPLETED:
                return not t.archived and is_completed(t, on)
            case ListTab.ARCHIVED:
                return t.archived
            case ListTab.ALL:
                return True

    return [
        t
        for t in tasks
        if matches_tab(t)
        and (not needle or needle in t.title.lower() or needle in t.description.lower())
        and (priority is None or t.priority == priority)
        and (category_id is None or t.category_id == category_id)
    ]


def find_task(tasks: list[Task], uuid: str) -> Task | None:
    """Find a task by uuid."""
    return next((t for t in tasks if t.uuid == uuid), None)
