"""In-memory task store holding one atomically replaced snapshot."""

import logging
import threading
from dataclasses import dataclass

from .core.tasks import RecurringTask, RegularTask, Task, TaskKind, find_task, merge_and_sort

logger = logging.getLogger(__name__)


def _sorted_by_sequence(tasks):
    return tuple(merge_and_sort(list(tasks), []))


@dataclass(frozen=True)
class TaskSnapshot:
    """Both collections at one point in time. Never mutated."""

    regular: tuple[RegularTask, ...] = ()
    recurring: tuple[RecurringTask, ...] = ()
    version: int = 0

    @property
    def all_tasks(self) -> list[Task]:
        return merge_and_sort(list(self.regular), list(self.recurring))

    def find(self, uuid: str) -> Task | None:
        return find_task(self.all_tasks, uuid)


class TaskStore:
    """
    Holds the current task snapshot.

    Every change builds a new snapshot and swaps it in whole, so readers
    always see a fully applied state. Refreshes carry a token; a refresh
    that resolves after a newer one has been applied is discarded.
    """

    def __init__(self):
        self._snapshot = TaskSnapshot()
        self._lock = threading.Lock()
        self._issued_token = 0
        self._applied_token = 0

    @property
    def snapshot(self) -> TaskSnapshot:
        return self._snapshot

    def _swap(self, regular, recurring) -> TaskSnapshot:
        # Caller holds the lock
        self._snapshot = TaskSnapshot(
            regular=_sorted_by_sequence(regular),
            recurring=_sorted_by_sequence(recurring),
            version=self._snapshot.version + 1,
        )
        return self._snapshot

    def replace(self, regular: list[RegularTask], recurring: list[RecurringTask]) -> TaskSnapshot:
        """Replace both collections unconditionally."""
        with self._lock:
            return self._swap(regular, recurring)

    # ---- refresh guard ----

    def begin_refresh(self) -> int:
        """Reserve a token for a refresh about to be requested."""
        with self._lock:
            self._issued_token += 1
            return self._issued_token

    def complete_refresh(
        self,
        token: int,
        regular: list[RegularTask],
        recurring: list[RecurringTask],
    ) -> bool:
        """
        Apply a refresh result unless a newer refresh already landed.

        Returns True if the snapshot was replaced.
        """
        with self._lock:
            if token <= self._applied_token:
                logger.info(f"Discarding stale refresh {token} (already applied {self._applied_token})")
                return False
            self._applied_token = token
            self._swap(regular, recurring)
            logger.debug(f"Applied refresh {token}, snapshot v{self._snapshot.version}")
            return True

    # ---- single-task changes ----

    def apply_created(self, task: Task) -> TaskSnapshot:
        """Insert a task returned by the service and re-sort."""
        return self.apply_updated(task)

    def apply_updated(self, task: Task) -> TaskSnapshot:
        """Replace a task in place by uuid (or insert it) and re-sort."""
        with self._lock:
            current = self._snapshot
            regular = [t for t in current.regular if t.uuid != task.uuid]
            recurring = [t for t in current.recurring if t.uuid != task.uuid]
            replaced = len(regular) + len(recurring) < len(current.regular) + len(current.recurring)

            match task.kind:
                case TaskKind.REGULAR:
                    regular = _replace_or_append(current.regular, task, regular, replaced)
                case TaskKind.RECURRING:
                    recurring = _replace_or_append(current.recurring, task, recurring, replaced)

            return self._swap(regular, recurring)

    def apply_removed(self, uuid: str) -> TaskSnapshot:
        """Drop a task by uuid."""
        with self._lock:
            current = self._snapshot
            return self._swap(
                [t for t in current.regular if t.uuid != uuid],
                [t for t in current.recurring if t.uuid != uuid],
            )


def _replace_or_append(original, task, filtered, replaced):
    """Put ``task`` back where its uuid was in ``original``, else append it."""
    if replaced:
        for i, existing in enumerate(original):
            if existing.uuid == task.uuid:
                items = list(original)
                items[i] = task
                return items
    return [*filtered, task]

