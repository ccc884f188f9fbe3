"""Shared workflow layer between the CLI and the poller.

Each operation calls the Task Service, applies the canonical result to the
store, and returns a Result. The store is never touched on failure.
"""

import logging
from datetime import date, tzinfo
from pathlib import Path

from .adapters.file_session import FileSession
from .adapters.http_api import HttpCategoryService, HttpTaskService, ServiceError
from .config import SESSION_FILE, Config
from .core.dates import UTC, today_in
from .core.recurrence import is_completed_on
from .core.tasks import Category, Result, TaskKind
from .ports.category_service import CategoryService
from .ports.task_service import TaskService
from .store import TaskSnapshot, TaskStore

logger = logging.getLogger(__name__)


class TaskManager:
    """Coordinates service calls with store updates."""

    def __init__(
        self,
        service: TaskService,
        store: TaskStore | None = None,
        categories: CategoryService | None = None,
        tz: tzinfo = UTC,
    ):
        self.service = service
        self.store = store or TaskStore()
        self.categories = categories
        self.tz = tz

    def refresh(self) -> TaskSnapshot:
        """Fetch both collections and replace the snapshot. Stale results are dropped."""
        token = self.store.begin_refresh()
        listing = self.service.list()
        self.store.complete_refresh(token, listing.regular, listing.recurring)
        return self.store.snapshot

    def _run(self, action: str, call, on_success) -> Result:
        try:
            result = call()
        except ServiceError as e:
            logger.error(f"{action} failed: {e}")
            return Result(success=False, error=str(e))

        if not result.success:
            logger.warning(f"{action} rejected: {result.error}")
            return result

        on_success(result)
        return result

    def _apply_task(self, result: Result) -> None:
        if result.task is not None:
            self.store.apply_updated(result.task)

    def create(self, data: dict) -> Result:
        def apply(result: Result) -> None:
            if result.task is not None:
                self.store.apply_created(result.task)
                logger.info(f"Created task {result.task.uuid}")

        return self._run("Create task", lambda: self.service.create(data), apply)

    def update(self, uuid: str, data: dict) -> Result:
        return self._run(f"Update {uuid}", lambda: self.service.update(uuid, data), self._apply_task)

    def remove(self, uuid: str) -> Result:
        return self._run(
            f"Delete {uuid}",
            lambda: self.service.remove(uuid),
            lambda _: self.store.apply_removed(uuid),
        )

    def set_archived(self, uuid: str, archived: bool) -> Result:
        return self._run(
            f"Archive {uuid}",
            lambda: self.service.set_archived(uuid, archived),
            self._apply_task,
        )

    def toggle_completed(self, uuid: str, day: date | None = None) -> Result:
        """
        Flip completion of a task.

        Regular tasks flip their flag. Recurring tasks flip completion for
        ``day`` only (today by default) and leave every other day alone.
        """
        day = day or today_in(self.tz)
        task = self.store.snapshot.find(uuid)
        if task is None:
            return Result(success=False, error=f"Unknown task {uuid}")

        match task.kind:
            case TaskKind.REGULAR:
                done, is_recurring, target = task.completed, False, None
            case TaskKind.RECURRING:
                done, is_recurring, target = is_completed_on(task, day, self.tz), True, day

        def call() -> Result:
            if done:
                return self.service.undo_completed(uuid, target)
            return self.service.set_completed(uuid, is_recurring, target)

        return self._run(f"Toggle {uuid}", call, self._apply_task)

    def list_categories(self) -> list[Category]:
        if self.categories is None:
            return []
        return self.categories.list()


def build_manager(config: Config, session_path: Path | None = None) -> TaskManager:
    """Wire the HTTP adapters into a TaskManager."""
    session = FileSession(session_path or SESSION_FILE)
    return TaskManager(
        service=HttpTaskService(session, config),
        categories=HttpCategoryService(session, config),
        tz=config.tz,
    )
