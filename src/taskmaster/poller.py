"""Background refresh and reminder checks."""

import logging
from collections.abc import Callable
from datetime import datetime

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .adapters.http_api import ServiceError
from .config import Config
from .core.dates import UTC
from .core.reminders import due_reminders
from .core.tasks import RegularTask
from .workflows import TaskManager

logger = logging.getLogger(__name__)


class Poller:
    """
    Periodically refreshes the task store and announces due reminders.

    Each reminder is announced once per task and deadline.
    """

    def __init__(
        self,
        manager: TaskManager,
        config: Config,
        notify: Callable[[RegularTask], None],
    ):
        self.manager = manager
        self.config = config
        self.notify = notify
        self._announced: set[tuple[str, datetime | None]] = set()
        self.scheduler = BackgroundScheduler(timezone=config.tz)

    def refresh_tasks(self) -> None:
        try:
            snapshot = self.manager.refresh()
        except ServiceError as e:
            logger.error(f"Background refresh failed: {e}")
            return
        logger.debug(f"Refreshed tasks, snapshot v{snapshot.version}")

    def check_reminders(self, now: datetime | None = None) -> list[RegularTask]:
        """Notify about reminders that are due and not yet announced."""
        now = now or datetime.now(UTC)
        due = due_reminders(list(self.manager.store.snapshot.regular), now)
        # Forget reminders whose window has closed
        self._announced &= {(t.uuid, t.deadline) for t in due}

        fresh = []
        for task in due:
            key = (task.uuid, task.deadline)
            if key in self._announced:
                continue
            self._announced.add(key)
            fresh.append(task)
            try:
                self.notify(task)
            except Exception as e:
                logger.error(f"Failed to deliver reminder for {task.uuid}: {e}")
        return fresh

    def setup(self) -> BackgroundScheduler:
        """Register the interval jobs."""
        self.scheduler.add_job(
            self.refresh_tasks,
            IntervalTrigger(seconds=self.config.refresh_interval_seconds),
            id="refresh_tasks",
            max_instances=1,
            coalesce=True,
        )
        logger.info(f"Scheduled task refresh every {self.config.refresh_interval_seconds}s")

        self.scheduler.add_job(
            self.check_reminders,
            IntervalTrigger(seconds=self.config.reminder_check_seconds),
            id="check_reminders",
            max_instances=1,
            coalesce=True,
        )
        logger.info(f"Scheduled reminder checks every {self.config.reminder_check_seconds}s")
        return self.scheduler

    def start(self) -> None:
        self.refresh_tasks()
        self.setup()
        self.scheduler.start()
        logger.info("Poller started")

    def stop(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Poller stopped")
