"""Task service interface."""

from dataclasses import dataclass, field
from datetime import date
from typing import Protocol

from taskmaster.core.tasks import RecurringTask, RegularTask, Result


@dataclass
class TaskListing:
    """Both task collections as returned by the service."""

    regular: list[RegularTask] = field(default_factory=list)
    recurring: list[RecurringTask] = field(default_factory=list)


class TaskService(Protocol):
    """Interface for the backend that owns tasks."""

    def list(self) -> TaskListing:
        """Fetch all regular and recurring tasks."""
        ...

    def create(self, data: dict) -> Result:
        """Create a task. The result carries the canonical object."""
        ...

    def update(self, uuid: str, data: dict) -> Result:
        """Replace a task's editable fields."""
        ...

    def remove(self, uuid: str) -> Result:
        """Delete a task."""
        ...

    def set_completed(self, uuid: str, is_recurring: bool, day: date | None = None) -> Result:
        """Mark a regular task done, or a recurring task done on ``day``."""
        ...

    def undo_completed(self, uuid: str, day: date | None = None) -> Result:
        """Reverse ``set_completed``."""
        ...

    def set_archived(self, uuid: str, archived: bool) -> Result:
        """Archive or unarchive a task."""
        ...
