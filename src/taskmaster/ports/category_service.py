"""Category service interface."""

from typing import Protocol

from taskmaster.core.tasks import Category


class CategoryService(Protocol):
    """Read-only access to categories."""

    def list(self) -> list[Category]:
        """Fetch all categories."""
        ...
