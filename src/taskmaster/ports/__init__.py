"""Ports - interfaces/protocols for external dependencies."""

from .task_service import TaskListing, TaskService
from .category_service import CategoryService
from .session import Session

__all__ = [
    "TaskListing",
    "TaskService",
    "CategoryService",
    "Session",
]
