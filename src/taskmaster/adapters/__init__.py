"""Adapters - I/O implementations of ports."""

from .http_api import (
    AuthenticationError,
    HttpCategoryService,
    HttpTaskService,
    NetworkError,
    ServiceError,
)
from .file_session import FileSession

__all__ = [
    "AuthenticationError",
    "HttpCategoryService",
    "HttpTaskService",
    "NetworkError",
    "ServiceError",
    "FileSession",
]
