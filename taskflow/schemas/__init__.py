"""
Schemas package.

Import all schemas here for easy access.
"""

from taskflow.schemas.task import (
    MessageResponse,
    Pagination,
    TaskCreate,
    TaskListResponse,
    TaskRead,
    TaskUpdate,
)

__all__ = [
    "MessageResponse",
    "Pagination",
    "TaskCreate",
    "TaskListResponse",
    "TaskRead",
    "TaskUpdate",
]
