"""
Models package.

Import all models here so they are registered with SQLAlchemy.
"""

from taskflow.models.task import Task, TaskPriority, TaskStatus

__all__ = [
    "Task",
    "TaskPriority",
    "TaskStatus",
]
