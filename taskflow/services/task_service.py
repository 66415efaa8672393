"""
Task business logic service.

Each operation runs a single store statement (committed on its own for
writes). Store failures are logged with their cause and re-raised as
``TaskStoreError``; a missing row becomes ``TaskNotFoundError``.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.errors import TaskNotFoundError, TaskStoreError
from taskflow.repositories.task_field_set import TaskPatch
from taskflow.repositories.task_query_builder import TaskQuery, total_pages
from taskflow.repositories.task_repository import TaskRepository
from taskflow.schemas.task import (
    Pagination,
    TaskCreate,
    TaskListResponse,
    TaskRead,
    TaskUpdate,
)

logger = logging.getLogger(__name__)


def parse_task_id(raw_id: Union[str, int]) -> int:
    """Path ids arrive as text; anything but an integer is a store failure."""
    if isinstance(raw_id, int):
        return raw_id
    return int(raw_id.strip())


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    try:
        yield
    except (SQLAlchemyError, ValueError) as exc:
        logger.exception("Error %s", action)
        raise TaskStoreError() from exc


class TaskService:
    """Service for task business logic."""

    def __init__(self, db: AsyncSession):
        self.repository = TaskRepository(db)

    async def list_tasks(self, query: TaskQuery) -> TaskListResponse:
        """List tasks with filters, search, sorting and pagination."""
        with store_errors("fetching tasks"):
            rows, total, page, limit = await self.repository.list(query)

        return TaskListResponse(
            tasks=[TaskRead.model_validate(dict(row)) for row in rows],
            pagination=Pagination(
                total=total,
                page=page,
                limit=limit,
                totalPages=total_pages(total, limit),
            ),
        )

    async def get_task(self, raw_id: Union[str, int]) -> TaskRead:
        """Get a task by ID."""
        with store_errors("fetching task"):
            row = await self.repository.get_by_id(parse_task_id(raw_id))

        if row is None:
            raise TaskNotFoundError()
        return TaskRead.model_validate(dict(row))

    async def create_task(self, data: TaskCreate) -> TaskRead:
        """Create a task from the fields the caller supplied."""
        patch = TaskPatch(data.model_dump(exclude_unset=True))
        with store_errors("creating task"):
            row = await self.repository.create(patch)
            await self.repository.commit()

        logger.info("Created task %s", row["id"])
        return TaskRead.model_validate(dict(row))

    async def update_task(self, raw_id: Union[str, int], data: TaskUpdate) -> TaskRead:
        """Apply a partial update; fields left out of the payload are untouched."""
        patch = TaskPatch(data.model_dump(exclude_unset=True))
        with store_errors("updating task"):
            row = await self.repository.update(parse_task_id(raw_id), patch)
            if row is not None:
                await self.repository.commit()

        if row is None:
            raise TaskNotFoundError()
        return TaskRead.model_validate(dict(row))

    async def delete_task(self, raw_id: Union[str, int]) -> None:
        """Delete a task permanently."""
        with store_errors("deleting task"):
            deleted = await self.repository.delete(parse_task_id(raw_id))
            if deleted:
                await self.repository.commit()

        if not deleted:
            raise TaskNotFoundError()
        logger.info("Deleted task %s", raw_id)
