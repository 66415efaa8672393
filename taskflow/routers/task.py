"""
Task router - API endpoints for tasks.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.db.session import get_db
from taskflow.repositories.task_query_builder import TaskQuery
from taskflow.schemas.task import (
    MessageResponse,
    TaskCreate,
    TaskListResponse,
    TaskRead,
    TaskUpdate,
)
from taskflow.services.task_service import TaskService

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    db: AsyncSession = Depends(get_db),
    search: Optional[str] = None,
    task_status: Optional[str] = Query(None, alias="status"),
    priority: Optional[str] = None,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    page: Optional[str] = None,
    limit: Optional[str] = None,
):
    """
    List tasks with pagination and filters.

    Filters: search, status, priority, startDate, endDate.
    Sorting: sortBy (due_date, priority, status, created_at) and sortOrder.
    Every parameter is taken as text; bad page/limit/sort values fall back
    to their defaults instead of failing validation.
    """
    service = TaskService(db)
    return await service.list_tasks(
        TaskQuery(
            search=search,
            status=task_status,
            priority=priority,
            start_date=start_date,
            end_date=end_date,
            sort_by=sort_by,
            sort_order=sort_order,
            page=page,
            limit=limit,
        )
    )


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(
    task_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Get a task by ID."""
    service = TaskService(db)
    return await service.get_task(task_id)


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(
    data: TaskCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a new task."""
    service = TaskService(db)
    return await service.create_task(data)


@router.put("/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: str,
    data: TaskUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a task. Only the fields present in the body are written."""
    service = TaskService(db)
    return await service.update_task(task_id, data)


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Delete a task."""
    service = TaskService(db)
    await service.delete_task(task_id)
    return MessageResponse(message="Task deleted successfully")
