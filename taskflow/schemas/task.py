"""
Task Pydantic schemas.

``status`` and ``priority`` are accepted as free text on the way in; the
database constraint is what rejects values outside the enumerations.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TaskCreate(BaseModel):
    """Schema for creating a new task."""

    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    due_date: Optional[date] = None
    status: Optional[str] = None
    priority: Optional[str] = None


class TaskUpdate(BaseModel):
    """Schema for updating a task. All fields optional."""

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    due_date: Optional[date] = None
    status: Optional[str] = None
    priority: Optional[str] = None


class TaskRead(BaseModel):
    """Schema for reading task data (API response)."""

    id: int
    title: str
    description: Optional[str] = None
    due_date: Optional[date] = None
    status: str
    priority: str
    created_at: datetime
    updated_at: datetime

    # This tells Pydantic to read SQLAlchemy rows and models
    model_config = ConfigDict(from_attributes=True)


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    totalPages: int


class TaskListResponse(BaseModel):
    """One page of tasks plus the pagination summary."""

    tasks: List[TaskRead]
    pagination: Pagination


class MessageResponse(BaseModel):
    message: str
