"""Task schemas."""
from datetime import date, datetime
from typing import Optional
from pydantic import Field

from app.db.models.task import TaskStatus
from app.schemas.common import CamelModel


class TaskBase(CamelModel):
    """Base task schema."""
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.NOT_STARTED
    assignee: Optional[str] = None
    due_date: Optional[date] = None


class TaskCreate(TaskBase):
    """Schema for creating a task."""
    pass


class TaskUpdate(CamelModel):
    """Schema for updating a task."""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    assignee: Optional[str] = None
    due_date: Optional[date] = None


class TaskResponse(TaskBase):
    """Schema for task response."""
    task_id: int
    account_id: str
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
