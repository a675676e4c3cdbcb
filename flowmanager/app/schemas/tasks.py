"""
Task Pydantic schemas.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel


class TaskCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    assigned_to_id: Optional[int] = None
    status: Optional[str] = None
    estimated_hours: Optional[Decimal] = None


class TaskUpdate(TaskCreate):
    """Partial update; an empty body is rejected."""


class TaskRead(BaseModel):
    id: int
    project_id: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    assigned_to_id: Optional[int] = None
    status: Optional[str] = None
    estimated_hours: Optional[Decimal] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TaskDeletionResult(BaseModel):
    success: bool
    deleted_task_id: int
    deleted_work_logs_count: int
