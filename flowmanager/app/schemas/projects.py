"""
Project and project assignment Pydantic schemas.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class ProjectCreate(BaseModel):
    """
    Schema for POST /api/projects.

    name is required and progress must be within 0..100; both rules are
    enforced by the project service (400).
    """
    name: Optional[str] = None
    description: Optional[str] = None
    budget: Optional[Decimal] = None
    progress: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_archived: Optional[bool] = None


class ProjectUpdate(ProjectCreate):
    """Partial update; only fields present in the request are applied."""


class ProjectRead(BaseModel):
    id: int
    name: Optional[str] = None
    description: Optional[str] = None
    budget: Optional[Decimal] = None
    progress: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_archived: Optional[bool] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    manager_first_name: Optional[str] = None
    manager_last_name: Optional[str] = None
    manager_email: Optional[str] = None


class BulkDeleteProjectsRequest(BaseModel):
    project_ids: List[int] = Field(default_factory=list)


class ProjectDeletionResult(BaseModel):
    success: bool
    name: Optional[str] = None
    removed: Dict[str, int]


class BulkProjectDeletionResult(BaseModel):
    success: bool
    deleted_count: int
    names: List[Optional[str]]


class AssignmentCreate(BaseModel):
    user_id: Optional[int] = None
    role_on_project: Optional[str] = None


class AssignmentUpdate(AssignmentCreate):
    pass


class AssignmentRead(BaseModel):
    """Assignment joined with the assigned user's email and name."""
    id: int
    user_id: int
    project_id: int
    role_on_project: Optional[str] = None
    assigned_at: Optional[datetime] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
