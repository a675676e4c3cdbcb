"""
User and employee Pydantic schemas.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class ProfileFields(BaseModel):
    """Editable employee profile fields."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    position: Optional[str] = None
    employment_type: Optional[str] = None
    supervisor_id: Optional[int] = None
    salary_rate: Optional[Decimal] = Field(default=None, ge=0)
    vacation_days_total: Optional[int] = None


class ProfileRead(ProfileFields):
    id: int
    user_id: int

    class Config:
        from_attributes = True


class UserCreate(BaseModel):
    """
    Schema for POST /api/users.

    role_id wins over role_name; with neither the default role is used.
    """
    email: Optional[str] = None
    password: Optional[str] = None
    role_id: Optional[int] = None
    role_name: Optional[str] = None
    profile: Optional[ProfileFields] = None


class UserUpdate(BaseModel):
    """Schema for PUT /api/users/{id}; every field is optional."""
    email: Optional[str] = None
    password: Optional[str] = None
    role_id: Optional[int] = None
    role_name: Optional[str] = None
    profile: Optional[ProfileFields] = None


class UserRead(BaseModel):
    id: int
    email: str
    role_id: Optional[int] = None
    role_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    profile: Optional[ProfileRead] = None


class UserList(BaseModel):
    users: List[UserRead]
    total: int


class BulkDeleteUsersRequest(BaseModel):
    user_ids: List[int] = Field(default_factory=list)


class UserDeletionResult(BaseModel):
    success: bool
    email: str
    removed: Dict[str, int]


class BulkUserDeletionResult(BaseModel):
    success: bool
    deleted_count: int
    emails: List[str]


class RoleRead(BaseModel):
    id: int
    name: str
    description: Optional[str] = None

    class Config:
        from_attributes = True


class SupervisorRead(BaseModel):
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role_name: Optional[str] = None


class EmployeeRead(BaseModel):
    """User joined with profile, role and supervisor name."""
    id: int
    email: str
    role_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    position: Optional[str] = None
    employment_type: Optional[str] = None
    salary_rate: Optional[Decimal] = None
    vacation_days_total: Optional[int] = None
    supervisor_id: Optional[int] = None
    supervisor_name: Optional[str] = None


class UserProjectRead(BaseModel):
    """Project the user is assigned to, with the user's role on it."""
    project_id: int
    name: Optional[str] = None
    progress: Optional[int] = None
    is_archived: Optional[bool] = None
    role_on_project: Optional[str] = None
    assigned_at: Optional[datetime] = None
