"""
Project management: CRUD, filtering and project assignments.

A project holds at most one assignment with the "Manager" role; assigning
a new Manager replaces the previous one in the same transaction.
"""

import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional
from sqlalchemy import select, delete, and_, func
from sqlalchemy.ext.asyncio import AsyncSession
from flowmanager.app.core.exceptions import ValidationError, ResourceNotFoundError
from flowmanager.app.models.enums import PROJECT_MANAGER_ROLE
from flowmanager.app.models.user import User
from flowmanager.app.models.user_profile import UserProfile
from flowmanager.app.models.project import Project
from flowmanager.app.models.project_assignment import ProjectAssignment

logger = logging.getLogger("flowmanager.projects")

PROJECT_FIELDS = ("name", "description", "budget", "progress", "start_date", "end_date", "is_archived")


def _validate_progress(progress: Optional[int]) -> None:
    if progress is not None and not 0 <= progress <= 100:
        raise ValidationError("Progress must be between 0 and 100")


def _validate_name(name: Optional[str]) -> str:
    if name is None or not name.strip():
        raise ValidationError("Project name is required")
    return name.strip()


def _project_query():
    """Projects left-joined with their Manager assignment, user and profile."""
    return (
        select(Project, UserProfile.first_name, UserProfile.last_name, User.email)
        .outerjoin(
            ProjectAssignment,
            and_(
                ProjectAssignment.project_id == Project.id,
                ProjectAssignment.role_on_project == PROJECT_MANAGER_ROLE,
            ),
        )
        .outerjoin(User, ProjectAssignment.user_id == User.id)
        .outerjoin(UserProfile, UserProfile.user_id == User.id)
    )


def _project_dict(project: Project, first_name=None, last_name=None, email=None) -> dict:
    data = {field: getattr(project, field) for field in PROJECT_FIELDS}
    data.update(
        id=project.id,
        created_at=project.created_at,
        updated_at=project.updated_at,
        manager_first_name=first_name,
        manager_last_name=last_name,
        manager_email=email,
    )
    return data


async def list_projects(
    db: AsyncSession,
    name: Optional[str] = None,
    is_archived: Optional[bool] = None,
    min_progress: Optional[int] = None,
    max_progress: Optional[int] = None,
    min_budget: Optional[Decimal] = None,
    max_budget: Optional[Decimal] = None,
    start_date_from: Optional[date] = None,
    start_date_to: Optional[date] = None,
    end_date_from: Optional[date] = None,
    end_date_to: Optional[date] = None,
) -> list[dict]:
    """
    List projects with optional filters, oldest first.

    name is a case-insensitive substring match; the other filters are
    inclusive bounds. Each item carries the Manager's name and email.
    """
    query = _project_query()
    if name:
        query = query.where(Project.name.ilike(f"%{name}%"))
    if is_archived is not None:
        query = query.where(Project.is_archived == is_archived)
    if min_progress is not None:
        query = query.where(Project.progress >= min_progress)
    if max_progress is not None:
        query = query.where(Project.progress <= max_progress)
    if min_budget is not None:
        query = query.where(Project.budget >= min_budget)
    if max_budget is not None:
        query = query.where(Project.budget <= max_budget)
    if start_date_from:
        query = query.where(Project.start_date >= start_date_from)
    if start_date_to:
        query = query.where(Project.start_date <= start_date_to)
    if end_date_from:
        query = query.where(Project.end_date >= end_date_from)
    if end_date_to:
        query = query.where(Project.end_date <= end_date_to)

    result = await db.execute(query.order_by(Project.created_at, Project.id))
    return [_project_dict(*row) for row in result.all()]


async def get_project_or_404(db: AsyncSession, project_id: int) -> Project:
    result = await db.execute(select(Project).where(Project.id == project_id))
    project = result.scalar_one_or_none()
    if project is None:
        raise ResourceNotFoundError("Project", project_id)
    return project


async def get_project_detail(db: AsyncSession, project_id: int) -> dict:
    result = await db.execute(_project_query().where(Project.id == project_id))
    row = result.first()
    if row is None:
        raise ResourceNotFoundError("Project", project_id)
    return _project_dict(*row)


async def get_project_by_name(db: AsyncSession, name: str) -> dict:
    """Exact (case-insensitive) name lookup used by the project detail page."""
    result = await db.execute(_project_query().where(func.lower(Project.name) == name.strip().lower()))
    row = result.first()
    if row is None:
        raise ResourceNotFoundError("Project", name)
    return _project_dict(*row)


async def create_project(db: AsyncSession, data: Dict[str, Any]) -> dict:
    """
    Create a project.

    Raises:
        ValidationError: missing name or progress outside 0..100
    """
    values = {k: v for k, v in data.items() if k in PROJECT_FIELDS and v is not None}
    values["name"] = _validate_name(data.get("name"))
    _validate_progress(values.get("progress"))
    values.setdefault("progress", 0)
    values.setdefault("is_archived", False)

    project = Project(**values)
    db.add(project)
    await db.commit()
    await db.refresh(project)

    logger.info("Created project '%s' (ID: %s)", project.name, project.id)
    return _project_dict(project)


async def update_project(db: AsyncSession, project_id: int, data: Dict[str, Any]) -> dict:
    """
    Partial update: keys absent from data are left untouched.

    Raises:
        ResourceNotFoundError: no such project
        ValidationError: blank name, progress outside 0..100, no fields
    """
    values = {k: v for k, v in data.items() if k in PROJECT_FIELDS}
    if values.get("is_archived", False) is None:
        values.pop("is_archived")
    if not values:
        raise ValidationError("No fields to update")
    if "name" in values:
        values["name"] = _validate_name(values["name"])
    _validate_progress(values.get("progress"))

    project = await get_project_or_404(db, project_id)
    for field, value in values.items():
        setattr(project, field, value)
    project.updated_at = datetime.now(timezone.utc)
    await db.commit()

    return await get_project_detail(db, project_id)


# Assignments

async def list_assignments(db: AsyncSession, project_id: int) -> list[dict]:
    """Assignments of a project joined with user email and profile name."""
    await get_project_or_404(db, project_id)
    result = await db.execute(
        select(ProjectAssignment, User.email, UserProfile.first_name, UserProfile.last_name)
        .join(User, ProjectAssignment.user_id == User.id)
        .outerjoin(UserProfile, UserProfile.user_id == User.id)
        .where(ProjectAssignment.project_id == project_id)
        .order_by(ProjectAssignment.id)
    )
    return [
        {
            "id": assignment.id,
            "user_id": assignment.user_id,
            "project_id": assignment.project_id,
            "role_on_project": assignment.role_on_project,
            "assigned_at": assignment.assigned_at,
            "email": email,
            "first_name": first_name,
            "last_name": last_name,
        }
        for assignment, email, first_name, last_name in result.all()
    ]


async def _check_assignment_input(db: AsyncSession, project_id: int, user_id: Optional[int], role: Optional[str]) -> str:
    if not user_id:
        raise ValidationError("user_id is required")
    if role is None or not role.strip():
        raise ValidationError("role_on_project is required")
    await get_project_or_404(db, project_id)
    result = await db.execute(select(User.id).where(User.id == user_id))
    if result.scalar_one_or_none() is None:
        raise ResourceNotFoundError("User", user_id)
    return role.strip()


async def _drop_other_managers(db: AsyncSession, project_id: int, keep_assignment_id: Optional[int] = None) -> int:
    statement = delete(ProjectAssignment).where(
        ProjectAssignment.project_id == project_id,
        ProjectAssignment.role_on_project == PROJECT_MANAGER_ROLE,
    )
    if keep_assignment_id is not None:
        statement = statement.where(ProjectAssignment.id != keep_assignment_id)
    result = await db.execute(statement)
    return result.rowcount


async def assign_user(db: AsyncSession, project_id: int, user_id: Optional[int], role_on_project: Optional[str]) -> ProjectAssignment:
    """
    Assign a user to a project.

    Assigning the Manager role first removes any existing Manager
    assignment of the project, so exactly one Manager remains.
    """
    role = await _check_assignment_input(db, project_id, user_id, role_on_project)

    try:
        if role == PROJECT_MANAGER_ROLE:
            replaced = await _drop_other_managers(db, project_id)
            if replaced:
                logger.info("Project %s: replaced previous Manager assignment", project_id)
        assignment = ProjectAssignment(user_id=user_id, project_id=project_id, role_on_project=role)
        db.add(assignment)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    await db.refresh(assignment)
    return assignment


async def update_assignment_role(db: AsyncSession, project_id: int, user_id: Optional[int], role_on_project: Optional[str]) -> ProjectAssignment:
    """
    Change a user's role on a project; 404 if the user is not assigned.

    Promoting to Manager removes every other Manager row of the project,
    including a second row the same user may already hold.
    """
    role = await _check_assignment_input(db, project_id, user_id, role_on_project)

    result = await db.execute(
        select(ProjectAssignment).where(
            ProjectAssignment.project_id == project_id,
            ProjectAssignment.user_id == user_id,
        )
        .order_by(ProjectAssignment.id)
    )
    assignment = result.scalars().first()
    if assignment is None:
        raise ResourceNotFoundError("Project assignment", user_id)

    try:
        if role == PROJECT_MANAGER_ROLE:
            await _drop_other_managers(db, project_id, keep_assignment_id=assignment.id)
        assignment.role_on_project = role
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    return assignment


async def remove_assignment(db: AsyncSession, project_id: int, user_id: int) -> int:
    """Remove a user from a project. Returns the number of removed rows; 404 if none."""
    await get_project_or_404(db, project_id)
    result = await db.execute(
        delete(ProjectAssignment)
        .where(ProjectAssignment.project_id == project_id, ProjectAssignment.user_id == user_id)
    )
    if result.rowcount == 0:
        await db.rollback()
        raise ResourceNotFoundError("Project assignment", user_id)
    await db.commit()
    return result.rowcount
