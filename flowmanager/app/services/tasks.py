"""
Task service. Deletion lives in services.deletion (it cascades to work logs).
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from flowmanager.app.core.exceptions import ValidationError, ResourceNotFoundError
from flowmanager.app.models.enums import TaskStatus
from flowmanager.app.models.task import Task
from flowmanager.app.models.user import User
from flowmanager.app.services.projects import get_project_or_404

logger = logging.getLogger("flowmanager.tasks")

TASK_FIELDS = ("title", "description", "assigned_to_id", "status", "estimated_hours")


async def _check_assignee(db: AsyncSession, user_id: Optional[int]) -> None:
    if user_id is None:
        return
    result = await db.execute(select(User.id).where(User.id == user_id))
    if result.scalar_one_or_none() is None:
        raise ValidationError(f"User with ID {user_id} does not exist")


async def list_tasks(db: AsyncSession, user_id: Optional[int] = None, project_id: Optional[int] = None) -> list[Task]:
    query = select(Task)
    if user_id is not None:
        query = query.where(Task.assigned_to_id == user_id)
    if project_id is not None:
        query = query.where(Task.project_id == project_id)
    result = await db.execute(query.order_by(Task.created_at, Task.id))
    return result.scalars().all()


async def get_task_or_404(db: AsyncSession, task_id: int) -> Task:
    result = await db.execute(select(Task).where(Task.id == task_id))
    task = result.scalar_one_or_none()
    if task is None:
        raise ResourceNotFoundError("Task", task_id)
    return task


async def create_task(db: AsyncSession, project_id: int, data: Dict[str, Any]) -> Task:
    """Create a task in a project. Title is required; status defaults to "Do zrobienia"."""
    await get_project_or_404(db, project_id)

    title = (data.get("title") or "").strip()
    if not title:
        raise ValidationError("Task title is required")
    await _check_assignee(db, data.get("assigned_to_id"))

    values = {k: v for k, v in data.items() if k in TASK_FIELDS and v is not None}
    values["title"] = title
    values.setdefault("status", TaskStatus.TODO.value)

    task = Task(project_id=project_id, **values)
    db.add(task)
    await db.commit()
    await db.refresh(task)

    logger.info("Created task '%s' (ID: %s) in project %s", task.title, task.id, project_id)
    return task


async def update_task(db: AsyncSession, task_id: int, data: Dict[str, Any]) -> Task:
    """
    Partial update.

    Raises:
        ValidationError: no fields given, or an empty title
        ResourceNotFoundError: no such task
    """
    values = {k: v for k, v in data.items() if k in TASK_FIELDS}
    if not values:
        raise ValidationError("No fields to update")
    if "title" in values:
        if values["title"] is None or not values["title"].strip():
            raise ValidationError("Task title cannot be empty")
        values["title"] = values["title"].strip()

    task = await get_task_or_404(db, task_id)
    await _check_assignee(db, values.get("assigned_to_id"))

    for field, value in values.items():
        setattr(task, field, value)
    task.updated_at = datetime.now(timezone.utc)
    await db.commit()
    await db.refresh(task)
    return task
