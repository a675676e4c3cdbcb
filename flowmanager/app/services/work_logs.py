"""
Work log service.
"""

from decimal import Decimal
from typing import Any, Dict, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from flowmanager.app.core.exceptions import ValidationError, ResourceNotFoundError
from flowmanager.app.models.work_log import WorkLog
from flowmanager.app.models.user import User
from flowmanager.app.models.project import Project
from flowmanager.app.models.task import Task

WORK_LOG_FIELDS = ("user_id", "project_id", "task_id", "date", "hours_worked", "is_overtime", "note")
REQUIRED_FIELDS = ("user_id", "project_id", "date", "hours_worked")


def _validate_hours(hours: Optional[Decimal]) -> None:
    if hours is None or hours <= 0:
        raise ValidationError("Hours worked must be a positive number")


async def _check_references(db: AsyncSession, values: Dict[str, Any]) -> None:
    for field, model, label in (
        ("user_id", User, "User"),
        ("project_id", Project, "Project"),
        ("task_id", Task, "Task"),
    ):
        ref_id = values.get(field)
        if ref_id is None:
            continue
        result = await db.execute(select(model.id).where(model.id == ref_id))
        if result.scalar_one_or_none() is None:
            raise ValidationError(f"{label} with ID {ref_id} does not exist")


async def list_work_logs(
    db: AsyncSession,
    user_id: Optional[int] = None,
    project_id: Optional[int] = None,
    task_id: Optional[int] = None,
) -> list[WorkLog]:
    query = select(WorkLog)
    if user_id is not None:
        query = query.where(WorkLog.user_id == user_id)
    if project_id is not None:
        query = query.where(WorkLog.project_id == project_id)
    if task_id is not None:
        query = query.where(WorkLog.task_id == task_id)
    result = await db.execute(query.order_by(WorkLog.date.desc(), WorkLog.id.desc()))
    return result.scalars().all()


async def get_work_log_or_404(db: AsyncSession, work_log_id: int) -> WorkLog:
    result = await db.execute(select(WorkLog).where(WorkLog.id == work_log_id))
    work_log = result.scalar_one_or_none()
    if work_log is None:
        raise ResourceNotFoundError("Work log", work_log_id)
    return work_log


async def create_work_log(db: AsyncSession, data: Dict[str, Any]) -> WorkLog:
    """user_id, project_id, date and a positive hours_worked are required."""
    missing = [field for field in REQUIRED_FIELDS if data.get(field) is None]
    if missing:
        raise ValidationError("Missing required fields", details={"missing": missing})
    _validate_hours(data["hours_worked"])

    values = {k: v for k, v in data.items() if k in WORK_LOG_FIELDS and v is not None}
    await _check_references(db, values)

    work_log = WorkLog(**values)
    db.add(work_log)
    await db.commit()
    await db.refresh(work_log)
    return work_log


async def update_work_log(db: AsyncSession, work_log_id: int, data: Dict[str, Any]) -> WorkLog:
    """Partial update with the same validation as create_work_log()."""
    values = {k: v for k, v in data.items() if k in WORK_LOG_FIELDS}
    if not values:
        raise ValidationError("No fields to update")
    for field in REQUIRED_FIELDS:
        if field in values and values[field] is None:
            raise ValidationError(f"{field} cannot be empty")
    if "hours_worked" in values:
        _validate_hours(values["hours_worked"])
    if values.get("is_overtime", False) is None:
        values["is_overtime"] = False

    work_log = await get_work_log_or_404(db, work_log_id)
    await _check_references(db, values)

    for field, value in values.items():
        setattr(work_log, field, value)
    await db.commit()
    await db.refresh(work_log)
    return work_log


async def delete_work_log(db: AsyncSession, work_log_id: int) -> int:
    work_log = await get_work_log_or_404(db, work_log_id)
    await db.delete(work_log)
    await db.commit()
    return work_log_id
