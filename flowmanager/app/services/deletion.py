"""
Cascading deletion of users, projects and tasks.

Dependents are removed explicitly in foreign key order; nothing relies on
ON DELETE CASCADE. Each single-entity cascade is one transaction: it either
removes everything or, on error, rolls back and re-raises. The bulk
variants commit entity by entity and stop at the first failure, leaving the
entities already processed deleted.
"""

import logging
from typing import Awaitable, Callable, Iterable, Optional
from sqlalchemy import select, delete, update, func
from sqlalchemy.ext.asyncio import AsyncSession
from flowmanager.app.core.exceptions import ResourceNotFoundError
from flowmanager.app.models.user import User
from flowmanager.app.models.user_credential import UserCredential
from flowmanager.app.models.user_profile import UserProfile
from flowmanager.app.models.project import Project
from flowmanager.app.models.project_assignment import ProjectAssignment
from flowmanager.app.models.task import Task
from flowmanager.app.models.work_log import WorkLog
from flowmanager.app.models.vacation import Vacation
from flowmanager.app.models.project_finance import ProjectCost, FinancialReport
from flowmanager.app.models.expense import Expense

logger = logging.getLogger("flowmanager.deletion")


async def _execute(db: AsyncSession, statement) -> int:
    """Run a bulk DELETE or UPDATE and return the affected row count."""
    result = await db.execute(statement)
    return result.rowcount


async def _count(db: AsyncSession, model, *conditions) -> int:
    result = await db.execute(select(func.count()).select_from(model).where(*conditions))
    return result.scalar_one()


async def preview_user_deletion(db: AsyncSession, user_id: int) -> dict:
    """
    Count the rows a user deletion would remove.

    Returns:
        {"profile": bool, "credential": bool, "assignments": n, "work_logs": n, "vacations": n}
    """
    return {
        "profile": await _count(db, UserProfile, UserProfile.user_id == user_id) > 0,
        "credential": await _count(db, UserCredential, UserCredential.user_id == user_id) > 0,
        "assignments": await _count(db, ProjectAssignment, ProjectAssignment.user_id == user_id),
        "work_logs": await _count(db, WorkLog, WorkLog.user_id == user_id),
        "vacations": await _count(db, Vacation, Vacation.user_id == user_id),
    }


async def delete_user(db: AsyncSession, user_id: int) -> dict:
    """
    Delete a user and every row that depends on it.

    Order: credentials, profile, project assignments, work logs, vacations.
    Tasks assigned to the user and profiles supervised by the user are kept
    with the reference cleared. The user row goes last.

    Returns:
        {"success": True, "email": <deleted email>, "removed": {table: rows}}

    Raises:
        ResourceNotFoundError: no such user (nothing is deleted)
    """
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise ResourceNotFoundError("User", user_id)

    email = user.email
    removed = {}
    try:
        removed["user_credentials"] = await _execute(
            db, delete(UserCredential).where(UserCredential.user_id == user_id)
        )
        removed["user_profiles"] = await _execute(db, delete(UserProfile).where(UserProfile.user_id == user_id))
        removed["project_assignments"] = await _execute(
            db, delete(ProjectAssignment).where(ProjectAssignment.user_id == user_id)
        )
        removed["work_logs"] = await _execute(db, delete(WorkLog).where(WorkLog.user_id == user_id))
        removed["vacations"] = await _execute(db, delete(Vacation).where(Vacation.user_id == user_id))

        # Rows that only point at the user survive without the reference
        removed["tasks_unassigned"] = await _execute(
            db, update(Task).where(Task.assigned_to_id == user_id).values(assigned_to_id=None)
        )
        removed["profiles_unsupervised"] = await _execute(
            db, update(UserProfile).where(UserProfile.supervisor_id == user_id).values(supervisor_id=None)
        )

        await _execute(db, delete(User).where(User.id == user_id))
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("Deleting user %s (ID: %s) failed, changes rolled back", email, user_id)
        raise

    logger.info("Deleted user %s (ID: %s): %s", email, user_id, removed)
    return {"success": True, "email": email, "removed": removed}


async def delete_users(
    db: AsyncSession,
    user_ids: Iterable[int],
    after_each: Optional[Callable[[int, dict], Awaitable[None]]] = None,
) -> list[str]:
    """
    Delete users one after another.

    Not atomic: the first failure propagates and the users deleted before it
    stay deleted.

    Args:
        after_each: Awaited with (user_id, outcome) after every committed deletion

    Returns:
        Emails of the deleted users, in input order
    """
    emails = []
    for user_id in user_ids:
        outcome = await delete_user(db, user_id)
        emails.append(outcome["email"])
        if after_each is not None:
            await after_each(user_id, outcome)
    return emails


async def delete_project(db: AsyncSession, project_id: int) -> dict:
    """
    Delete a project and every row that depends on it.

    Order: work logs (of the project and of its tasks), tasks, assignments,
    project costs, financial reports. Expenses are kept with project_id
    cleared. The project row goes last.

    Returns:
        {"success": True, "name": <project name>, "removed": {table: rows}}

    Raises:
        ResourceNotFoundError: no such project (nothing is deleted)
    """
    result = await db.execute(select(Project).where(Project.id == project_id))
    project = result.scalar_one_or_none()
    if project is None:
        raise ResourceNotFoundError("Project", project_id)

    name = project.name
    removed = {}
    try:
        task_ids = (await db.execute(select(Task.id).where(Task.project_id == project_id))).scalars().all()
        removed["work_logs"] = await _execute(db, delete(WorkLog).where(WorkLog.project_id == project_id))
        if task_ids:
            removed["work_logs"] += await _execute(db, delete(WorkLog).where(WorkLog.task_id.in_(task_ids)))
        removed["tasks"] = await _execute(db, delete(Task).where(Task.project_id == project_id))
        removed["project_assignments"] = await _execute(
            db, delete(ProjectAssignment).where(ProjectAssignment.project_id == project_id)
        )
        removed["project_costs"] = await _execute(
            db, delete(ProjectCost).where(ProjectCost.project_id == project_id)
        )
        removed["financial_reports"] = await _execute(
            db, delete(FinancialReport).where(FinancialReport.project_id == project_id)
        )
        removed["expenses_detached"] = await _execute(
            db, update(Expense).where(Expense.project_id == project_id).values(project_id=None)
        )

        await _execute(db, delete(Project).where(Project.id == project_id))
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("Deleting project '%s' (ID: %s) failed, changes rolled back", name, project_id)
        raise

    logger.info("Deleted project '%s' (ID: %s): %s", name, project_id, removed)
    return {"success": True, "name": name, "removed": removed}


async def delete_projects(
    db: AsyncSession,
    project_ids: Iterable[int],
    after_each: Optional[Callable[[int, dict], Awaitable[None]]] = None,
) -> list:
    """Bulk variant of delete_project(); same fail-fast, non-atomic semantics as delete_users()."""
    names = []
    for project_id in project_ids:
        outcome = await delete_project(db, project_id)
        names.append(outcome["name"])
        if after_each is not None:
            await after_each(project_id, outcome)
    return names


async def delete_task(db: AsyncSession, task_id: int) -> dict:
    """
    Delete a task and its work logs.

    Returns:
        {"success": True, "deleted_task_id": id, "deleted_work_logs_count": n}
    """
    result = await db.execute(select(Task.id).where(Task.id == task_id))
    if result.scalar_one_or_none() is None:
        raise ResourceNotFoundError("Task", task_id)

    try:
        work_logs = await _execute(db, delete(WorkLog).where(WorkLog.task_id == task_id))
        await _execute(db, delete(Task).where(Task.id == task_id))
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("Deleted task %s with %s work log(s)", task_id, work_logs)
    return {"success": True, "deleted_task_id": task_id, "deleted_work_logs_count": work_logs}
