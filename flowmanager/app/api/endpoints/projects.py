"""
Project API endpoints, including project assignments and the
project-scoped task, work log and expense lists.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from flowmanager.app.api.params import valid_id, valid_ids
from flowmanager.app.core.dependencies import get_current_user
from flowmanager.app.db.session import get_db
from flowmanager.app.schemas.common import ApiResponse
from flowmanager.app.schemas.expenses import ExpenseRead
from flowmanager.app.schemas.projects import (
    ProjectCreate,
    ProjectUpdate,
    ProjectRead,
    BulkDeleteProjectsRequest,
    ProjectDeletionResult,
    BulkProjectDeletionResult,
    AssignmentCreate,
    AssignmentUpdate,
    AssignmentRead,
)
from flowmanager.app.schemas.tasks import TaskCreate, TaskRead
from flowmanager.app.schemas.work_logs import WorkLogRead
from flowmanager.app.services import projects as project_service
from flowmanager.app.services.audit import log_admin_action, AuditAction
from flowmanager.app.services.deletion import delete_project, delete_projects
from flowmanager.app.services.expenses import list_expenses
from flowmanager.app.services.tasks import list_tasks, create_task
from flowmanager.app.services.work_logs import list_work_logs

router = APIRouter(prefix="/projects", tags=["Projects"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=ApiResponse[List[ProjectRead]])
async def list_projects(
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
    db: AsyncSession = Depends(get_db)
):
    """List projects with their Manager; all filters are optional."""
    projects = await project_service.list_projects(
        db,
        name=name,
        is_archived=is_archived,
        min_progress=min_progress,
        max_progress=max_progress,
        min_budget=min_budget,
        max_budget=max_budget,
        start_date_from=start_date_from,
        start_date_to=start_date_to,
        end_date_from=end_date_from,
        end_date_to=end_date_to,
    )
    return ApiResponse(data=projects)


@router.get("/by-name/{name}", response_model=ApiResponse[ProjectRead])
async def get_project_by_name(name: str, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await project_service.get_project_by_name(db, name))


@router.post("", response_model=ApiResponse[ProjectRead], status_code=status.HTTP_201_CREATED)
async def create_project(payload: ProjectCreate, db: AsyncSession = Depends(get_db)):
    """Name is required and progress must be within 0..100 (400 otherwise)."""
    project = await project_service.create_project(db, payload.model_dump())
    return ApiResponse(data=project, message="Project created")


@router.delete("", response_model=ApiResponse[BulkProjectDeletionResult])
async def bulk_delete_projects(
    payload: BulkDeleteProjectsRequest,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Delete several projects in order; stops at the first failure."""
    project_ids = valid_ids(payload.project_ids, "project_ids")

    async def after_each(project_id: int, outcome: dict):
        await log_admin_action(
            db, current_user, AuditAction.PROJECT_DELETED,
            target_id=project_id, metadata={"name": outcome["name"], "removed": outcome["removed"], "bulk": True},
        )

    names = await delete_projects(db, project_ids, after_each=after_each)
    return ApiResponse(
        data={"success": True, "deleted_count": len(names), "names": names},
        message=f"Deleted {len(names)} project(s)",
    )


@router.get("/{project_id}", response_model=ApiResponse[ProjectRead])
async def get_project(project_id: int, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await project_service.get_project_detail(db, valid_id(project_id, "project ID")))


@router.put("/{project_id}", response_model=ApiResponse[ProjectRead])
async def update_project(project_id: int, payload: ProjectUpdate, db: AsyncSession = Depends(get_db)):
    """Partial update; only fields present in the body change."""
    project = await project_service.update_project(
        db, valid_id(project_id, "project ID"), payload.model_dump(exclude_unset=True)
    )
    return ApiResponse(data=project, message="Project updated")


@router.delete("/{project_id}", response_model=ApiResponse[ProjectDeletionResult])
async def remove_project(
    project_id: int,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Delete a project with its tasks, work logs, assignments, costs and reports."""
    outcome = await delete_project(db, valid_id(project_id, "project ID"))
    await log_admin_action(
        db, current_user, AuditAction.PROJECT_DELETED,
        target_id=project_id, metadata={"name": outcome["name"], "removed": outcome["removed"]},
    )
    return ApiResponse(data=outcome, message="Project deleted")


# Assignments

@router.get("/{project_id}/assignments", response_model=ApiResponse[List[AssignmentRead]])
async def get_assignments(project_id: int, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await project_service.list_assignments(db, valid_id(project_id, "project ID")))


@router.post("/{project_id}/assignments", response_model=ApiResponse[AssignmentRead], status_code=status.HTTP_201_CREATED)
async def add_assignment(project_id: int, payload: AssignmentCreate, db: AsyncSession = Depends(get_db)):
    """Assign a user; a new Manager replaces the current one."""
    assignment = await project_service.assign_user(
        db, valid_id(project_id, "project ID"), payload.user_id, payload.role_on_project
    )
    return ApiResponse(data=AssignmentRead.model_validate(assignment, from_attributes=True), message="User assigned")


@router.put("/{project_id}/assignments", response_model=ApiResponse[AssignmentRead])
async def change_assignment_role(project_id: int, payload: AssignmentUpdate, db: AsyncSession = Depends(get_db)):
    assignment = await project_service.update_assignment_role(
        db, valid_id(project_id, "project ID"), payload.user_id, payload.role_on_project
    )
    return ApiResponse(data=AssignmentRead.model_validate(assignment, from_attributes=True), message="Role updated")


@router.delete("/{project_id}/assignments", response_model=ApiResponse[dict])
async def remove_assignment(project_id: int, user_id: int, db: AsyncSession = Depends(get_db)):
    """Remove a user from the project (user_id query parameter)."""
    removed = await project_service.remove_assignment(
        db, valid_id(project_id, "project ID"), valid_id(user_id, "user ID")
    )
    return ApiResponse(data={"removed": removed}, message="User removed from project")


# Project-scoped lists

@router.get("/{project_id}/tasks", response_model=ApiResponse[List[TaskRead]])
async def get_project_tasks(project_id: int, db: AsyncSession = Depends(get_db)):
    await project_service.get_project_or_404(db, valid_id(project_id, "project ID"))
    tasks = await list_tasks(db, project_id=project_id)
    return ApiResponse(data=[TaskRead.model_validate(task) for task in tasks])


@router.post("/{project_id}/tasks", response_model=ApiResponse[TaskRead], status_code=status.HTTP_201_CREATED)
async def add_project_task(project_id: int, payload: TaskCreate, db: AsyncSession = Depends(get_db)):
    task = await create_task(db, valid_id(project_id, "project ID"), payload.model_dump())
    return ApiResponse(data=TaskRead.model_validate(task), message="Task created")


@router.get("/{project_id}/work-logs", response_model=ApiResponse[List[WorkLogRead]])
async def get_project_work_logs(project_id: int, db: AsyncSession = Depends(get_db)):
    await project_service.get_project_or_404(db, valid_id(project_id, "project ID"))
    work_logs = await list_work_logs(db, project_id=project_id)
    return ApiResponse(data=[WorkLogRead.model_validate(log) for log in work_logs])


@router.get("/{project_id}/expenses", response_model=ApiResponse[List[ExpenseRead]])
async def get_project_expenses(project_id: int, db: AsyncSession = Depends(get_db)):
    await project_service.get_project_or_404(db, valid_id(project_id, "project ID"))
    return ApiResponse(data=await list_expenses(db, project_id=project_id))
