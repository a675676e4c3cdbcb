"""
Task API endpoints. Tasks are created through /projects/{id}/tasks.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from flowmanager.app.api.params import valid_id
from flowmanager.app.core.dependencies import get_current_user
from flowmanager.app.db.session import get_db
from flowmanager.app.schemas.common import ApiResponse
from flowmanager.app.schemas.tasks import TaskUpdate, TaskRead, TaskDeletionResult
from flowmanager.app.services import tasks as task_service
from flowmanager.app.services.deletion import delete_task

router = APIRouter(prefix="/tasks", tags=["Tasks"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=ApiResponse[List[TaskRead]])
async def list_tasks(
    user_id: Optional[int] = None,
    project_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db)
):
    """Tasks, optionally only those assigned to user_id and/or in project_id."""
    tasks = await task_service.list_tasks(db, user_id=user_id, project_id=project_id)
    return ApiResponse(data=[TaskRead.model_validate(task) for task in tasks])


@router.get("/{task_id}", response_model=ApiResponse[TaskRead])
async def get_task(task_id: int, db: AsyncSession = Depends(get_db)):
    task = await task_service.get_task_or_404(db, valid_id(task_id, "task ID"))
    return ApiResponse(data=TaskRead.model_validate(task))


@router.put("/{task_id}", response_model=ApiResponse[TaskRead])
async def update_task(task_id: int, payload: TaskUpdate, db: AsyncSession = Depends(get_db)):
    task = await task_service.update_task(db, valid_id(task_id, "task ID"), payload.model_dump(exclude_unset=True))
    return ApiResponse(data=TaskRead.model_validate(task), message="Task updated")


@router.delete("/{task_id}", response_model=ApiResponse[TaskDeletionResult])
async def remove_task(task_id: int, db: AsyncSession = Depends(get_db)):
    """Delete a task together with its work logs."""
    outcome = await delete_task(db, valid_id(task_id, "task ID"))
    return ApiResponse(data=outcome, message="Task deleted")
