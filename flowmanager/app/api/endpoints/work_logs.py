"""
Work log API endpoints.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from flowmanager.app.api.params import valid_id
from flowmanager.app.core.dependencies import get_current_user
from flowmanager.app.db.session import get_db
from flowmanager.app.schemas.common import ApiResponse
from flowmanager.app.schemas.work_logs import WorkLogCreate, WorkLogUpdate, WorkLogRead
from flowmanager.app.services import work_logs as work_log_service

router = APIRouter(prefix="/work-logs", tags=["Work logs"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=ApiResponse[List[WorkLogRead]])
async def list_work_logs(
    user_id: Optional[int] = None,
    project_id: Optional[int] = None,
    task_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db)
):
    work_logs = await work_log_service.list_work_logs(db, user_id=user_id, project_id=project_id, task_id=task_id)
    return ApiResponse(data=[WorkLogRead.model_validate(log) for log in work_logs])


@router.get("/{work_log_id}", response_model=ApiResponse[WorkLogRead])
async def get_work_log(work_log_id: int, db: AsyncSession = Depends(get_db)):
    work_log = await work_log_service.get_work_log_or_404(db, valid_id(work_log_id, "work log ID"))
    return ApiResponse(data=WorkLogRead.model_validate(work_log))


@router.post("", response_model=ApiResponse[WorkLogRead], status_code=status.HTTP_201_CREATED)
async def create_work_log(payload: WorkLogCreate, db: AsyncSession = Depends(get_db)):
    """Record hours; user, project, date and positive hours are required."""
    work_log = await work_log_service.create_work_log(db, payload.model_dump())
    return ApiResponse(data=WorkLogRead.model_validate(work_log), message="Work log created")


@router.put("/{work_log_id}", response_model=ApiResponse[WorkLogRead])
async def update_work_log(work_log_id: int, payload: WorkLogUpdate, db: AsyncSession = Depends(get_db)):
    work_log = await work_log_service.update_work_log(
        db, valid_id(work_log_id, "work log ID"), payload.model_dump(exclude_unset=True)
    )
    return ApiResponse(data=WorkLogRead.model_validate(work_log), message="Work log updated")


@router.delete("/{work_log_id}", response_model=ApiResponse[dict])
async def delete_work_log(work_log_id: int, db: AsyncSession = Depends(get_db)):
    deleted_id = await work_log_service.delete_work_log(db, valid_id(work_log_id, "work log ID"))
    return ApiResponse(data={"deleted_work_log_id": deleted_id}, message="Work log deleted")
