"""
Vacation API endpoints.

Booking, editing and deleting vacations keeps the employee's remaining
vacation day balance in step (see services.vacations).
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from flowmanager.app.api.params import valid_id
from flowmanager.app.core.dependencies import get_current_user
from flowmanager.app.db.session import get_db
from flowmanager.app.schemas.common import ApiResponse, LookupItem
from flowmanager.app.schemas.vacations import VacationCreate, VacationUpdate, VacationRead, VacationDays
from flowmanager.app.services import vacations as vacation_service
from flowmanager.app.services.lookups import list_vacation_types, list_vacation_statuses

router = APIRouter(prefix="/vacations", tags=["Vacations"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=ApiResponse[List[VacationRead]])
async def list_vacations(user_id: Optional[int] = None, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await vacation_service.list_vacations(db, user_id=user_id))


@router.get("/types", response_model=ApiResponse[List[LookupItem]])
async def get_vacation_types(db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=[LookupItem.model_validate(t) for t in await list_vacation_types(db)])


@router.get("/statuses", response_model=ApiResponse[List[LookupItem]])
async def get_vacation_statuses(db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=[LookupItem.model_validate(s) for s in await list_vacation_statuses(db)])


@router.get("/days/{user_id}", response_model=ApiResponse[VacationDays])
async def get_vacation_days(user_id: int, db: AsyncSession = Depends(get_db)):
    """Remaining vacation days; 404 when the user has no profile."""
    return ApiResponse(data=await vacation_service.get_vacation_days(db, valid_id(user_id, "user ID")))


@router.post("", response_model=ApiResponse[VacationRead], status_code=status.HTTP_201_CREATED)
async def create_vacation(payload: VacationCreate, db: AsyncSession = Depends(get_db)):
    vacation = await vacation_service.create_vacation(db, payload.model_dump())
    return ApiResponse(data=vacation, message="Vacation created")


@router.get("/{vacation_id}", response_model=ApiResponse[VacationRead])
async def get_vacation(vacation_id: int, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await vacation_service.get_vacation_detail(db, valid_id(vacation_id, "vacation ID")))


@router.put("/{vacation_id}", response_model=ApiResponse[VacationRead])
async def update_vacation(vacation_id: int, payload: VacationUpdate, db: AsyncSession = Depends(get_db)):
    vacation = await vacation_service.update_vacation(db, valid_id(vacation_id, "vacation ID"), payload.model_dump())
    return ApiResponse(data=vacation, message="Vacation updated")


@router.delete("/{vacation_id}", response_model=ApiResponse[dict])
async def delete_vacation(vacation_id: int, db: AsyncSession = Depends(get_db)):
    outcome = await vacation_service.delete_vacation(db, valid_id(vacation_id, "vacation ID"))
    return ApiResponse(data=outcome, message="Vacation deleted")
