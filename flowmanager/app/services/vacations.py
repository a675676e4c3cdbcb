"""
Vacation requests and the vacation day balance.

user_profiles.vacation_days_total holds the remaining balance. Vacations of
a balance-consuming type (BALANCE_VACATION_TYPES) deduct their business
days when created, adjust the balance by the difference when edited and
give the days back when deleted. The vacation row and the balance change
are committed together.
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from flowmanager.app.core.exceptions import AppException, ValidationError, ResourceNotFoundError
from flowmanager.app.models.enums import BALANCE_VACATION_TYPES, VacationStatusName
from flowmanager.app.models.lookups import VacationType, VacationStatus
from flowmanager.app.models.user import User
from flowmanager.app.models.user_profile import UserProfile
from flowmanager.app.models.vacation import Vacation
from flowmanager.app.services.lookups import find_by_name

logger = logging.getLogger("flowmanager.vacations")


def business_days(start: Optional[date], end: Optional[date]) -> int:
    """Number of Monday-Friday days in [start, end]; 0 for a missing or reversed range."""
    if start is None or end is None or start > end:
        return 0
    count = 0
    current = start
    while current <= end:
        if current.weekday() < 5:
            count += 1
        current += timedelta(days=1)
    return count


def consumes_balance(type_name: Optional[str]) -> bool:
    return type_name in [t.value for t in BALANCE_VACATION_TYPES]


def _insufficient(available: int, requested: int) -> ValidationError:
    return ValidationError(
        f"Niewystarczająca liczba dni urlopowych. Dostępne: {available}, wnioskowane: {requested}",
        details={"available": available, "requested": requested},
    )


async def _get_profile(db: AsyncSession, user_id: int) -> Optional[UserProfile]:
    result = await db.execute(select(UserProfile).where(UserProfile.user_id == user_id))
    return result.scalar_one_or_none()


def _vacation_query():
    return (
        select(Vacation, UserProfile.first_name, UserProfile.last_name, VacationType.name, VacationStatus.name)
        .outerjoin(UserProfile, UserProfile.user_id == Vacation.user_id)
        .outerjoin(VacationType, VacationType.id == Vacation.type_id)
        .outerjoin(VacationStatus, VacationStatus.id == Vacation.status_id)
    )


def _vacation_dict(vacation: Vacation, first_name, last_name, type_name, status_name) -> dict:
    employee_name = " ".join(part for part in (first_name, last_name) if part) or None
    return {
        "id": vacation.id,
        "user_id": vacation.user_id,
        "employee_name": employee_name,
        "vacation_type": type_name,
        "status": status_name,
        "start_date": vacation.start_date,
        "end_date": vacation.end_date,
        "created_at": vacation.created_at,
    }


async def list_vacations(db: AsyncSession, user_id: Optional[int] = None) -> list[dict]:
    query = _vacation_query()
    if user_id is not None:
        query = query.where(Vacation.user_id == user_id)
    result = await db.execute(query.order_by(Vacation.start_date.desc(), Vacation.id.desc()))
    return [_vacation_dict(*row) for row in result.all()]


async def get_vacation_detail(db: AsyncSession, vacation_id: int) -> dict:
    result = await db.execute(_vacation_query().where(Vacation.id == vacation_id))
    row = result.first()
    if row is None:
        raise ResourceNotFoundError("Vacation", vacation_id)
    return _vacation_dict(*row)


async def get_vacation_days(db: AsyncSession, user_id: int) -> dict:
    """Remaining balance of a user; 404 when the user has no profile."""
    profile = await _get_profile(db, user_id)
    if profile is None:
        raise ResourceNotFoundError("User profile", user_id)
    return {"user_id": user_id, "vacation_days_remaining": profile.vacation_days_total or 0}


async def _type_by_name(db: AsyncSession, name: str) -> VacationType:
    vacation_type = await find_by_name(db, VacationType, name)
    if vacation_type is None:
        raise ValidationError("Invalid vacation type")
    return vacation_type


def _check_range(start: date, end: date) -> None:
    if start > end:
        raise ValidationError("Start date must not be after end date")


async def create_vacation(db: AsyncSession, data: Dict[str, Any]) -> dict:
    """
    Book a vacation with the pending status.

    Raises:
        ValidationError: missing fields, unknown type, reversed dates or
            not enough days left for a balance-consuming type
        ResourceNotFoundError: unknown employee
    """
    required = ("employee_id", "vacation_type", "start_date", "end_date")
    missing = [field for field in required if not data.get(field)]
    if missing:
        raise ValidationError("Missing required fields", details={"missing": missing})

    user_id = data["employee_id"]
    start, end = data["start_date"], data["end_date"]
    _check_range(start, end)

    result = await db.execute(select(User.id).where(User.id == user_id))
    if result.scalar_one_or_none() is None:
        raise ResourceNotFoundError("User", user_id)

    vacation_type = await _type_by_name(db, data["vacation_type"])
    pending = await find_by_name(db, VacationStatus, VacationStatusName.PENDING.value)
    if pending is None:
        raise AppException("Pending vacation status is not configured", "ERR_CONFIG_001")

    requested = business_days(start, end) if consumes_balance(vacation_type.name) else 0
    profile = await _get_profile(db, user_id) if requested else None
    if profile is not None:
        available = profile.vacation_days_total or 0
        if requested > available:
            raise _insufficient(available, requested)

    try:
        vacation = Vacation(
            user_id=user_id,
            type_id=vacation_type.id,
            status_id=pending.id,
            start_date=start,
            end_date=end,
        )
        db.add(vacation)
        if profile is not None:
            profile.vacation_days_total = (profile.vacation_days_total or 0) - requested
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("Vacation %s booked for user %s (%s business days)", vacation.id, user_id, requested)
    return await get_vacation_detail(db, vacation.id)


async def update_vacation(db: AsyncSession, vacation_id: int, data: Dict[str, Any]) -> dict:
    """
    Replace type, status and dates of a vacation.

    The balance check treats the vacation's current days as already given
    back; the difference between old and new days is applied to the balance.
    """
    required = ("vacation_type", "status", "start_date", "end_date")
    missing = [field for field in required if not data.get(field)]
    if missing:
        raise ValidationError("Missing required fields", details={"missing": missing})
    start, end = data["start_date"], data["end_date"]
    _check_range(start, end)

    result = await db.execute(
        select(Vacation, VacationType.name)
        .outerjoin(VacationType, VacationType.id == Vacation.type_id)
        .where(Vacation.id == vacation_id)
    )
    row = result.first()
    if row is None:
        raise ResourceNotFoundError("Vacation", vacation_id)
    vacation, current_type_name = row

    new_type = await _type_by_name(db, data["vacation_type"])
    new_status = await find_by_name(db, VacationStatus, data["status"])
    if new_status is None:
        raise ValidationError("Invalid vacation status")

    original_days = (
        business_days(vacation.start_date, vacation.end_date) if consumes_balance(current_type_name) else 0
    )
    new_days = business_days(start, end) if consumes_balance(new_type.name) else 0

    profile = await _get_profile(db, vacation.user_id) if vacation.user_id else None
    if profile is not None and new_days:
        adjusted = (profile.vacation_days_total or 0) + original_days
        if new_days > adjusted:
            raise _insufficient(adjusted, new_days)

    try:
        vacation.type_id = new_type.id
        vacation.status_id = new_status.id
        vacation.start_date = start
        vacation.end_date = end
        vacation.updated_at = datetime.now(timezone.utc)
        difference = original_days - new_days
        if profile is not None and difference:
            profile.vacation_days_total = (profile.vacation_days_total or 0) + difference
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    return await get_vacation_detail(db, vacation_id)


async def delete_vacation(db: AsyncSession, vacation_id: int) -> dict:
    """Delete a vacation and give its days back to the balance when it consumed any."""
    result = await db.execute(
        select(Vacation, VacationType.name)
        .outerjoin(VacationType, VacationType.id == Vacation.type_id)
        .where(Vacation.id == vacation_id)
    )
    row = result.first()
    if row is None:
        raise ResourceNotFoundError("Vacation", vacation_id)
    vacation, type_name = row

    restored = business_days(vacation.start_date, vacation.end_date) if consumes_balance(type_name) else 0
    profile = await _get_profile(db, vacation.user_id) if restored and vacation.user_id else None

    try:
        if profile is not None:
            profile.vacation_days_total = (profile.vacation_days_total or 0) + restored
        await db.delete(vacation)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    return {"success": True, "deleted_vacation_id": vacation_id, "restored_days": restored if profile else 0}
