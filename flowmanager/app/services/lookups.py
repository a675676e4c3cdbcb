"""
Lookup tables: roles, vacation types/statuses, expense categories/statuses.

seed_lookups() is idempotent and is run by the flowmanager-seed-lookups
command and by the test suite.
"""

import logging
from typing import Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from flowmanager.app.models.enums import (
    RoleName,
    VacationTypeName,
    VacationStatusName,
    DEFAULT_EXPENSE_CATEGORIES,
    DEFAULT_EXPENSE_STATUSES,
)
from flowmanager.app.models.user_role import UserRole
from flowmanager.app.models.lookups import VacationType, VacationStatus, ExpenseCategory, ExpenseStatus

logger = logging.getLogger("flowmanager.lookups")

ROLE_DESCRIPTIONS = {
    RoleName.ADMINISTRATOR: "Pełny dostęp do systemu",
    RoleName.BOARD: "Zarząd firmy",
    RoleName.HR: "Dział kadr",
    RoleName.ACCOUNTING: "Dział finansowy",
    RoleName.USER: "Pracownik",
}


async def _insert_missing(db: AsyncSession, model, names, **extra_by_name) -> int:
    result = await db.execute(select(model.name))
    existing = set(result.scalars().all())
    added = 0
    for name in names:
        if name in existing:
            continue
        row = model(name=name)
        for attr, values in extra_by_name.items():
            setattr(row, attr, values.get(name))
        db.add(row)
        added += 1
    return added


async def seed_lookups(db: AsyncSession) -> dict:
    """Insert every missing lookup row and commit. Returns counts of added rows per table."""
    added = {
        "user_roles": await _insert_missing(
            db,
            UserRole,
            [r.value for r in RoleName],
            description={r.value: d for r, d in ROLE_DESCRIPTIONS.items()},
        ),
        "vacation_types": await _insert_missing(db, VacationType, [t.value for t in VacationTypeName]),
        "vacation_statuses": await _insert_missing(db, VacationStatus, [s.value for s in VacationStatusName]),
        "expense_categories": await _insert_missing(db, ExpenseCategory, DEFAULT_EXPENSE_CATEGORIES),
        "expense_statuses": await _insert_missing(db, ExpenseStatus, DEFAULT_EXPENSE_STATUSES),
    }
    await db.commit()
    logger.info("Lookup tables seeded: %s", added)
    return added


async def get_role_by_name(db: AsyncSession, name: str) -> Optional[UserRole]:
    """Case-insensitive role lookup."""
    result = await db.execute(
        select(UserRole).where(func.lower(UserRole.name) == name.strip().lower())
    )
    return result.scalar_one_or_none()


async def list_roles(db: AsyncSession) -> list[UserRole]:
    result = await db.execute(select(UserRole).order_by(UserRole.id))
    return result.scalars().all()


async def list_vacation_types(db: AsyncSession) -> list[VacationType]:
    result = await db.execute(select(VacationType).order_by(VacationType.id))
    return result.scalars().all()


async def list_vacation_statuses(db: AsyncSession) -> list[VacationStatus]:
    result = await db.execute(select(VacationStatus).order_by(VacationStatus.id))
    return result.scalars().all()


async def list_expense_categories(db: AsyncSession) -> list[ExpenseCategory]:
    result = await db.execute(select(ExpenseCategory).order_by(ExpenseCategory.id))
    return result.scalars().all()


async def list_expense_statuses(db: AsyncSession) -> list[ExpenseStatus]:
    result = await db.execute(select(ExpenseStatus).order_by(ExpenseStatus.id))
    return result.scalars().all()


async def find_by_name(db: AsyncSession, model, name: str):
    """Exact-name lookup in one of the name tables."""
    result = await db.execute(select(model).where(model.name == name))
    return result.scalar_one_or_none()
