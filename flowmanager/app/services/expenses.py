"""
Expense service.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from flowmanager.app.core.exceptions import ValidationError, ResourceNotFoundError
from flowmanager.app.models.expense import Expense
from flowmanager.app.models.lookups import ExpenseCategory, ExpenseStatus
from flowmanager.app.models.project import Project

EXPENSE_FIELDS = ("name", "category_id", "project_id", "amount", "date", "status_id")
REQUIRED_FIELDS = ("name", "category_id", "amount")


def _expense_query():
    return (
        select(Expense, ExpenseCategory.name, ExpenseStatus.name, Project.name)
        .outerjoin(ExpenseCategory, ExpenseCategory.id == Expense.category_id)
        .outerjoin(ExpenseStatus, ExpenseStatus.id == Expense.status_id)
        .outerjoin(Project, Project.id == Expense.project_id)
    )


def _expense_dict(expense: Expense, category_name, status_name, project_name) -> dict:
    data = {field: getattr(expense, field) for field in EXPENSE_FIELDS}
    data.update(
        id=expense.id,
        category_name=category_name,
        status_name=status_name,
        project_name=project_name,
        created_at=expense.created_at,
        updated_at=expense.updated_at,
    )
    return data


async def _check_references(db: AsyncSession, values: Dict[str, Any]) -> None:
    for field, model, label in (
        ("category_id", ExpenseCategory, "Expense category"),
        ("status_id", ExpenseStatus, "Expense status"),
        ("project_id", Project, "Project"),
    ):
        ref_id = values.get(field)
        if ref_id is None:
            continue
        result = await db.execute(select(model.id).where(model.id == ref_id))
        if result.scalar_one_or_none() is None:
            raise ValidationError(f"{label} with ID {ref_id} does not exist")


async def list_expenses(
    db: AsyncSession,
    name: Optional[str] = None,
    category_id: Optional[int] = None,
    project_id: Optional[int] = None,
    min_amount: Optional[Decimal] = None,
    max_amount: Optional[Decimal] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    status_id: Optional[int] = None,
) -> list[dict]:
    """Expenses with category, status and project names, newest first."""
    query = _expense_query()
    if name:
        query = query.where(Expense.name.ilike(f"%{name}%"))
    if category_id is not None:
        query = query.where(Expense.category_id == category_id)
    if project_id is not None:
        query = query.where(Expense.project_id == project_id)
    if min_amount is not None:
        query = query.where(Expense.amount >= min_amount)
    if max_amount is not None:
        query = query.where(Expense.amount <= max_amount)
    if date_from:
        query = query.where(Expense.date >= date_from)
    if date_to:
        query = query.where(Expense.date <= date_to)
    if status_id is not None:
        query = query.where(Expense.status_id == status_id)

    result = await db.execute(query.order_by(Expense.date.desc(), Expense.id.desc()))
    return [_expense_dict(*row) for row in result.all()]


async def get_expense_detail(db: AsyncSession, expense_id: int) -> dict:
    result = await db.execute(_expense_query().where(Expense.id == expense_id))
    row = result.first()
    if row is None:
        raise ResourceNotFoundError("Expense", expense_id)
    return _expense_dict(*row)


def _validate_amount(amount: Decimal) -> None:
    if amount < 0:
        raise ValidationError("Amount must not be negative")


async def create_expense(db: AsyncSession, data: Dict[str, Any]) -> dict:
    """name, category_id and amount are required."""
    missing = [
        field for field in REQUIRED_FIELDS
        if data.get(field) is None or (field == "name" and not str(data[field]).strip())
    ]
    if missing:
        raise ValidationError("Missing required fields", details={"missing": missing})
    _validate_amount(data["amount"])

    values = {k: v for k, v in data.items() if k in EXPENSE_FIELDS and v is not None}
    values["name"] = values["name"].strip()
    await _check_references(db, values)

    expense = Expense(**values)
    db.add(expense)
    await db.commit()
    return await get_expense_detail(db, expense.id)


async def update_expense(db: AsyncSession, expense_id: int, data: Dict[str, Any]) -> dict:
    """Partial update; required fields may be changed but not emptied."""
    values = {k: v for k, v in data.items() if k in EXPENSE_FIELDS}
    if not values:
        raise ValidationError("No fields to update")
    for field in REQUIRED_FIELDS:
        if field in values and (values[field] is None or (field == "name" and not values[field].strip())):
            raise ValidationError(f"{field} cannot be empty")
    if "name" in values:
        values["name"] = values["name"].strip()
    if "amount" in values:
        _validate_amount(values["amount"])

    result = await db.execute(select(Expense).where(Expense.id == expense_id))
    expense = result.scalar_one_or_none()
    if expense is None:
        raise ResourceNotFoundError("Expense", expense_id)
    await _check_references(db, values)

    for field, value in values.items():
        setattr(expense, field, value)
    expense.updated_at = datetime.now(timezone.utc)
    await db.commit()
    return await get_expense_detail(db, expense_id)


async def delete_expense(db: AsyncSession, expense_id: int) -> int:
    result = await db.execute(select(Expense).where(Expense.id == expense_id))
    expense = result.scalar_one_or_none()
    if expense is None:
        raise ResourceNotFoundError("Expense", expense_id)
    await db.delete(expense)
    await db.commit()
    return expense_id
