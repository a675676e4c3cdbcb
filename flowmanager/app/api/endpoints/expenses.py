"""
Expense API endpoints.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from flowmanager.app.api.params import valid_id
from flowmanager.app.core.dependencies import get_current_user
from flowmanager.app.db.session import get_db
from flowmanager.app.schemas.common import ApiResponse, LookupItem
from flowmanager.app.schemas.expenses import ExpenseCreate, ExpenseUpdate, ExpenseRead
from flowmanager.app.services import expenses as expense_service
from flowmanager.app.services.lookups import list_expense_categories, list_expense_statuses

router = APIRouter(prefix="/expenses", tags=["Expenses"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=ApiResponse[List[ExpenseRead]])
async def list_expenses(
    name: Optional[str] = None,
    category_id: Optional[int] = None,
    project_id: Optional[int] = None,
    min_amount: Optional[Decimal] = None,
    max_amount: Optional[Decimal] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    status_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db)
):
    expenses = await expense_service.list_expenses(
        db,
        name=name,
        category_id=category_id,
        project_id=project_id,
        min_amount=min_amount,
        max_amount=max_amount,
        date_from=date_from,
        date_to=date_to,
        status_id=status_id,
    )
    return ApiResponse(data=expenses)


@router.get("/categories", response_model=ApiResponse[List[LookupItem]])
async def get_categories(db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=[LookupItem.model_validate(c) for c in await list_expense_categories(db)])


@router.get("/statuses", response_model=ApiResponse[List[LookupItem]])
async def get_statuses(db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=[LookupItem.model_validate(s) for s in await list_expense_statuses(db)])


@router.get("/{expense_id}", response_model=ApiResponse[ExpenseRead])
async def get_expense(expense_id: int, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await expense_service.get_expense_detail(db, valid_id(expense_id, "expense ID")))


@router.post("", response_model=ApiResponse[ExpenseRead], status_code=status.HTTP_201_CREATED)
async def create_expense(payload: ExpenseCreate, db: AsyncSession = Depends(get_db)):
    """name, category_id and amount are required."""
    expense = await expense_service.create_expense(db, payload.model_dump())
    return ApiResponse(data=expense, message="Expense created")


@router.put("/{expense_id}", response_model=ApiResponse[ExpenseRead])
async def update_expense(expense_id: int, payload: ExpenseUpdate, db: AsyncSession = Depends(get_db)):
    expense = await expense_service.update_expense(
        db, valid_id(expense_id, "expense ID"), payload.model_dump(exclude_unset=True)
    )
    return ApiResponse(data=expense, message="Expense updated")


@router.delete("/{expense_id}", response_model=ApiResponse[dict])
async def delete_expense(expense_id: int, db: AsyncSession = Depends(get_db)):
    deleted_id = await expense_service.delete_expense(db, valid_id(expense_id, "expense ID"))
    return ApiResponse(data={"deleted_expense_id": deleted_id}, message="Expense deleted")
