"""
Expense Pydantic schemas.
"""

import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel


class ExpenseCreate(BaseModel):
    """name, category_id and amount are required (checked by the service)."""
    name: Optional[str] = None
    category_id: Optional[int] = None
    project_id: Optional[int] = None
    amount: Optional[Decimal] = None
    date: Optional[datetime.date] = None
    status_id: Optional[int] = None


class ExpenseUpdate(ExpenseCreate):
    pass


class ExpenseRead(BaseModel):
    id: int
    name: str
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    project_id: Optional[int] = None
    project_name: Optional[str] = None
    amount: Decimal
    date: Optional[datetime.date] = None
    status_id: Optional[int] = None
    status_name: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None
