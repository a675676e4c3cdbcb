"""
Work log Pydantic schemas.
"""

import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel


class WorkLogCreate(BaseModel):
    """user_id, project_id, date and a positive hours_worked are required."""
    user_id: Optional[int] = None
    project_id: Optional[int] = None
    task_id: Optional[int] = None
    date: Optional[datetime.date] = None
    hours_worked: Optional[Decimal] = None
    is_overtime: Optional[bool] = None
    note: Optional[str] = None


class WorkLogUpdate(WorkLogCreate):
    pass


class WorkLogRead(BaseModel):
    id: int
    user_id: Optional[int] = None
    project_id: Optional[int] = None
    task_id: Optional[int] = None
    date: Optional[datetime.date] = None
    hours_worked: Optional[Decimal] = None
    is_overtime: bool = False
    note: Optional[str] = None

    class Config:
        from_attributes = True
