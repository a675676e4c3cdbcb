"""
Vacation Pydantic schemas.
"""

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel


class VacationCreate(BaseModel):
    employee_id: Optional[int] = None
    vacation_type: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class VacationUpdate(BaseModel):
    vacation_type: Optional[str] = None
    status: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class VacationRead(BaseModel):
    id: int
    user_id: Optional[int] = None
    employee_name: Optional[str] = None
    vacation_type: Optional[str] = None
    status: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: Optional[datetime] = None


class VacationDays(BaseModel):
    user_id: int
    vacation_days_remaining: int
