"""
Shared response envelope and lookup schemas.

Every route answers with {"ok": bool, "data": ..., "message": ...};
errors use the same envelope with "error" (see core.exceptions).
"""

from typing import Generic, Optional, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope."""
    ok: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


class LookupItem(BaseModel):
    """Row of a name lookup table (vacation types, expense statuses, ...)."""
    id: int
    name: str

    class Config:
        from_attributes = True
