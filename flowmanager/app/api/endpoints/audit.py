"""
Audit trail API endpoint (account managers only).
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from flowmanager.app.core.guards import require_account_manager
from flowmanager.app.db.session import get_db
from flowmanager.app.schemas.audit import AuditLogResponse, AuditTrailResponse
from flowmanager.app.schemas.common import ApiResponse
from flowmanager.app.services.audit import get_audit_trail

router = APIRouter(prefix="/audit-logs", tags=["Audit"])


@router.get("", response_model=ApiResponse[AuditTrailResponse])
async def list_audit_logs(
    target_id: Optional[int] = None,
    action: Optional[str] = None,
    limit: int = Query(100, ge=1, le=1000),
    current_user: dict = Depends(require_account_manager),
    db: AsyncSession = Depends(get_db)
):
    """Most recent audit entries, optionally filtered by target and action."""
    logs = await get_audit_trail(db, target_id=target_id, action=action, limit=limit)
    return ApiResponse(data={
        "logs": [AuditLogResponse.model_validate(log) for log in logs],
        "total": len(logs),
    })
