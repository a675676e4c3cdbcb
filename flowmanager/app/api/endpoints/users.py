"""
User and employee API endpoints.

Reads are open to any session; account management (create, update,
delete) requires an account manager role.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from flowmanager.app.api.params import valid_id, valid_ids
from flowmanager.app.core.dependencies import get_current_user
from flowmanager.app.core.guards import require_account_manager
from flowmanager.app.core.redis_client import get_redis
from flowmanager.app.core.token_revocation import revoke_all_user_tokens
from flowmanager.app.db.session import get_db
from flowmanager.app.schemas.common import ApiResponse
from flowmanager.app.schemas.users import (
    UserCreate,
    UserUpdate,
    UserRead,
    UserList,
    BulkDeleteUsersRequest,
    UserDeletionResult,
    BulkUserDeletionResult,
    RoleRead,
    SupervisorRead,
    EmployeeRead,
    UserProjectRead,
)
from flowmanager.app.services import users as user_service
from flowmanager.app.services.audit import log_admin_action, AuditAction
from flowmanager.app.services.deletion import delete_user, delete_users
from flowmanager.app.services.lookups import list_roles

router = APIRouter(prefix="/users", tags=["Users"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=ApiResponse[UserList])
async def list_users(
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    email: Optional[str] = None,
    role_name: Optional[str] = None,
    employment_type: Optional[str] = None,
    db: AsyncSession = Depends(get_db)
):
    """List users with role and profile; filters are case-insensitive substrings."""
    users = await user_service.list_users(
        db,
        first_name=first_name,
        last_name=last_name,
        email=email,
        role_name=role_name,
        employment_type=employment_type,
    )
    return ApiResponse(data={"users": users, "total": len(users)})


@router.get("/supervisors", response_model=ApiResponse[List[SupervisorRead]])
async def list_supervisors(db: AsyncSession = Depends(get_db)):
    """Users that may be set as a supervisor."""
    return ApiResponse(data=await user_service.list_supervisors(db))


@router.get("/roles", response_model=ApiResponse[List[RoleRead]])
async def get_roles(db: AsyncSession = Depends(get_db)):
    roles = await list_roles(db)
    return ApiResponse(data=[RoleRead.model_validate(role) for role in roles])


@router.get("/employees", response_model=ApiResponse[List[EmployeeRead]])
async def list_employees(db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await user_service.list_employees(db))


@router.post("", response_model=ApiResponse[UserRead], status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    current_user: dict = Depends(require_account_manager),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a user with credential and optional profile.

    Errors: 400 invalid email, unknown role or supervisor; 409 email taken.
    """
    user, _ = await user_service.create_user(
        db,
        email=payload.email,
        password=payload.password,
        role_id=payload.role_id,
        role_name=payload.role_name,
        profile=payload.profile.model_dump(exclude_unset=True) if payload.profile else None,
    )
    await log_admin_action(
        db, current_user, AuditAction.USER_CREATED, target_id=user.id, target_email=user.email
    )
    return ApiResponse(data=await user_service.get_user_detail(db, user.id), message="User created")


@router.delete("", response_model=ApiResponse[BulkUserDeletionResult])
async def bulk_delete_users(
    payload: BulkDeleteUsersRequest,
    current_user: dict = Depends(require_account_manager),
    db: AsyncSession = Depends(get_db),
    redis=Depends(get_redis),
):
    """
    Delete several users in order.

    Not atomic: the first failure is returned and the users before it stay deleted.
    """
    user_ids = valid_ids(payload.user_ids, "user_ids")

    async def after_each(user_id: int, outcome: dict):
        await revoke_all_user_tokens(redis, user_id)
        await log_admin_action(
            db, current_user, AuditAction.USER_DELETED,
            target_id=user_id, target_email=outcome["email"], metadata={"removed": outcome["removed"], "bulk": True},
        )

    emails = await delete_users(db, user_ids, after_each=after_each)
    return ApiResponse(
        data={"success": True, "deleted_count": len(emails), "emails": emails},
        message=f"Deleted {len(emails)} user(s)",
    )


@router.get("/{user_id}", response_model=ApiResponse[UserRead])
async def get_user(user_id: int, db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await user_service.get_user_detail(db, valid_id(user_id, "user ID")))


@router.get("/{user_id}/projects", response_model=ApiResponse[List[UserProjectRead]])
async def get_user_projects(user_id: int, db: AsyncSession = Depends(get_db)):
    """Projects the user is assigned to."""
    return ApiResponse(data=await user_service.list_user_projects(db, valid_id(user_id, "user ID")))


@router.put("/{user_id}", response_model=ApiResponse[UserRead])
async def update_user(
    user_id: int,
    payload: UserUpdate,
    current_user: dict = Depends(require_account_manager),
    db: AsyncSession = Depends(get_db)
):
    """Partial update of email, role, password and profile."""
    user = await user_service.update_user(
        db,
        valid_id(user_id, "user ID"),
        email=payload.email,
        password=payload.password,
        role_id=payload.role_id,
        role_name=payload.role_name,
        profile=payload.profile.model_dump(exclude_unset=True) if payload.profile else None,
    )
    await log_admin_action(
        db, current_user, AuditAction.USER_UPDATED,
        target_id=user.id, target_email=user.email,
        metadata={"fields": sorted(payload.model_dump(exclude_unset=True, exclude={"password"}))},
    )
    return ApiResponse(data=await user_service.get_user_detail(db, user.id), message="User updated")


@router.delete("/{user_id}", response_model=ApiResponse[UserDeletionResult])
async def remove_user(
    user_id: int,
    current_user: dict = Depends(require_account_manager),
    db: AsyncSession = Depends(get_db),
    redis=Depends(get_redis),
):
    """Delete a user with all dependent rows and end its sessions."""
    outcome = await delete_user(db, valid_id(user_id, "user ID"))
    await revoke_all_user_tokens(redis, user_id)
    await log_admin_action(
        db, current_user, AuditAction.USER_DELETED,
        target_id=user_id, target_email=outcome["email"], metadata={"removed": outcome["removed"]},
    )
    return ApiResponse(data=outcome, message=f"User {outcome['email']} deleted")
