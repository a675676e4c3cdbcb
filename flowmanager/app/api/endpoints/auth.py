"""
Authentication API endpoints.

Provides register, login, logout and current-user endpoints.
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from flowmanager.app.db.session import get_db
from flowmanager.app.core.dependencies import get_current_user
from flowmanager.app.core.email import normalize_email
from flowmanager.app.core.exceptions import AuthenticationError
from flowmanager.app.core.jwt import create_access_token
from flowmanager.app.core.redis_client import get_redis
from flowmanager.app.core.token_revocation import revoke_token
from flowmanager.app.models.user import User
from flowmanager.app.models.user_role import UserRole
from flowmanager.app.schemas.auth import UserLogin, UserRegister, TokenResponse
from flowmanager.app.schemas.common import ApiResponse
from flowmanager.app.schemas.users import UserRead
from flowmanager.app.services.audit import log_auth_event, log_admin_action, AuditAction
from flowmanager.app.services.auth import authenticate_user
from flowmanager.app.services.users import register_user, get_user_detail

router = APIRouter(prefix="/auth", tags=["Authentication"])


async def _issue_token(db: AsyncSession, user: User) -> TokenResponse:
    result = await db.execute(select(UserRole.name).where(UserRole.id == user.role_id))
    role_name = result.scalar_one_or_none()

    jwt_payload = {
        "sub": user.email,
        "user_id": user.id,
        "role": role_name,
    }
    return TokenResponse(
        access_token=create_access_token(data=jwt_payload),
        token_type="bearer",
        user_id=user.id,
        email=user.email,
        role=role_name,
    )


def _client_ip(request: Request):
    return request.client.host if request.client else None


@router.post("/register", response_model=ApiResponse[TokenResponse], status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new account with the default role and a starter profile.

    Duplicate email answers 409; missing fields answer 400.
    """
    user = await register_user(db, user_data.model_dump())
    await log_admin_action(
        db,
        actor=None,
        action=AuditAction.USER_CREATED,
        target_id=user.id,
        target_email=user.email,
        metadata={"source": "register"},
    )
    token = await _issue_token(db, user)
    return ApiResponse(data=token, message="Account created")


@router.post("/login", response_model=ApiResponse[TokenResponse])
async def login(
    credentials: UserLogin,
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """
    Verify email and password and return a session token.

    Every failure answers 401 with the same message.
    """
    try:
        user = await authenticate_user(db, credentials.email, credentials.password)
    except AuthenticationError:
        missing = not normalize_email(credentials.email) or not credentials.password
        failure_reason = "missing_credentials" if missing else "invalid_credentials"
        await log_auth_event(
            db=db,
            action=AuditAction.LOGIN_FAILED,
            user_id=None,
            email=normalize_email(credentials.email) or None,
            ip_address=_client_ip(request),
            metadata={"reason": failure_reason},
        )
        raise

    token = await _issue_token(db, user)

    await log_auth_event(
        db=db,
        action=AuditAction.LOGIN_SUCCESS,
        user_id=user.id,
        email=user.email,
        ip_address=_client_ip(request),
    )
    return ApiResponse(data=token)


@router.post("/logout", response_model=ApiResponse[dict])
async def logout(
    request: Request,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    redis=Depends(get_redis),
):
    """Revoke the presented token."""
    await revoke_token(redis, current_user["token"], current_user["user_id"])
    await log_auth_event(
        db=db,
        action=AuditAction.LOGOUT,
        user_id=current_user["user_id"],
        email=current_user.get("sub"),
        ip_address=_client_ip(request),
    )
    return ApiResponse(data={}, message="Logged out")


@router.get("/me", response_model=ApiResponse[UserRead])
async def get_current_user_info(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Current authenticated user with role name and profile."""
    return ApiResponse(data=await get_user_detail(db, current_user["user_id"]))
