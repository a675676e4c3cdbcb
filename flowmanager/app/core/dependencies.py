"""
Authentication dependencies for FastAPI.

This module provides dependencies for protecting routes with JWT sessions.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from flowmanager.app.core.jwt import decode_access_token
from flowmanager.app.core.redis_client import get_redis
from flowmanager.app.core.token_revocation import is_token_revoked, are_user_tokens_revoked
from flowmanager.app.db.session import get_db
from flowmanager.app.models.user import User
from flowmanager.app.models.user_role import UserRole

# auto_error=False so a missing header ends up as 401 (HTTPBearer itself answers 403)
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db),
    redis=Depends(get_redis),
) -> dict:
    """
    FastAPI dependency for session authentication.

    Checks:
    1. Validates JWT token signature and expiry
    2. Checks if the token was revoked by logout
    3. Checks if all user tokens were revoked (account deleted)
    4. Verifies the user still exists in the database
    5. Replaces the role claim with the role currently stored for the user

    Args:
        credentials: HTTP Bearer token from request header
        db: Database session for the existence check
        redis: Redis client holding revocation markers

    Returns:
        Decoded token payload (sub, user_id, live role) plus the raw token

    Raises:
        HTTPException: 401 if authentication fails for any reason
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    token = credentials.credentials

    # 1. Decode and validate JWT
    payload = decode_access_token(token)
    if payload is None:
        raise _unauthorized("Could not validate credentials")

    user_id = payload.get("user_id")
    if not user_id:
        raise _unauthorized("Invalid token payload")

    # 2. Logged out token
    if await is_token_revoked(redis, token):
        raise _unauthorized("Token has been revoked")

    # 3. Account deleted
    if await are_user_tokens_revoked(redis, user_id):
        raise _unauthorized("User access has been revoked")

    # 4. Real-time database check
    result = await db.execute(
        select(User.id, UserRole.name)
        .outerjoin(UserRole, UserRole.id == User.role_id)
        .where(User.id == user_id)
    )
    row = result.one_or_none()
    if row is None:
        raise _unauthorized("User not found")

    # 5. A role change takes effect on tokens issued before it
    return {**payload, "role": row.name, "token": token}
