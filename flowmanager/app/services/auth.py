"""
Credential verification.

authenticate_user() is the only place a password is checked. It always runs
one bcrypt comparison, against the stored hash or the placeholder hash, so
that unknown accounts and wrong passwords cost the same time and raise the
same error.
"""

from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from flowmanager.app.core.email import normalize_email
from flowmanager.app.core.exceptions import AuthenticationError
from flowmanager.app.core.security import PLACEHOLDER_HASH, verify_password
from flowmanager.app.models.user import User
from flowmanager.app.models.user_credential import UserCredential


async def authenticate_user(db: AsyncSession, email: Optional[str], password: Optional[str]) -> User:
    """
    Return the user whose email and password match.

    Raises:
        AuthenticationError: for every kind of failure, with the same message
    """
    normalized = normalize_email(email)

    user = None
    stored_hash = None
    if normalized:
        result = await db.execute(select(User).where(User.email == normalized))
        user = result.scalar_one_or_none()

    if user is not None:
        result = await db.execute(
            select(UserCredential.password_hash).where(UserCredential.user_id == user.id)
        )
        stored_hash = result.scalars().first()

    # Compare against the placeholder when there is nothing real to compare with
    password_ok = verify_password(password or "", stored_hash or PLACEHOLDER_HASH)

    if user is None or stored_hash is None or not password or not password_ok:
        raise AuthenticationError()

    return user
