"""
Password hashing utilities.

bcrypt via passlib; the cost factor comes from settings.bcrypt_rounds.
"""

import secrets
from passlib.context import CryptContext
from flowmanager.app.core.config import settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


def get_password_hash(password: str) -> str:
    """Hash a plaintext password with the configured cost factor."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Compare a plaintext password against a stored bcrypt hash."""
    return pwd_context.verify(plain_password, hashed_password)


# Well-formed bcrypt hash that no password matches. Compared against when a
# login names an unknown account; built once at import so every such login
# costs exactly one verify, like a login with a wrong password.
PLACEHOLDER_HASH = pwd_context.hash(secrets.token_urlsafe(32))
