"""
Session revocation using Redis.

Tokens are stateless JWTs; logging out blacklists the presented token and
deleting an account marks every token of that user as revoked.
"""

import logging
from flowmanager.app.core.config import settings

logger = logging.getLogger("flowmanager.sessions")

# Redis key prefix for blacklisted tokens
TOKEN_BLACKLIST_PREFIX = "blacklist:token:"
USER_TOKENS_PREFIX = "user:tokens:"


def _ttl_seconds() -> int:
    # Markers only need to outlive the longest possible token
    return settings.access_token_expire_minutes * 60


async def revoke_token(redis, token: str, user_id: int) -> bool:
    """
    Revoke a specific JWT token by adding it to the blacklist.

    Args:
        redis: Redis client
        token: The JWT token string to revoke
        user_id: User ID who owns the token

    Returns:
        True if successfully revoked, False otherwise
    """
    try:
        key = f"{TOKEN_BLACKLIST_PREFIX}{token}"
        await redis.setex(key, _ttl_seconds(), str(user_id))
        return True
    except Exception:
        logger.exception("Error revoking token for user %s", user_id)
        return False


async def is_token_revoked(redis, token: str) -> bool:
    """Check if a token has been revoked."""
    try:
        key = f"{TOKEN_BLACKLIST_PREFIX}{token}"
        exists = await redis.exists(key)
        return exists > 0
    except Exception:
        # Redis outage: fall back to the database existence check
        logger.exception("Error checking token revocation")
        return False


async def revoke_all_user_tokens(redis, user_id: int) -> bool:
    """
    Revoke all active tokens for a specific user.

    Called when an account is deleted so its open sessions end immediately.
    """
    try:
        key = f"{USER_TOKENS_PREFIX}{user_id}:revoked"
        await redis.setex(key, _ttl_seconds(), "1")
        return True
    except Exception:
        logger.exception("Error revoking all tokens for user %s", user_id)
        return False


async def are_user_tokens_revoked(redis, user_id: int) -> bool:
    """Check if all tokens for a user have been revoked."""
    try:
        key = f"{USER_TOKENS_PREFIX}{user_id}:revoked"
        exists = await redis.exists(key)
        return exists > 0
    except Exception:
        logger.exception("Error checking user token revocation for user %s", user_id)
        return False
