"""
Token Revocation System using Redis.

Implements token blacklisting so logout invalidates a JWT immediately.
"""

import logging

from redis.exceptions import RedisError

from fleetflow.app.core import redis_client as redis_module
from fleetflow.app.core.config import settings

logger = logging.getLogger(__name__)

# Redis key prefix for blacklisted tokens
TOKEN_BLACKLIST_PREFIX = "blacklist:token:"


async def revoke_token(token: str, user_id: int) -> bool:
    """
    Revoke a specific JWT token by adding it to the blacklist.

    Args:
        token: The JWT token string to revoke
        user_id: User ID who owns the token

    Returns:
        True if successfully revoked, False otherwise
    """
    try:
        # Tokens expire on their own, the entry only has to outlive them
        ttl_seconds = settings.access_token_expire_minutes * 60
        key = f"{TOKEN_BLACKLIST_PREFIX}{token}"
        await redis_module.redis_client.setex(key, ttl_seconds, str(user_id))
        return True
    except RedisError:
        logger.exception("Error revoking token for user %s", user_id)
        return False


async def is_token_revoked(token: str) -> bool:
    """
    Check if a token has been revoked.

    If Redis is unreachable the request is allowed (availability over strictness).
    """
    try:
        key = f"{TOKEN_BLACKLIST_PREFIX}{token}"
        exists = await redis_module.redis_client.exists(key)
        return exists > 0
    except RedisError:
        logger.warning("Token revocation check skipped, Redis unavailable")
        return False
