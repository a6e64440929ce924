"""
Session revocation using Redis.

Logout blacklists the token's ``jti`` until the token would have expired
anyway. Lookups fail open: an unreachable Redis is logged and the token
is treated as live.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from backend.app.core import redis_client as redis_module
from backend.app.core.config import settings
from backend.app.core.logging_config import get_logger

logger = get_logger("auth")

# Redis key prefix for revoked sessions
TOKEN_BLACKLIST_PREFIX = "blacklist:session:"


def _ttl_seconds(payload: Dict[str, Any]) -> int:
    exp = payload.get("exp")
    if exp is None:
        return settings.access_token_expire_minutes * 60
    remaining = int(exp - datetime.now(timezone.utc).timestamp())
    return max(remaining, 1)


async def revoke_session(payload: Dict[str, Any]) -> bool:
    """
    Revoke the session described by a decoded token payload.

    Returns:
        True if successfully revoked, False otherwise
    """
    jti = payload.get("jti")
    if not jti:
        return False

    try:
        await redis_module.redis_client.set(
            f"{TOKEN_BLACKLIST_PREFIX}{jti}",
            str(payload.get("sub", "")),
            ex=_ttl_seconds(payload),
        )
        return True
    except Exception:
        logger.exception("Failed to revoke session %s", jti)
        return False


async def is_session_revoked(payload: Dict[str, Any]) -> bool:
    """
    Check if a session has been revoked.

    Returns:
        True if revoked, False otherwise (including when Redis is down)
    """
    jti = payload.get("jti")
    if not jti:
        return False

    try:
        exists = await redis_module.redis_client.exists(f"{TOKEN_BLACKLIST_PREFIX}{jti}")
        return exists > 0
    except Exception:
        logger.warning("Revocation lookup failed for session %s", jti, exc_info=True)
        return False
