"""
Redis client initialization.

Redis holds the revoked-session list used by logout. Consumers read
``redis_client`` from this module at call time so tests can swap it.
"""

import redis.asyncio as redis
from backend.app.core.config import settings


# Create async Redis client
redis_client = redis.from_url(
    settings.redis_url,
    decode_responses=settings.redis_decode_responses,
)
