"""Redis client for the saved API configuration."""

import logging

from redis.asyncio import Redis

from cpa_dashboard.core.config import settings

logger = logging.getLogger(__name__)


async def connect_redis(url: str | None = None) -> Redis:
    """Open the client the config store reads and writes through.

    The application holds a single configuration key, so one client created
    in the lifespan and closed on shutdown is all that is needed. Fails fast
    when Redis cannot be reached.
    """
    client = Redis.from_url(
        url or str(settings.REDIS_URL),
        decode_responses=True,
        socket_connect_timeout=5.0,
        socket_timeout=5.0,
    )
    try:
        await client.ping()
    except Exception:
        logger.exception("Failed to connect to Redis")
        await client.aclose()
        raise
    logger.info("Redis connected")
    return client
