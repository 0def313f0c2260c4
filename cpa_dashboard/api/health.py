"""Health check endpoints."""

import logging

from fastapi import APIRouter, Request, Response, status

from cpa_dashboard.core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


@router.get("/health/redis")
async def health_check_redis(request: Request, response: Response) -> dict[str, str]:
    """Redis health check endpoint."""
    try:
        await request.app.state.redis.ping()
        return {"status": "healthy", "redis": "connected"}
    except Exception as e:
        logger.exception("Redis health check failed")
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"status": "unhealthy", "redis": str(e)}
