"""Tests for health check endpoints."""

from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from cpa_dashboard.core.config import settings
from cpa_dashboard.main import app


class TestBasicHealthCheck:
    """Test basic health check endpoint."""

    @pytest.mark.asyncio
    async def test_health_check_success(self, test_client: AsyncClient) -> None:
        """Test basic health check returns healthy status."""
        response = await test_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["app"] == settings.APP_NAME
        assert "version" in data

    @pytest.mark.asyncio
    async def test_responses_carry_correlation_id(self, test_client: AsyncClient) -> None:
        """Test the tracing middleware echoes the correlation ID."""
        response = await test_client.get("/health", headers={"X-Correlation-ID": "abc-123"})

        assert response.headers["X-Correlation-ID"] == "abc-123"


class TestRedisHealthCheck:
    """Test Redis health check endpoint."""

    @pytest.mark.asyncio
    async def test_redis_health_check_success(self, test_client: AsyncClient) -> None:
        """Test Redis health check returns healthy status."""
        response = await test_client.get("/health/redis")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["redis"] == "connected"

    @pytest.mark.asyncio
    async def test_redis_health_check_failure(self, test_client: AsyncClient) -> None:
        """Test Redis health check handles connection failures."""
        broken = AsyncMock()
        broken.ping.side_effect = Exception("Redis connection failed")
        app.state.redis = broken

        response = await test_client.get("/health/redis")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "unhealthy"
        assert "Redis connection failed" in data["redis"]
