"""Tests for Redis connection setup."""

from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from cpa_dashboard.db.redis import connect_redis


class TestConnectRedis:
    """Test opening the config store's client."""

    @pytest.mark.asyncio
    async def test_returns_pinged_client(self, test_redis: Any) -> None:
        with patch("cpa_dashboard.db.redis.Redis.from_url", return_value=test_redis) as from_url:
            client = await connect_redis("redis://cache:6379/0")

        assert client is test_redis
        from_url.assert_called_once()
        assert from_url.call_args.args[0] == "redis://cache:6379/0"
        assert from_url.call_args.kwargs["decode_responses"] is True

    @pytest.mark.asyncio
    async def test_unreachable_redis_closes_client(self) -> None:
        """Test a failed ping closes the client and propagates."""
        client = AsyncMock()
        client.ping.side_effect = RedisConnectionError("connection refused")

        with patch("cpa_dashboard.db.redis.Redis.from_url", return_value=client):
            with pytest.raises(RedisConnectionError):
                await connect_redis("redis://cache:6379/0")

        client.aclose.assert_awaited_once()
