"""Pytest configuration and fixtures for dashboard tests."""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from fakeredis import aioredis as fakeredis
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr

from cpa_dashboard.main import app
from cpa_dashboard.models.configuration import Configuration
from cpa_dashboard.services.config_store import ConfigStore
from cpa_dashboard.services.dashboard_state import DashboardState
from cpa_dashboard.services.sync_worker import SyncWorker
from tests.helpers import TEST_ENDPOINT, FakeClickDealer


@pytest.fixture
def sample_config() -> Configuration:
    """A complete configuration pointing at the fake API."""
    return Configuration(
        api_key=SecretStr("cd_live_0123456789abcdef"),
        affiliate_id="3740",
        api_endpoint=TEST_ENDPOINT,
    )


@pytest.fixture
def sample_conversions() -> list[dict[str, Any]]:
    """Raw conversions the way ClickDealer reports them."""
    return [
        {
            "conversion_id": "L1",
            "timestamp": "2024-05-01T10:00:00Z",
            "sub_id": "fb",
            "click_id": "C1",
            "country": "US",
            "payout": "12.50",
            "status": "approved",
            "offer_name": "Sweepstakes US",
        },
        {
            "id": "L2",
            "created_at": "2024-05-01T11:00:00Z",
            "sub1": "google",
            "country": "DE",
            "revenue": 4,
            "status": "pending",
            "campaign_name": "Dating DE",
        },
    ]


@pytest.fixture
def sample_clicks() -> list[dict[str, Any]]:
    """Raw clicks the way ClickDealer reports them."""
    return [
        {"click_id": "C1", "timestamp": "2024-05-01T09:59:00Z", "sub_id": "fb", "country": "US"},
        {"click_id": "C2", "timestamp": "2024-05-01T10:30:00Z", "sub_id": "fb", "country": "US"},
        {
            "id": "C3",
            "created_at": "2024-05-01T10:45:00Z",
            "sub1": "google",
            "country": "DE",
            "user_agent": "Mozilla/5.0",
            "ip": "10.0.0.1",
        },
    ]


@pytest.fixture
def fake_api(sample_conversions: list[dict[str, Any]], sample_clicks: list[dict[str, Any]]) -> FakeClickDealer:
    """Fake API preloaded with the sample records."""
    fake = FakeClickDealer()
    fake.conversions = sample_conversions
    fake.clicks = sample_clicks
    return fake


@pytest_asyncio.fixture(scope="function")
async def test_redis() -> AsyncGenerator[Any, None]:
    """Create fake Redis client for testing."""
    redis_client = fakeredis.FakeRedis(decode_responses=True)
    yield redis_client
    await redis_client.flushall()
    await redis_client.aclose()


@pytest.fixture
def config_store(test_redis: Any) -> ConfigStore:
    return ConfigStore(test_redis)


@pytest.fixture
def dashboard_state(config_store: ConfigStore) -> DashboardState:
    """Fresh dashboard state in merge mode."""
    return DashboardState(config_store, sync_mode="merge")


@pytest_asyncio.fixture(scope="function")
async def sync_worker(
    dashboard_state: DashboardState,
    fake_api: FakeClickDealer,
) -> AsyncGenerator[SyncWorker, None]:
    """Sync worker wired to the fake API with a short polling interval."""
    worker = SyncWorker(dashboard_state, client_factory=fake_api.client_factory, interval=0.05)
    yield worker
    fake_api.gate.set()
    await worker.stop()


@pytest_asyncio.fixture(scope="function")
async def test_client(
    dashboard_state: DashboardState,
    sync_worker: SyncWorker,
    test_redis: Any,
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the API with the test state installed on the app."""
    app.state.redis = test_redis
    app.state.dashboard = dashboard_state
    app.state.sync_worker = sync_worker

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
