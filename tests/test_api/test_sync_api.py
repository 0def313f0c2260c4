"""Tests for live mode and manual refresh endpoints."""

import pytest
from httpx import AsyncClient

from cpa_dashboard.models.configuration import Configuration
from cpa_dashboard.services.dashboard_state import DashboardState
from cpa_dashboard.services.sync_worker import SyncWorker
from tests.helpers import FakeClickDealer, wait_until


class TestLiveMode:
    """Test toggling live mode."""

    @pytest.mark.asyncio
    async def test_requires_configuration(self, test_client: AsyncClient, fake_api: FakeClickDealer) -> None:
        response = await test_client.post("/api/v1/sync/live", json={"enabled": True})

        assert response.status_code == 409
        assert response.json()["detail"] == "Configure API first"
        assert fake_api.requests == []

    @pytest.mark.asyncio
    async def test_enable_starts_polling(
        self,
        test_client: AsyncClient,
        dashboard_state: DashboardState,
        sync_worker: SyncWorker,
        fake_api: FakeClickDealer,
        sample_config: Configuration,
    ) -> None:
        dashboard_state.config = sample_config

        response = await test_client.post("/api/v1/sync/live", json={"enabled": True})

        assert response.status_code == 200
        assert response.json()["live"] is True
        await wait_until(lambda: fake_api.count("/conversions") >= 2)
        assert sync_worker.running

    @pytest.mark.asyncio
    async def test_disable_stops_polling(
        self,
        test_client: AsyncClient,
        dashboard_state: DashboardState,
        sync_worker: SyncWorker,
        fake_api: FakeClickDealer,
        sample_config: Configuration,
    ) -> None:
        dashboard_state.config = sample_config
        await test_client.post("/api/v1/sync/live", json={"enabled": True})
        await wait_until(lambda: fake_api.count("/conversions") >= 1)

        response = await test_client.post("/api/v1/sync/live", json={"enabled": False})

        assert response.json()["live"] is False
        await wait_until(lambda: not sync_worker.running)


class TestRunNow:
    """Test manual refresh."""

    @pytest.mark.asyncio
    async def test_requires_configuration(self, test_client: AsyncClient) -> None:
        response = await test_client.post("/api/v1/sync/run")

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_runs_one_cycle(
        self,
        test_client: AsyncClient,
        dashboard_state: DashboardState,
        fake_api: FakeClickDealer,
        sample_config: Configuration,
    ) -> None:
        dashboard_state.config = sample_config

        response = await test_client.post("/api/v1/sync/run")

        assert response.status_code == 200
        data = response.json()
        assert data["live"] is False
        assert data["in_flight"] is False
        assert data["last_synced_at"] is not None
        assert fake_api.count("/conversions") == 1
        assert fake_api.count("/clicks") == 1

    @pytest.mark.asyncio
    async def test_clicks_failure_is_a_warning(
        self,
        test_client: AsyncClient,
        dashboard_state: DashboardState,
        fake_api: FakeClickDealer,
        sample_config: Configuration,
    ) -> None:
        dashboard_state.config = sample_config
        fake_api.clicks_status = 502

        response = await test_client.post("/api/v1/sync/run")

        data = response.json()
        assert data["error"] is None
        assert data["warning"] == "API Error: 502"
        assert len(dashboard_state.store.leads) == 2


class TestStatus:
    """Test the status endpoint."""

    @pytest.mark.asyncio
    async def test_initial_status(self, test_client: AsyncClient) -> None:
        response = await test_client.get("/api/v1/sync/status")

        assert response.status_code == 200
        assert response.json() == {
            "live": False,
            "configured": False,
            "in_flight": False,
            "last_synced_at": None,
            "error": None,
            "warning": None,
        }

    @pytest.mark.asyncio
    async def test_status_reports_failure(
        self,
        test_client: AsyncClient,
        dashboard_state: DashboardState,
        fake_api: FakeClickDealer,
        sample_config: Configuration,
    ) -> None:
        dashboard_state.config = sample_config
        fake_api.conversions_status = 403
        await test_client.post("/api/v1/sync/run")

        response = await test_client.get("/api/v1/sync/status")

        assert response.json()["error"] == "API Error: 403"
