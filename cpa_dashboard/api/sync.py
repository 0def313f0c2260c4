"""Live mode and manual refresh endpoints."""

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from cpa_dashboard.api.deps import Dashboard, Worker
from cpa_dashboard.core.config import settings
from cpa_dashboard.models.configuration import ConfigurationInvalid
from cpa_dashboard.models.dashboard import SyncStatus

router = APIRouter(prefix=f"{settings.API_V1_PREFIX}/sync", tags=["sync"])


class LiveModeRequest(BaseModel):
    """Live/paused toggle."""

    enabled: bool


@router.get("/status", response_model=SyncStatus)
async def get_sync_status(dashboard: Dashboard, worker: Worker) -> SyncStatus:
    return dashboard.status(in_flight=worker.in_flight)


@router.post("/live", response_model=SyncStatus)
async def set_live_mode(request: LiveModeRequest, dashboard: Dashboard, worker: Worker) -> SyncStatus:
    """Start or stop polling every SYNC_INTERVAL_SECONDS."""
    try:
        worker.set_live(request.enabled)
    except ConfigurationInvalid as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    return dashboard.status(in_flight=worker.in_flight)


@router.post("/run", response_model=SyncStatus)
async def run_sync_now(dashboard: Dashboard, worker: Worker) -> SyncStatus:
    """Run one sync cycle now, independent of live mode."""
    if not dashboard.configured:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Configure API first")
    await worker.trigger()
    return dashboard.status(in_flight=worker.in_flight)
