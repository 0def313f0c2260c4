"""API endpoints for the ClickDealer configuration."""

import structlog
from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, SecretStr

from cpa_dashboard.api.deps import Dashboard, Worker
from cpa_dashboard.core.config import settings
from cpa_dashboard.models.configuration import (
    Configuration,
    ConfigurationInvalid,
    MaskedConfiguration,
)
from cpa_dashboard.models.dashboard import SyncStatus

router = APIRouter(prefix=f"{settings.API_V1_PREFIX}/settings", tags=["settings"])
logger = structlog.get_logger()


class UpdateSettingsRequest(BaseModel):
    """Settings form submission."""

    api_key: SecretStr = SecretStr("")
    affiliate_id: str = ""
    api_endpoint: str | None = None


class SettingsResponse(BaseModel):
    """Saved configuration (API key masked)."""

    configured: bool
    config: MaskedConfiguration | None = None


@router.get("", response_model=SettingsResponse)
async def get_settings(dashboard: Dashboard) -> SettingsResponse:
    """Get the saved configuration with the API key masked."""
    if dashboard.config is None:
        return SettingsResponse(configured=False)
    return SettingsResponse(configured=True, config=dashboard.config.masked())


@router.post("", response_model=SyncStatus)
async def update_settings(
    request: UpdateSettingsRequest,
    dashboard: Dashboard,
    worker: Worker,
) -> SyncStatus:
    """Save the configuration and sync immediately.

    Returns:
        Sync status after the initial cycle; a failed cycle shows up as
        ``error`` rather than an HTTP error.
    """
    config = Configuration(
        api_key=request.api_key,
        affiliate_id=request.affiliate_id,
        api_endpoint=request.api_endpoint,
    )
    try:
        await dashboard.save_configuration(config)
    except ConfigurationInvalid as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message
        ) from e

    await worker.trigger()
    return dashboard.status(in_flight=worker.in_flight)


@router.delete("", response_model=SyncStatus)
async def delete_settings(dashboard: Dashboard, worker: Worker) -> SyncStatus:
    """Forget the configuration, stop live mode and drop all fetched data."""
    if dashboard.live:
        worker.set_live(False)
    await dashboard.clear_configuration()
    logger.info("configuration_deleted")
    return dashboard.status(in_flight=worker.in_flight)
