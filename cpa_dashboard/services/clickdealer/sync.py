"""One fetch cycle against the ClickDealer API."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

import structlog

from cpa_dashboard.models.events import ClickEvent, LeadEvent
from cpa_dashboard.services.clickdealer.client import ClickDealerClient, SyncError
from cpa_dashboard.services.clickdealer.normalize import normalize_clicks, normalize_leads

logger = structlog.get_logger()


@dataclass
class SyncResult:
    """Normalized data from a cycle whose leads fetch succeeded.

    ``clicks`` is None when the clicks fetch failed; the stored clicks are
    then left as they were.
    """

    leads: list[LeadEvent]
    clicks: list[ClickEvent] | None = None
    clicks_error: str | None = None
    fetched_at: datetime = field(default_factory=lambda: datetime.now(UTC))


async def fetch_cycle(client: ClickDealerClient) -> SyncResult:
    """Fetch and normalize leads, then clicks.

    A failed leads fetch aborts the cycle by raising SyncError. A failed
    clicks fetch is logged and reported on the result instead.
    """
    raw_leads = await client.fetch_conversions()
    leads = normalize_leads(raw_leads)

    clicks: list[ClickEvent] | None = None
    clicks_error: str | None = None
    try:
        raw_clicks = await client.fetch_clicks()
    except SyncError as e:
        clicks_error = e.message
        logger.warning("clicks_fetch_failed", error=clicks_error)
    else:
        clicks = normalize_clicks(raw_clicks)

    logger.info(
        "sync_cycle_fetched",
        leads=len(leads),
        clicks=len(clicks) if clicks is not None else None,
    )
    return SyncResult(leads=leads, clicks=clicks, clicks_error=clicks_error)
