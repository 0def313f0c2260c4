"""ClickDealer API integration."""

from cpa_dashboard.services.clickdealer.client import (
    ApiStatusFailure,
    ClickDealerClient,
    NetworkFailure,
    ParseFailure,
    SyncError,
)
from cpa_dashboard.services.clickdealer.sync import SyncResult, fetch_cycle

__all__ = [
    "ApiStatusFailure",
    "ClickDealerClient",
    "NetworkFailure",
    "ParseFailure",
    "SyncError",
    "SyncResult",
    "fetch_cycle",
]
