"""Dashboard view handed to the presentation layer."""

from datetime import datetime

from pydantic import BaseModel

from cpa_dashboard.models.events import ClickEvent, LeadEvent
from cpa_dashboard.models.report import DerivedStats, SubIdReportRow

EMPTY_STATE_UNCONFIGURED = "Configure API first"
EMPTY_STATE_NO_DATA = "No data yet. Start generating traffic."


class SyncStatus(BaseModel):
    """Where polling stands right now."""

    live: bool
    configured: bool
    in_flight: bool = False
    last_synced_at: datetime | None = None
    error: str | None = None
    warning: str | None = None


class DashboardSnapshot(BaseModel):
    """Everything the dashboard renders, computed from one store version."""

    filter_sub_id: str
    stats: DerivedStats
    report: list[SubIdReportRow]
    sub_ids: list[str]
    recent_clicks: list[ClickEvent]
    recent_leads: list[LeadEvent]
    status: SyncStatus
    empty_state: str | None = None
