"""Dashboard analytics endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Query
from fastapi.responses import PlainTextResponse

from cpa_dashboard.api.deps import Dashboard, Worker
from cpa_dashboard.core.config import settings
from cpa_dashboard.models.dashboard import DashboardSnapshot
from cpa_dashboard.models.events import ClickEvent, LeadEvent
from cpa_dashboard.models.report import DerivedStats, SubIdReportRow
from cpa_dashboard.services.exporter import export_report_csv, report_filename

router = APIRouter(prefix=f"{settings.API_V1_PREFIX}/dashboard", tags=["dashboard"])

SubIdFilter = Query(None, description='Sub ID to filter stats by ("all" for every sub ID)')


@router.get("", response_model=DashboardSnapshot)
async def get_dashboard(
    dashboard: Dashboard,
    worker: Worker,
    sub_id: str | None = SubIdFilter,
) -> DashboardSnapshot:
    """Full dashboard view: stats, sub ID report, recent activity and sync status.

    Passing ``sub_id`` changes the active filter.
    """
    if sub_id is not None:
        dashboard.set_filter(sub_id)
    return dashboard.snapshot(in_flight=worker.in_flight)


@router.get("/stats", response_model=DerivedStats)
async def get_stats(dashboard: Dashboard, sub_id: str | None = SubIdFilter) -> DerivedStats:
    if sub_id is not None:
        dashboard.set_filter(sub_id)
    return dashboard.stats


@router.get("/clicks", response_model=list[ClickEvent])
async def list_clicks(dashboard: Dashboard) -> list[ClickEvent]:
    return list(dashboard.store.clicks)


@router.get("/leads", response_model=list[LeadEvent])
async def list_leads(dashboard: Dashboard) -> list[LeadEvent]:
    return list(dashboard.store.leads)


@router.get("/report", response_model=list[SubIdReportRow])
async def get_report(dashboard: Dashboard) -> list[SubIdReportRow]:
    """Per-sub-ID performance over all stored events, highest revenue first."""
    return dashboard.report


@router.get("/export", response_class=PlainTextResponse)
async def export_report(dashboard: Dashboard) -> PlainTextResponse:
    """Download the sub ID report as CSV."""
    filename = report_filename(datetime.now(UTC).date())
    return PlainTextResponse(
        content=export_report_csv(dashboard.report, settings.CURRENCY_SYMBOL),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
