"""Statistics and per-sub-ID report derived from the stored events."""

from collections.abc import Sequence
from decimal import Decimal
from typing import TypeVar

from cpa_dashboard.models.events import ClickEvent, LeadEvent, LeadStatus
from cpa_dashboard.models.report import DerivedStats, SubIdReportRow

ALL_SUB_IDS = "all"

E = TypeVar("E", ClickEvent, LeadEvent)


def conversion_rate(leads: int, clicks: int) -> float:
    """Leads per hundred clicks; zero when there are no clicks."""
    if clicks <= 0:
        return 0.0
    return leads / clicks * 100


def _approved_revenue(leads: Sequence[LeadEvent]) -> Decimal:
    return sum((lead.payout for lead in leads if lead.is_approved), Decimal("0"))


def compute_stats(
    clicks: Sequence[ClickEvent],
    leads: Sequence[LeadEvent],
    filter_sub_id: str = ALL_SUB_IDS,
) -> DerivedStats:
    """Headline statistics, restricted to one sub ID unless the filter is "all"."""
    if filter_sub_id != ALL_SUB_IDS:
        clicks = [c for c in clicks if c.sub_id == filter_sub_id]
        leads = [lead for lead in leads if lead.sub_id == filter_sub_id]

    statuses = [lead.status for lead in leads]
    return DerivedStats(
        total_clicks=len(clicks),
        total_leads=len(leads),
        total_revenue=_approved_revenue(leads),
        conversion_rate=conversion_rate(len(leads), len(clicks)),
        approved_leads=statuses.count(LeadStatus.APPROVED),
        pending_leads=statuses.count(LeadStatus.PENDING),
        rejected_leads=statuses.count(LeadStatus.REJECTED),
    )


def distinct_sub_ids(clicks: Sequence[ClickEvent], leads: Sequence[LeadEvent]) -> list[str]:
    """Every sub ID seen in either collection, in order of first appearance."""
    seen: dict[str, None] = {}
    for event in (*clicks, *leads):
        seen.setdefault(event.sub_id, None)
    return list(seen)


def build_sub_id_report(
    clicks: Sequence[ClickEvent],
    leads: Sequence[LeadEvent],
) -> list[SubIdReportRow]:
    """One row per sub ID, best earners first.

    Always covers the unfiltered collections. Sub IDs with equal revenue keep
    the order in which they were first seen.
    """
    click_counts: dict[str, int] = {}
    for click in clicks:
        click_counts[click.sub_id] = click_counts.get(click.sub_id, 0) + 1

    leads_by_sub_id: dict[str, list[LeadEvent]] = {}
    for lead in leads:
        leads_by_sub_id.setdefault(lead.sub_id, []).append(lead)

    rows = []
    for sub_id in distinct_sub_ids(clicks, leads):
        sub_clicks = click_counts.get(sub_id, 0)
        sub_leads = leads_by_sub_id.get(sub_id, [])
        rows.append(
            SubIdReportRow(
                sub_id=sub_id,
                clicks=sub_clicks,
                leads=len(sub_leads),
                approved=sum(1 for lead in sub_leads if lead.is_approved),
                revenue=_approved_revenue(sub_leads),
                conversion_rate=conversion_rate(len(sub_leads), sub_clicks),
            )
        )

    # list.sort is stable, so ties stay in discovery order
    rows.sort(key=lambda row: row.revenue, reverse=True)
    return rows


def aggregate(
    clicks: Sequence[ClickEvent],
    leads: Sequence[LeadEvent],
    filter_sub_id: str = ALL_SUB_IDS,
) -> tuple[DerivedStats, list[SubIdReportRow]]:
    """Compute filtered stats together with the unfiltered sub ID report."""
    return compute_stats(clicks, leads, filter_sub_id), build_sub_id_report(clicks, leads)


def recent(events: Sequence[E], limit: int) -> list[E]:
    """The first ``limit`` events in store order, for the overview panes."""
    return list(events[:limit])
