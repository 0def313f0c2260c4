"""Derived dashboard figures."""

from decimal import Decimal

from pydantic import BaseModel, computed_field

from cpa_dashboard.models.events import Money

# Sub IDs converting above this percentage are highlighted in the report
HIGH_PERFORMER_CONVERSION_RATE = 5.0


class DerivedStats(BaseModel):
    """Headline statistics for the active sub ID filter."""

    total_clicks: int = 0
    total_leads: int = 0
    total_revenue: Money = Decimal("0")
    conversion_rate: float = 0.0
    approved_leads: int = 0
    pending_leads: int = 0
    rejected_leads: int = 0


class SubIdReportRow(BaseModel):
    """Performance of a single sub ID."""

    sub_id: str
    clicks: int = 0
    leads: int = 0
    approved: int = 0
    revenue: Money = Decimal("0")
    conversion_rate: float = 0.0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_high_performer(self) -> bool:
        return self.conversion_rate > HIGH_PERFORMER_CONVERSION_RATE
