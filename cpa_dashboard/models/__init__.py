"""Dashboard domain models."""

from cpa_dashboard.models.configuration import Configuration, ConfigurationInvalid, MaskedConfiguration
from cpa_dashboard.models.events import ClickEvent, LeadEvent, LeadStatus
from cpa_dashboard.models.report import DerivedStats, SubIdReportRow

__all__ = [
    "ClickEvent",
    "Configuration",
    "ConfigurationInvalid",
    "DerivedStats",
    "LeadEvent",
    "LeadStatus",
    "MaskedConfiguration",
    "SubIdReportRow",
]
