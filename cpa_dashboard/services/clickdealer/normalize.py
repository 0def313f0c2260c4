"""Map raw ClickDealer records onto click and lead events.

ClickDealer is not consistent about field names across accounts and API
versions, so each field is looked up under every name we have seen it
under, falling back to a fixed default when none is present.
"""

import re
from collections.abc import Callable, Iterable
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, TypeVar

import structlog
from pydantic import TypeAdapter, ValidationError

from cpa_dashboard.models.events import (
    COUNTRY_FALLBACK,
    IP_FALLBACK,
    OFFER_FALLBACK,
    SUB_ID_FALLBACK,
    USER_AGENT_FALLBACK,
    ClickEvent,
    LeadEvent,
    LeadStatus,
)

logger = structlog.get_logger()

_NUMERIC_PREFIX = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
_datetime_adapter = TypeAdapter(datetime)

# Payouts of 10^16 or more are treated as garbage; sums must stay inside the decimal context
MAX_PAYOUT_EXPONENT = 15

T = TypeVar("T", ClickEvent, LeadEvent)


def _first(raw: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first truthy value among ``keys``."""
    for key in keys:
        value = raw.get(key)
        if value:
            return value
    return default


def _text(value: Any) -> str | None:
    return None if value is None else str(value)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 string or unix epoch; None when it cannot be read."""
    if value is None or value == "":
        return None
    try:
        return _datetime_adapter.validate_python(value)
    except ValidationError:
        return None


def parse_payout(value: Any) -> Decimal:
    """Read a payout leniently: leading number wins, garbage and negatives are zero."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    match = _NUMERIC_PREFIX.match(str(value))
    if not match:
        return Decimal("0")
    try:
        payout = Decimal(match.group(0).strip())
    except InvalidOperation:
        return Decimal("0")
    if not payout.is_finite() or payout < 0 or payout.adjusted() > MAX_PAYOUT_EXPONENT:
        return Decimal("0")
    return payout


def normalize_lead(raw: dict[str, Any]) -> LeadEvent | None:
    """Build a LeadEvent from a raw conversion, or None if it has no id."""
    lead_id = _first(raw, "conversion_id", "id")
    if lead_id is None:
        return None

    return LeadEvent(
        id=str(lead_id),
        timestamp=parse_timestamp(_first(raw, "timestamp", "created_at")),
        sub_id=str(_first(raw, "sub_id", "sub1", default=SUB_ID_FALLBACK)),
        click_id=_text(raw.get("click_id")),
        country=str(_first(raw, "country", default=COUNTRY_FALLBACK)),
        payout=parse_payout(_first(raw, "payout", "revenue", default=0)),
        status=LeadStatus.from_upstream(raw.get("status")),
        offer=str(_first(raw, "offer_name", "campaign_name", default=OFFER_FALLBACK)),
    )


def normalize_click(raw: dict[str, Any]) -> ClickEvent | None:
    """Build a ClickEvent from a raw click, or None if it has no id."""
    click_id = _first(raw, "click_id", "id")
    if click_id is None:
        return None

    return ClickEvent(
        id=str(click_id),
        timestamp=parse_timestamp(_first(raw, "timestamp", "created_at")),
        sub_id=str(_first(raw, "sub_id", "sub1", default=SUB_ID_FALLBACK)),
        country=str(_first(raw, "country", default=COUNTRY_FALLBACK)),
        user_agent=str(_first(raw, "user_agent", default=USER_AGENT_FALLBACK)),
        ip=str(_first(raw, "ip_address", "ip", default=IP_FALLBACK)),
    )


def _normalize_batch(
    raws: Iterable[Any], normalize: Callable[[dict[str, Any]], T | None], kind: str
) -> list[T]:
    events: list[T] = []
    skipped = 0
    for raw in raws:
        event = normalize(raw) if isinstance(raw, dict) else None
        if event is None:
            skipped += 1
            continue
        events.append(event)

    if skipped:
        logger.warning("clickdealer_records_skipped", kind=kind, skipped=skipped, kept=len(events))
    return events


def normalize_leads(raws: Iterable[Any]) -> list[LeadEvent]:
    return _normalize_batch(raws, normalize_lead, "lead")


def normalize_clicks(raws: Iterable[Any]) -> list[ClickEvent]:
    return _normalize_batch(raws, normalize_click, "click")
