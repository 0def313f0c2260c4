"""Click and lead events as reported by the affiliate network."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, computed_field

SUB_ID_FALLBACK = "N/A"
COUNTRY_FALLBACK = "Unknown"
OFFER_FALLBACK = "Unknown Offer"
USER_AGENT_FALLBACK = "Unknown"
IP_FALLBACK = "0.0.0.0"

# Regional indicator symbol "A" minus ord("A")
_FLAG_OFFSET = 127397
_UNKNOWN_FLAG = "🌐"

# Decimal in memory, plain JSON number on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


def flag_emoji(country_code: str) -> str:
    """Render a two-letter country code as its flag emoji."""
    code = country_code.strip().upper()
    if len(code) != 2 or not code.isascii() or not code.isalpha():
        return _UNKNOWN_FLAG
    return "".join(chr(_FLAG_OFFSET + ord(char)) for char in code)


class LeadStatus(str, Enum):
    """Approval state of a lead."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def from_upstream(cls, value: Any) -> "LeadStatus":
        """Map an upstream status string; anything unrecognized is pending."""
        if value == cls.APPROVED.value:
            return cls.APPROVED
        if value == cls.REJECTED.value:
            return cls.REJECTED
        return cls.PENDING


class ClickEvent(BaseModel):
    """A tracked click on an affiliate link."""

    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: datetime | None = None
    sub_id: str = SUB_ID_FALLBACK
    country: str = COUNTRY_FALLBACK
    user_agent: str = USER_AGENT_FALLBACK
    ip: str = IP_FALLBACK

    @computed_field  # type: ignore[prop-decorator]
    @property
    def country_flag(self) -> str:
        return flag_emoji(self.country)


class LeadEvent(BaseModel):
    """A conversion attributed to a click.

    Only ``status`` changes upstream over a lead's lifetime; a newer copy of
    the lead replaces the stored one as a whole.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: datetime | None = None
    sub_id: str = SUB_ID_FALLBACK
    click_id: str | None = None
    country: str = COUNTRY_FALLBACK
    payout: Money = Field(default=Decimal("0"), ge=0)
    status: LeadStatus = LeadStatus.PENDING
    offer: str = OFFER_FALLBACK

    @computed_field  # type: ignore[prop-decorator]
    @property
    def country_flag(self) -> str:
        return flag_emoji(self.country)

    @property
    def is_approved(self) -> bool:
        return self.status is LeadStatus.APPROVED
