"""In-memory window of click and lead events."""

from collections.abc import Iterable
from datetime import datetime
from typing import TypeVar

from cpa_dashboard.models.events import ClickEvent, LeadEvent

E = TypeVar("E", ClickEvent, LeadEvent)

Collections = tuple[tuple[ClickEvent, ...], tuple[LeadEvent, ...]]


def _merge_by_id(current: tuple[E, ...], incoming: Iterable[E]) -> tuple[E, ...]:
    """Overwrite known ids in place and append unseen ones in arrival order."""
    merged: dict[str, E] = {event.id: event for event in current}
    for event in incoming:
        merged[event.id] = event
    return tuple(merged.values())


class RecordStore:
    """Holds the current click and lead collections in upstream order.

    The store does not deduplicate on its own; callers pick ``replace`` or
    ``merge`` depending on how they treat a fresh upstream batch. The
    ``replaced``/``merged`` variants compute the outcome without committing it.
    """

    def __init__(self) -> None:
        self._clicks: tuple[ClickEvent, ...] = ()
        self._leads: tuple[LeadEvent, ...] = ()
        self.last_synced_at: datetime | None = None

    @property
    def clicks(self) -> tuple[ClickEvent, ...]:
        return self._clicks

    @property
    def leads(self) -> tuple[LeadEvent, ...]:
        return self._leads

    @property
    def is_empty(self) -> bool:
        return not self._clicks and not self._leads

    def replaced(
        self,
        clicks: Iterable[ClickEvent] | None = None,
        leads: Iterable[LeadEvent] | None = None,
    ) -> Collections:
        return (
            self._clicks if clicks is None else tuple(clicks),
            self._leads if leads is None else tuple(leads),
        )

    def merged(
        self,
        clicks: Iterable[ClickEvent] | None = None,
        leads: Iterable[LeadEvent] | None = None,
    ) -> Collections:
        return (
            self._clicks if clicks is None else _merge_by_id(self._clicks, clicks),
            self._leads if leads is None else _merge_by_id(self._leads, leads),
        )

    def replace(
        self,
        clicks: Iterable[ClickEvent] | None = None,
        leads: Iterable[LeadEvent] | None = None,
    ) -> None:
        """Swap in new collections; a ``None`` argument leaves that side untouched."""
        self._clicks, self._leads = self.replaced(clicks, leads)

    def merge(
        self,
        clicks: Iterable[ClickEvent] | None = None,
        leads: Iterable[LeadEvent] | None = None,
    ) -> None:
        """Merge new records by id, keeping records the batch no longer contains."""
        self._clicks, self._leads = self.merged(clicks, leads)

    def mark_synced(self, at: datetime) -> None:
        self.last_synced_at = at

    def reset(self) -> None:
        """Discard the whole window, e.g. after the API configuration changed."""
        self._clicks = ()
        self._leads = ()
        self.last_synced_at = None
