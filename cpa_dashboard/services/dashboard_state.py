"""Application state shared by the sync worker and the API."""

import structlog

from cpa_dashboard.core.config import settings
from cpa_dashboard.models.configuration import Configuration, ConfigurationInvalid
from cpa_dashboard.models.dashboard import (
    EMPTY_STATE_NO_DATA,
    EMPTY_STATE_UNCONFIGURED,
    DashboardSnapshot,
    SyncStatus,
)
from cpa_dashboard.models.report import DerivedStats, SubIdReportRow
from cpa_dashboard.services.aggregator import ALL_SUB_IDS, aggregate, distinct_sub_ids, recent
from cpa_dashboard.services.clickdealer.sync import SyncResult
from cpa_dashboard.services.config_store import ConfigStore
from cpa_dashboard.services.record_store import RecordStore

logger = structlog.get_logger()


class DashboardState:
    """Single owner of the dashboard's mutable state.

    All changes go through the methods below. Each store mutation and each
    filter change recomputes ``stats`` and ``report`` before returning, so
    readers always see figures for the latest committed data.
    """

    def __init__(
        self,
        config_store: ConfigStore,
        store: RecordStore | None = None,
        sync_mode: str | None = None,
    ):
        self.config_store = config_store
        self.store = store or RecordStore()
        self.sync_mode = sync_mode or settings.SYNC_MODE
        self.config: Configuration | None = None
        self.filter_sub_id = ALL_SUB_IDS
        self.live = False
        self.error: str | None = None
        self.warning: str | None = None
        self.stats = DerivedStats()
        self.report: list[SubIdReportRow] = []
        self.logger = logger.bind(component="dashboard_state")
        self._recompute()

    @property
    def configured(self) -> bool:
        return self.config is not None

    def _recompute(self) -> None:
        self.stats, self.report = aggregate(self.store.clicks, self.store.leads, self.filter_sub_id)

    async def load_configuration(self) -> Configuration | None:
        """Read the persisted configuration, once at startup."""
        self.config = await self.config_store.load()
        return self.config

    async def save_configuration(self, config: Configuration) -> None:
        """Validate and persist a configuration.

        Raises:
            ConfigurationInvalid: API key or affiliate ID is blank
        """
        config.ensure_complete()
        changed = self.config != config

        await self.config_store.save(config)
        self.config = config
        self.error = None
        self.warning = None

        if changed:
            # Events fetched with other credentials do not belong to this account
            self.store.reset()
            self._recompute()
            self.logger.info("record_window_reset", reason="configuration_changed")

    async def clear_configuration(self) -> None:
        await self.config_store.clear()
        self.config = None
        self.live = False
        self.error = None
        self.warning = None
        self.store.reset()
        self._recompute()

    def set_filter(self, sub_id: str | None) -> None:
        sub_id = sub_id or ALL_SUB_IDS
        if sub_id == self.filter_sub_id:
            return
        self.filter_sub_id = sub_id
        self._recompute()

    def set_live(self, enabled: bool) -> None:
        """Toggle live mode.

        Raises:
            ConfigurationInvalid: enabling live mode without a saved configuration
        """
        if enabled and not self.configured:
            raise ConfigurationInvalid("Configure API first")
        self.live = enabled

    def apply_sync(self, result: SyncResult) -> None:
        """Commit a successful cycle to the record store.

        Figures for the new collections are computed before anything is
        committed, so a batch that cannot be aggregated leaves the store,
        stats and report exactly as they were.
        """
        if self.sync_mode == "replace":
            clicks, leads = self.store.replaced(clicks=result.clicks, leads=result.leads)
        else:
            clicks, leads = self.store.merged(clicks=result.clicks, leads=result.leads)
        stats, report = aggregate(clicks, leads, self.filter_sub_id)

        self.store.replace(clicks=clicks, leads=leads)
        self.store.mark_synced(result.fetched_at)
        self.stats, self.report = stats, report
        self.error = None
        self.warning = result.clicks_error

    def record_failure(self, message: str) -> None:
        """Surface a failed cycle; stored data and last-synced time stay as they were."""
        self.error = message

    def status(self, in_flight: bool = False) -> SyncStatus:
        return SyncStatus(
            live=self.live,
            configured=self.configured,
            in_flight=in_flight,
            last_synced_at=self.store.last_synced_at,
            error=self.error,
            warning=self.warning,
        )

    def empty_state(self) -> str | None:
        if not self.configured:
            return EMPTY_STATE_UNCONFIGURED
        if self.store.is_empty:
            return EMPTY_STATE_NO_DATA
        return None

    def snapshot(self, in_flight: bool = False) -> DashboardSnapshot:
        clicks, leads = self.store.clicks, self.store.leads
        return DashboardSnapshot(
            filter_sub_id=self.filter_sub_id,
            stats=self.stats,
            report=self.report,
            sub_ids=distinct_sub_ids(clicks, leads),
            recent_clicks=recent(clicks, settings.RECENT_ACTIVITY_LIMIT),
            recent_leads=recent(leads, settings.RECENT_ACTIVITY_LIMIT),
            status=self.status(in_flight),
            empty_state=self.empty_state(),
        )
