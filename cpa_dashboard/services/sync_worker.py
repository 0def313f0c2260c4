"""Background polling of the ClickDealer API.

While live mode is on, the worker:
1. Runs a sync cycle immediately
2. Waits for the polling interval (or until woken by a live toggle)
3. Repeats until live mode is switched off or the configuration is removed

Only one cycle is ever in flight. A trigger that arrives during a cycle is
folded into a single follow-up cycle instead of starting a second fetch.
Switching live mode off stops future cycles but lets an in-flight cycle
finish, and its result is still applied.
"""

import asyncio
import contextlib
from collections.abc import Callable

import structlog

from cpa_dashboard.core.config import settings
from cpa_dashboard.models.configuration import Configuration
from cpa_dashboard.services.clickdealer.client import ClickDealerClient, SyncError
from cpa_dashboard.services.clickdealer.sync import fetch_cycle
from cpa_dashboard.services.dashboard_state import DashboardState

logger = structlog.get_logger()

FALLBACK_ERROR_MESSAGE = "Failed to fetch data from ClickDealer"

ClientFactory = Callable[[Configuration], ClickDealerClient]


class SyncWorker:
    """Schedules sync cycles for the dashboard state."""

    def __init__(
        self,
        state: DashboardState,
        client_factory: ClientFactory = ClickDealerClient,
        interval: float | None = None,
    ):
        """Initialize the sync worker.

        Args:
            state: Dashboard state the cycles are applied to
            client_factory: Builds an API client for a configuration
            interval: Seconds between cycles, defaults to SYNC_INTERVAL_SECONDS
        """
        self.state = state
        self.client_factory = client_factory
        self.interval = interval if interval is not None else settings.SYNC_INTERVAL_SECONDS
        self.logger = logger.bind(component="sync_worker")
        self._task: asyncio.Task[None] | None = None
        self._wake = asyncio.Event()
        self._in_flight = False
        self._rerun_requested = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Resume polling if the state is already live and configured."""
        if self._should_run():
            self._ensure_loop()

    async def stop(self) -> None:
        """Cancel the polling loop; used on application shutdown."""
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        self.logger.info("Sync worker stopped")

    def set_live(self, enabled: bool) -> None:
        """Switch live mode on or off.

        Raises:
            ConfigurationInvalid: enabling without a saved configuration
        """
        self.state.set_live(enabled)
        if enabled and not self.running:
            self._ensure_loop()
        else:
            # Wake a sleeping loop so it either runs right away or notices it should exit
            self._wake.set()

    async def trigger(self) -> bool:
        """Run a cycle now.

        Returns:
            True if this call ran the cycle, False if it was folded into the
            cycle already in flight or there is no configuration.
        """
        if not self.state.configured:
            return False

        if self._in_flight:
            self._rerun_requested = True
            self.logger.debug("Sync cycle in flight, queued a follow-up")
            return False

        self._in_flight = True
        try:
            while True:
                self._rerun_requested = False
                await self._run_cycle()
                if not self._rerun_requested or not self.state.configured:
                    break
        finally:
            self._in_flight = False
        return True

    def _should_run(self) -> bool:
        return self.state.live and self.state.configured

    def _ensure_loop(self) -> None:
        if not self.running:
            self._wake.clear()
            self._task = asyncio.create_task(self._run_loop())

    async def _run_loop(self) -> None:
        """Main loop: one cycle per interval while live."""
        self.logger.info("Sync worker started", interval=self.interval)
        while self._should_run():
            try:
                await self.trigger()
            except Exception:
                self.logger.exception("Error in sync worker loop")

            if not self._should_run():
                break

            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(self._wake.wait(), timeout=self.interval)
            self._wake.clear()
        self.logger.info("Sync worker idle", live=self.state.live, configured=self.state.configured)

    async def _run_cycle(self) -> None:
        config = self.state.config
        if config is None:
            return

        log = self.logger.bind(affiliate_id=config.affiliate_id)
        try:
            async with self.client_factory(config) as client:
                result = await fetch_cycle(client)
        except SyncError as e:
            log.warning("sync_cycle_failed", error=e.message, error_type=type(e).__name__)
            self.state.record_failure(e.message)
            return
        except Exception:
            log.exception("sync_cycle_crashed")
            self.state.record_failure(FALLBACK_ERROR_MESSAGE)
            return

        if self.state.config != config:
            log.info("sync_result_discarded", reason="configuration_changed")
            return

        try:
            self.state.apply_sync(result)
        except ArithmeticError:
            log.exception("sync_result_rejected")
            self.state.record_failure(FALLBACK_ERROR_MESSAGE)
            return

        log.info(
            "sync_cycle_applied",
            clicks=len(self.state.store.clicks),
            leads=len(self.state.store.leads),
            clicks_error=result.clicks_error,
        )
