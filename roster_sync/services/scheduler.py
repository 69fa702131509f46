# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Scheduler.
Two independent cadences: a slow sweep interval gated by consumers and
backoff, and a fast drain tick that applies one queued member per firing.
"""

from typing import Optional

from roster_sync.core.config import settings
from roster_sync.core.logging import get_logger
from roster_sync.metrics.prometheus import SWEEPS_SKIPPED
from roster_sync.services.protocol import ConsumerSource, TimerFacility, TimerHandle
from roster_sync.services.sync_engine import SyncEngine

logger = get_logger(__name__)


class Scheduler:
    def __init__(
        self,
        engine: SyncEngine,
        timers: TimerFacility,
        consumers: ConsumerSource,
        update_interval: Optional[float] = None,
        drain_interval: Optional[float] = None,
    ) -> None:
        self._engine = engine
        self._timers = timers
        self._consumers = consumers
        self._update_interval = update_interval or settings.update_interval()
        self._drain_interval = drain_interval or settings.DRAIN_INTERVAL
        self._sweep_timer: Optional[TimerHandle] = None
        self._drain_timer: Optional[TimerHandle] = None

    @property
    def running(self) -> bool:
        return self._sweep_timer is not None

    @property
    def update_interval(self) -> float:
        return self._update_interval

    def start(self, sweep_now: bool = True) -> None:
        """Start both cadences (once for the app lifetime) and sweep immediately."""
        if self.running:
            return
        self._sweep_timer = self._timers.every(self._update_interval, self.on_interval)
        self._drain_timer = self._timers.every(self._drain_interval, self.on_drain_tick)
        logger.info(
            "Scheduler started: sweep every %ss, drain every %ss",
            self._update_interval, self._drain_interval,
        )
        if sweep_now:
            self._engine.sweep(trigger="startup")

    def stop(self) -> None:
        for handle in (self._sweep_timer, self._drain_timer):
            if handle is not None:
                handle.cancel()
        self._sweep_timer = None
        self._drain_timer = None

    def on_interval(self) -> int:
        """Scheduled sweep. Returns the number of rosters dispatched."""
        if self._consumers.connected_count() <= 0:
            SWEEPS_SKIPPED.labels(reason="no_consumers").inc()
            return 0

        if self._engine.backoff.active:
            SWEEPS_SKIPPED.labels(reason="backoff").inc()
            logger.info("Currently in backoff state, will not poll roster groups for members")
            return 0

        return self._engine.sweep(trigger="interval")

    async def on_drain_tick(self) -> Optional[str]:
        return await self._engine.drain()

    def trigger_now(self) -> int:
        """On-demand sweep; ignores consumer count and backoff."""
        return self._engine.sweep(trigger="manual")
