# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Backoff controller.

Two states, Normal and Backoff. Any rejected or failed fetch enters Backoff;
a single one-shot timer scheduled on entry returns to Normal. Nothing else
clears it, a successful fetch included.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from roster_sync.core.config import settings
from roster_sync.core.logging import get_logger
from roster_sync.metrics.prometheus import BACKOFF_ACTIVATIONS, BACKOFF_ACTIVE
from roster_sync.services.protocol import TimerFacility, TimerHandle

logger = get_logger(__name__)


class BackoffController:
    def __init__(self, timers: TimerFacility, duration: Optional[float] = None) -> None:
        self._timers = timers
        self._duration = settings.BACKOFF_SECONDS if duration is None else duration
        self._active = False
        self._until: Optional[datetime] = None
        self._timer: Optional[TimerHandle] = None

    @property
    def active(self) -> bool:
        return self._active

    def activate(self) -> bool:
        """Enter Backoff. Returns False (and does nothing) if already there."""
        if self._active:
            return False
        self._active = True
        self._until = datetime.now(timezone.utc) + timedelta(seconds=self._duration)
        self._timer = self._timers.once(self._duration, self.expire)
        BACKOFF_ACTIVE.set(1)
        BACKOFF_ACTIVATIONS.inc()
        logger.info("Backoff state enabled for %ss", self._duration)
        return True

    def expire(self) -> None:
        self._active = False
        self._until = None
        self._timer = None
        BACKOFF_ACTIVE.set(0)
        logger.info("Backoff state disabled")

    def cancel(self) -> None:
        """Drop the pending recovery timer (shutdown only)."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def status(self) -> dict[str, Any]:
        return {
            "active": self._active,
            "until": self._until.isoformat() if self._until else None,
            "duration_seconds": self._duration,
        }
