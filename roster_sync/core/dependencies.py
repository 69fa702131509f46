# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection: wire repositories and services.
"""

from roster_sync.repositories.consumer_registry import ConsumerRegistry
from roster_sync.repositories.permission_repository import InMemoryPermissionStore
from roster_sync.repositories.roster_registry import RosterRegistry
from roster_sync.services.backoff import BackoffController
from roster_sync.services.http_transport import HttpTransport
from roster_sync.services.scheduler import Scheduler
from roster_sync.services.sync_engine import SyncEngine
from roster_sync.services.timers import AsyncioTimers

# ── Singleton collaborators (in-memory stores) ──
_permission_store = InMemoryPermissionStore()
_consumer_registry = ConsumerRegistry()
_roster_registry = RosterRegistry(permissions=_permission_store)
_http_transport = HttpTransport()
_timers = AsyncioTimers()

# ── Service instances (with injected dependencies) ──
_backoff = BackoffController(timers=_timers)
_sync_engine = SyncEngine(
    registry=_roster_registry,
    transport=_http_transport,
    permissions=_permission_store,
    backoff=_backoff,
)
_scheduler = Scheduler(
    engine=_sync_engine,
    timers=_timers,
    consumers=_consumer_registry,
)


# ── FastAPI dependency functions ──
def get_sync_engine() -> SyncEngine:
    return _sync_engine


def get_scheduler() -> Scheduler:
    return _scheduler


def get_backoff() -> BackoffController:
    return _backoff


def get_roster_registry() -> RosterRegistry:
    return _roster_registry


def get_permission_store() -> InMemoryPermissionStore:
    return _permission_store


def get_consumer_registry() -> ConsumerRegistry:
    return _consumer_registry


def get_http_transport() -> HttpTransport:
    return _http_transport


def get_timers() -> AsyncioTimers:
    return _timers
