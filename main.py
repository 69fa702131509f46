# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Roster Sync Service
===================
Polls Steam community group member lists on an interval and grants every
discovered member the configured local permission group, one member per
drain tick. Rejections from Steam suspend polling for a backoff period.

Port: 8005
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from roster_sync.controllers import consumer_controller, sync_controller, system_controller
from roster_sync.core.config import settings
from roster_sync.core.dependencies import (
    get_backoff,
    get_http_transport,
    get_roster_registry,
    get_scheduler,
    get_sync_engine,
    get_timers,
)
from roster_sync.core.logging import get_logger
from roster_sync.middleware import MetricsMiddleware, RequestIDMiddleware

logger = get_logger(__name__)


async def register_rosters() -> int:
    """Register every configured roster. Duplicates abort startup."""
    registry = get_roster_registry()
    for roster in settings.rosters():
        await registry.register(roster.steam, roster.local_group)
    return registry.count()


# ── Lifespan ──────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    """Register rosters, start the timers; stop everything on shutdown."""
    count = await register_rosters()
    get_http_transport().open()
    get_scheduler().start()
    logger.info("Roster sync service starting, %d rosters registered", count)
    yield
    get_scheduler().stop()
    get_backoff().cancel()
    await get_sync_engine().cancel_pending()
    get_timers().cancel_all()
    await get_http_transport().aclose()
    logger.info(
        "Roster sync service shutting down: %d known members, %d still queued",
        len(get_sync_engine().cache), len(get_sync_engine().queue),
    )


# ── FastAPI App ───────────────────────────────────────────────────────────
app = FastAPI(
    title="Roster Sync Service",
    description="Mirrors Steam group membership into local permission groups.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)

app.include_router(system_controller.router)
app.include_router(sync_controller.router)
app.include_router(consumer_controller.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.SERVICE_PORT, log_level="info")
