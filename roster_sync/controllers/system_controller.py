# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: System endpoints: health, readiness, metrics.
Pure HTTP layer: no business logic.
"""

from datetime import datetime, timezone

from fastapi import APIRouter
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from roster_sync.core.config import settings
from roster_sync.core.dependencies import get_roster_registry, get_scheduler, get_sync_engine

router = APIRouter(tags=["System"])


@router.get("/health")
def health_check():
    """Liveness probe for Docker and orchestration."""
    engine = get_sync_engine()
    return {
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "rosters_count": engine.registry.count(),
        "backoff_active": engine.backoff.active,
    }


@router.get("/health/ready")
def readiness_check():
    """Readiness probe: rosters registered and scheduler running."""
    return {
        "status": "ready",
        "service": settings.SERVICE_NAME,
        "rosters_loaded": get_roster_registry().count() > 0,
        "scheduler_running": get_scheduler().running,
    }


@router.get("/metrics")
def prometheus_metrics():
    """Expose Prometheus metrics in OpenMetrics format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
