# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Sync endpoints: on-demand sweep, status, membership queries.
Thin HTTP layer: delegates ALL logic to the Scheduler and SyncEngine.
"""

from fastapi import APIRouter, Depends, HTTPException

from roster_sync.core.dependencies import (
    get_consumer_registry,
    get_permission_store,
    get_roster_registry,
    get_scheduler,
    get_sync_engine,
)
from roster_sync.repositories.consumer_registry import ConsumerRegistry
from roster_sync.repositories.permission_repository import InMemoryPermissionStore
from roster_sync.repositories.roster_registry import RosterRegistry
from roster_sync.schemas.sync import (
    GroupMembersResponse,
    MembershipResponse,
    RosterResponse,
    SyncStatusResponse,
    SyncTriggerResponse,
)
from roster_sync.services.scheduler import Scheduler
from roster_sync.services.sync_engine import SyncEngine

router = APIRouter(prefix="/api/v1", tags=["Sync"])


@router.post("/sync", response_model=SyncTriggerResponse, status_code=202)
async def trigger_sync(scheduler: Scheduler = Depends(get_scheduler)):
    """Check for new roster members now, regardless of backoff or consumers."""
    dispatched = scheduler.trigger_now()
    return {"message": "Checking for new roster members...", "rosters": dispatched}


@router.get("/sync/status", response_model=SyncStatusResponse)
def sync_status(
    engine: SyncEngine = Depends(get_sync_engine),
    scheduler: Scheduler = Depends(get_scheduler),
    consumers: ConsumerRegistry = Depends(get_consumer_registry),
):
    return {
        **engine.status(),
        "connected_consumers": consumers.connected_count(),
        "update_interval_seconds": scheduler.update_interval,
    }


@router.get("/members/{member_id}", response_model=MembershipResponse)
def get_membership(member_id: str, engine: SyncEngine = Depends(get_sync_engine)):
    """Whether member_id has been seen on any roster since startup."""
    return {"member_id": member_id, "known": engine.is_known_member(member_id)}


@router.get("/rosters", response_model=list[RosterResponse])
def list_rosters(registry: RosterRegistry = Depends(get_roster_registry)):
    return [entry.model_dump() for entry in registry.all()]


@router.get("/groups/{group}/members", response_model=GroupMembersResponse)
async def list_group_members(
    group: str,
    store: InMemoryPermissionStore = Depends(get_permission_store),
):
    if not await store.group_exists(group):
        raise HTTPException(status_code=404, detail=f"Group '{group}' not found")
    members = await store.get_users_in_group(group)
    return {"group": group, "members": members, "count": len(members)}
