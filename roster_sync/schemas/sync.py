# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Request / Response schemas: API contract definitions.
These are Pydantic models used ONLY at the controller (HTTP) boundary.
"""

from typing import Optional

from pydantic import BaseModel, Field


# ── Sync Schemas ──

class SyncTriggerResponse(BaseModel):
    message: str
    rosters: int = Field(..., ge=0, description="Rosters whose fetch chain was started")


class BackoffStatus(BaseModel):
    active: bool
    until: Optional[str] = None
    duration_seconds: float


class SyncStatusResponse(BaseModel):
    backoff: BackoffStatus
    queue_depth: int
    known_members: int
    rosters: int
    fetches_in_flight: int
    connected_consumers: int
    update_interval_seconds: float


# ── Membership Schemas ──

class MembershipResponse(BaseModel):
    member_id: str
    known: bool


class RosterResponse(BaseModel):
    roster_id: str
    fetch_url: str
    target_group: str


class GroupMembersResponse(BaseModel):
    group: str
    members: list[str]
    count: int


# ── Consumer Schemas ──

class ConsumerListResponse(BaseModel):
    connected: list[str]
    count: int


class ConsumerChangeResponse(BaseModel):
    consumer_id: str
    changed: bool
    connected_count: int
