# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Roster registry.
Static mapping of roster id -> fetch URL and target local group, built once at
startup and read-only afterwards.
"""

import re
from typing import Optional

from roster_sync.core.config import settings
from roster_sync.core.errors import DuplicateRosterError
from roster_sync.core.logging import get_logger
from roster_sync.models.domain import RosterEntry
from roster_sync.services.protocol import PermissionSystem

logger = get_logger(__name__)

_NUMERIC_ID = re.compile(r"[0-9]+")
_MAX_GROUP_ID = 2**64 - 1


def is_group_id(identifier: str) -> bool:
    """True for identifiers that fit an unsigned 64-bit group id."""
    return bool(_NUMERIC_ID.fullmatch(identifier)) and int(identifier) <= _MAX_GROUP_ID


def build_fetch_url(identifier: str, base_url: Optional[str] = None) -> str:
    """Member list URL; numeric ids use the /gid/ form, vanity names /groups/."""
    kind = "gid" if is_group_id(identifier) else "groups"
    root = (base_url or settings.STEAM_COMMUNITY_URL).rstrip("/")
    return f"{root}/{kind}/{identifier}/memberslistxml/?xml=1"


class RosterRegistry:
    """In-memory roster storage, insertion ordered."""

    def __init__(self, permissions: PermissionSystem, base_url: Optional[str] = None) -> None:
        self._permissions = permissions
        self._base_url = base_url
        self._store: dict[str, RosterEntry] = {}

    # ── Read ──

    def get(self, roster_id: str) -> Optional[RosterEntry]:
        return self._store.get(roster_id)

    def all(self) -> list[RosterEntry]:
        return list(self._store.values())

    def count(self) -> int:
        return len(self._store)

    # ── Write ──

    async def register(self, roster_id: str, target_group: str) -> RosterEntry:
        """
        Register a roster and make sure its local group exists.
        Raises DuplicateRosterError if roster_id was already registered.
        """
        if roster_id in self._store:
            raise DuplicateRosterError(roster_id)

        if not await self._permissions.group_exists(target_group):
            await self._permissions.create_group(target_group, target_group, 0)
            logger.info("Created local group '%s'", target_group)

        entry = RosterEntry(
            roster_id=roster_id,
            fetch_url=build_fetch_url(roster_id, self._base_url),
            target_group=target_group,
        )
        self._store[roster_id] = entry
        logger.info(
            "Registered roster %s -> '%s' (%s)",
            roster_id, target_group, entry.fetch_url,
        )
        return entry

    # ── Bulk / internal ──

    def clear(self) -> None:
        self._store.clear()
