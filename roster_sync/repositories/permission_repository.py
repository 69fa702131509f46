# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Local permission groups.
In-memory implementation of the permission system used by the sync engine.
NO business rules here: pure CRUD.
"""

from typing import Any, Optional


class InMemoryPermissionStore:
    """Groups keyed by name; each holds a display name, a rank and its users."""

    def __init__(self) -> None:
        self._groups: dict[str, dict[str, Any]] = {}

    # ── Read ──

    async def group_exists(self, name: str) -> bool:
        return name in self._groups

    async def user_has_group(self, user_id: str, name: str) -> bool:
        group = self._groups.get(name)
        return group is not None and user_id in group["users"]

    async def get_users_in_group(self, name: str) -> list[str]:
        group = self._groups.get(name)
        if group is None:
            return []
        return sorted(group["users"])

    def get_group(self, name: str) -> Optional[dict[str, Any]]:
        return self._groups.get(name)

    # ── Write ──

    async def create_group(self, name: str, display_name: str, rank: int) -> None:
        self._groups.setdefault(
            name, {"title": display_name, "rank": rank, "users": set()}
        )

    async def add_user_group(self, user_id: str, name: str) -> None:
        group = self._groups.get(name)
        if group is None:
            raise KeyError(f"No permission group named '{name}'")
        group["users"].add(user_id)

    async def remove_user_group(self, user_id: str, name: str) -> None:
        group = self._groups.get(name)
        if group is not None:
            group["users"].discard(user_id)

    # ── Bulk / internal ──

    def clear(self) -> None:
        self._groups.clear()
