# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Membership cache.
Every member ID seen since startup. Grows monotonically, no eviction.
"""


class MembershipCache:
    """In-memory set of known member IDs."""

    def __init__(self) -> None:
        self._ids: set[str] = set()

    def __contains__(self, member_id: str) -> bool:
        return member_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def add(self, member_id: str) -> bool:
        """Add an ID; returns False if it was already known."""
        if member_id in self._ids:
            return False
        self._ids.add(member_id)
        return True

    def clear(self) -> None:
        self._ids.clear()
