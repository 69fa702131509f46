# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Protocols for the collaborators the sync engine talks to.

Implementations (InMemoryPermissionStore, HttpTransport, AsyncioTimers,
ConsumerRegistry) are wired in roster_sync.core.dependencies; tests substitute
fakes with the same shape.
"""

from typing import Any, Callable, Optional, Protocol, runtime_checkable


@runtime_checkable
class PermissionSystem(Protocol):
    """Local permission groups and their users."""

    async def group_exists(self, name: str) -> bool:
        ...

    async def create_group(self, name: str, display_name: str, rank: int) -> None:
        ...

    async def user_has_group(self, user_id: str, name: str) -> bool:
        ...

    async def add_user_group(self, user_id: str, name: str) -> None:
        ...

    async def get_users_in_group(self, name: str) -> list[str]:
        ...

    async def remove_user_group(self, user_id: str, name: str) -> None:
        ...


@runtime_checkable
class HttpGetter(Protocol):
    """Outbound GET returning (status, body); failures come back as (0, None)."""

    async def get(self, url: str, timeout: float) -> tuple[int, Optional[str]]:
        ...


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


@runtime_checkable
class TimerFacility(Protocol):
    """Recurring and one-shot callbacks; a callback may return an awaitable."""

    def every(self, seconds: float, callback: Callable[[], Any]) -> TimerHandle:
        ...

    def once(self, seconds: float, callback: Callable[[], Any]) -> TimerHandle:
        ...


@runtime_checkable
class ConsumerSource(Protocol):
    def connected_count(self) -> int:
        ...
