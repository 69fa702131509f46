# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Membership synchronization engine.

Owns the membership cache and the apply queue. Fetch chains and drain steps
all run on one event loop, so the check/add/enqueue step (no await inside)
cannot interleave with another response handler. Drain steps are serialized
by a lock that enqueues never take.
"""

import asyncio
from typing import Any, Coroutine, Optional

from roster_sync.core.config import settings
from roster_sync.core.logging import get_logger
from roster_sync.metrics.prometheus import (
    APPLY_OUTCOMES,
    FETCH_FAILURES,
    KNOWN_MEMBERS,
    MEMBERS_DISCOVERED,
    PAGES_FETCHED,
    QUEUE_DEPTH,
    SWEEPS_TOTAL,
)
from roster_sync.models.domain import MemberRecord, PageResult
from roster_sync.repositories.apply_queue import ApplyQueue
from roster_sync.repositories.membership_cache import MembershipCache
from roster_sync.repositories.roster_registry import RosterRegistry
from roster_sync.services.backoff import BackoffController
from roster_sync.services.page_parser import parse_page
from roster_sync.services.protocol import HttpGetter, PermissionSystem

logger = get_logger(__name__)

REJECTED_STATUSES = frozenset({403, 429})


class SyncEngine:
    """Sweeps, paginated fetch chains, dedup and the rate-limited apply step."""

    def __init__(
        self,
        registry: RosterRegistry,
        transport: HttpGetter,
        permissions: PermissionSystem,
        backoff: BackoffController,
        cache: Optional[MembershipCache] = None,
        queue: Optional[ApplyQueue] = None,
        fetch_timeout: Optional[float] = None,
    ) -> None:
        self._registry = registry
        self._transport = transport
        self._permissions = permissions
        self._backoff = backoff
        self._cache = cache if cache is not None else MembershipCache()
        self._queue = queue if queue is not None else ApplyQueue()
        self._fetch_timeout = settings.FETCH_TIMEOUT if fetch_timeout is None else fetch_timeout
        self._drain_lock = asyncio.Lock()
        self._tasks: set[asyncio.Task] = set()

    @property
    def cache(self) -> MembershipCache:
        return self._cache

    @property
    def queue(self) -> ApplyQueue:
        return self._queue

    @property
    def backoff(self) -> BackoffController:
        return self._backoff

    @property
    def registry(self) -> RosterRegistry:
        return self._registry

    # ── Sweep ──

    def sweep(self, trigger: str = "interval") -> int:
        """Start page 1 of every roster in registration order. Returns count."""
        logger.info("Polling roster groups (trigger=%s)", trigger)
        SWEEPS_TOTAL.labels(trigger=trigger).inc()
        rosters = self._registry.all()
        for roster in rosters:
            self._spawn(self.fetch_page(roster.roster_id, roster.fetch_url, 1))
        return len(rosters)

    # ── Fetch chain ──

    async def fetch_page(self, roster_id: str, base_url: str, page: int) -> Optional[PageResult]:
        url = f"{base_url}&p={page}"
        try:
            status, body = await self._transport.get(url, self._fetch_timeout)
            return self.handle_response(status, body, roster_id, base_url)
        except Exception:
            logger.exception(
                "Fetching page %d of roster %s failed", page, roster_id,
                extra={"roster_id": roster_id},
            )
            return None

    def handle_response(
        self,
        status: int,
        body: Optional[str],
        roster_id: str,
        base_url: str,
    ) -> Optional[PageResult]:
        """Parse one page, admit new members and continue the chain if needed."""
        if status in REJECTED_STATUSES:
            logger.warning(
                "Steam is currently not allowing connections from this server "
                "(roster=%s, code=%d). Aborting this call",
                roster_id, status,
                extra={"roster_id": roster_id},
            )
            FETCH_FAILURES.labels(roster=roster_id, reason="rejected").inc()
            self._backoff.activate()
            return None

        if status != 200 or body is None:
            logger.warning(
                "Checking roster %s for members failed (code=%d). Aborting this call",
                roster_id, status,
                extra={"roster_id": roster_id},
            )
            FETCH_FAILURES.labels(roster=roster_id, reason="failed").inc()
            self._backoff.activate()
            return None

        result = parse_page(body)
        PAGES_FETCHED.labels(roster=roster_id).inc()
        admitted = self._admit(result.member_ids, roster_id)
        logger.debug(
            "Roster %s page %d/%d: %d ids, %d new",
            roster_id, result.current_page, result.total_pages,
            len(result.member_ids), admitted,
        )

        if result.has_next:
            self._spawn(self.fetch_page(roster_id, base_url, result.current_page + 1))
        return result

    def _admit(self, member_ids: list[str], roster_id: str) -> int:
        admitted = 0
        for member_id in member_ids:
            if not self._cache.add(member_id):
                continue
            self._queue.enqueue(MemberRecord(member_id=member_id, roster_id=roster_id))
            admitted += 1
        if admitted:
            MEMBERS_DISCOVERED.labels(roster=roster_id).inc(admitted)
            KNOWN_MEMBERS.set(len(self._cache))
            QUEUE_DEPTH.set(len(self._queue))
        return admitted

    # ── Apply queue ──

    async def drain(self) -> Optional[str]:
        """
        Apply at most one queued member.
        Returns "applied", "skipped", "failed", or None when the queue is empty.
        """
        if not len(self._queue):
            return None

        async with self._drain_lock:
            record = self._queue.dequeue()
            if record is None:
                return None
            QUEUE_DEPTH.set(len(self._queue))
            try:
                outcome = await self._apply(record)
            except Exception:
                logger.exception(
                    "An error occurred while applying %s from %s",
                    record.member_id, record.roster_id,
                )
                outcome = "failed"
            APPLY_OUTCOMES.labels(outcome=outcome).inc()
            return outcome

    async def _apply(self, record: MemberRecord) -> str:
        roster = self._registry.get(record.roster_id)
        if roster is None:
            raise KeyError(f"Roster '{record.roster_id}' is not registered")
        group = roster.target_group
        if await self._permissions.user_has_group(record.member_id, group):
            return "skipped"

        await self._permissions.add_user_group(record.member_id, group)
        logger.info("%s from %s added to '%s' group", record.member_id, record.roster_id, group)
        return "applied"

    async def remove_stale_members(self) -> int:
        """
        Revoke local groups from users no longer on their roster.

        Not implemented: there is no policy yet for when a member missing from
        one sweep counts as gone. Nothing calls this and it never writes.
        """
        logger.debug("Stale member removal is disabled")
        return 0

    # ── Queries ──

    def is_known_member(self, member_id: str) -> bool:
        return member_id in self._cache

    def status(self) -> dict[str, Any]:
        return {
            "backoff": self._backoff.status(),
            "queue_depth": len(self._queue),
            "known_members": len(self._cache),
            "rosters": self._registry.count(),
            "fetches_in_flight": len(self._tasks),
        }

    # ── Task bookkeeping ──

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def join(self) -> None:
        """Wait until every fetch chain, continuations included, has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def cancel_pending(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*list(self._tasks), return_exceptions=True)
