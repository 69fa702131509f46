# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Apply queue.
Strict FIFO of discovered members awaiting application.
"""

from collections import deque
from typing import Optional

from roster_sync.models.domain import MemberRecord


class ApplyQueue:
    def __init__(self) -> None:
        self._items: deque[MemberRecord] = deque()

    def __len__(self) -> int:
        return len(self._items)

    def enqueue(self, record: MemberRecord) -> None:
        self._items.append(record)

    def dequeue(self) -> Optional[MemberRecord]:
        if not self._items:
            return None
        return self._items.popleft()

    def snapshot(self) -> list[MemberRecord]:
        return list(self._items)

    def clear(self) -> None:
        self._items.clear()
