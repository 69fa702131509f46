# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Connected consumers.
Scheduled sweeps are skipped while nobody is connected.
"""


class ConsumerRegistry:
    """In-memory set of connected consumer IDs."""

    def __init__(self) -> None:
        self._connected: set[str] = set()

    def connect(self, consumer_id: str) -> bool:
        """Mark a consumer connected; returns False if it already was."""
        if consumer_id in self._connected:
            return False
        self._connected.add(consumer_id)
        return True

    def disconnect(self, consumer_id: str) -> bool:
        if consumer_id not in self._connected:
            return False
        self._connected.discard(consumer_id)
        return True

    def connected_count(self) -> int:
        return len(self._connected)

    def get_all(self) -> list[str]:
        return sorted(self._connected)

    def clear(self) -> None:
        self._connected.clear()
