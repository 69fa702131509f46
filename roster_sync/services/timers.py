# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Timer facility on the running asyncio loop.

every() fires a callback on a fixed cadence, once() fires it a single time.
Callbacks run on the event loop and may be coroutine functions. A failing
callback is logged and the recurring timer keeps going.
"""

import asyncio
import inspect
from typing import Any, Callable

from roster_sync.core.logging import get_logger

logger = get_logger(__name__)


async def invoke(callback: Callable[[], Any]) -> Any:
    """Call callback, awaiting the result if it is awaitable."""
    result = callback()
    if inspect.isawaitable(result):
        result = await result
    return result


class TimerHandle:
    def __init__(self, task: asyncio.Task) -> None:
        self._task = task

    @property
    def active(self) -> bool:
        return not self._task.done()

    def cancel(self) -> None:
        self._task.cancel()


class AsyncioTimers:
    """Timers backed by tasks on the current event loop."""

    def __init__(self) -> None:
        self._handles: set[TimerHandle] = set()

    def every(self, seconds: float, callback: Callable[[], Any]) -> TimerHandle:
        async def _loop() -> None:
            while True:
                await asyncio.sleep(seconds)
                await self._fire(callback)

        return self._track(asyncio.create_task(_loop()))

    def once(self, seconds: float, callback: Callable[[], Any]) -> TimerHandle:
        async def _later() -> None:
            await asyncio.sleep(seconds)
            await self._fire(callback)

        return self._track(asyncio.create_task(_later()))

    def cancel_all(self) -> None:
        for handle in list(self._handles):
            handle.cancel()
        self._handles.clear()

    def _track(self, task: asyncio.Task) -> TimerHandle:
        handle = TimerHandle(task)
        self._handles.add(handle)
        task.add_done_callback(lambda _t: self._handles.discard(handle))
        return handle

    @staticmethod
    async def _fire(callback: Callable[[], Any]) -> None:
        try:
            await invoke(callback)
        except Exception:
            logger.exception("Timer callback %r failed", callback)
