"""Cancellable periodic tick sources."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class TickHandle(Protocol):
    """Handle to a repeating action. Cancelling it stops all further calls."""

    @property
    def cancelled(self) -> bool: ...

    def cancel(self) -> None: ...


class TickScheduler(Protocol):
    """Schedules a callback to run repeatedly every ``interval`` seconds."""

    def schedule(self, interval: float, callback: Callable[[], None]) -> TickHandle: ...


class AsyncioTickHandle:
    """Tick handle backed by an asyncio task running a sleep loop."""

    def __init__(self, interval: float, callback: Callable[[], None]):
        self._interval = interval
        self._callback = callback
        self._cancelled = False
        self._task: asyncio.Task = asyncio.get_running_loop().create_task(self._tick_loop())

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._task.cancel()

    async def _tick_loop(self) -> None:
        """Sleep one interval, then fire the callback, until cancelled.

        A callback that raises is logged and the loop keeps ticking.
        """
        try:
            while not self._cancelled:
                await asyncio.sleep(self._interval)

                # A cancel() issued while the sleep was completing must win
                if self._cancelled:
                    break

                try:
                    self._callback()
                except Exception as e:
                    logger.error(f"Error in tick callback: {e}")

        except asyncio.CancelledError:
            pass


class AsyncioTickScheduler:
    """Default scheduler: one asyncio task per tick handle.

    Must be used from code running inside an asyncio event loop.
    """

    def schedule(self, interval: float, callback: Callable[[], None]) -> AsyncioTickHandle:
        return AsyncioTickHandle(interval, callback)
