"""Periodic reload notifications fanned out to connected browsers."""
from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Set

LOGGER = logging.getLogger(__name__)


class ReloadBroadcaster:
    """Broadcast a tick to every subscriber; the timer never waits on readers."""

    def __init__(self) -> None:
        self._subscribers: Set[asyncio.Queue[int]] = set()
        self._ticks = 0

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @property
    def ticks(self) -> int:
        return self._ticks

    def notify(self) -> int:
        self._ticks += 1
        for queue in list(self._subscribers):
            queue.put_nowait(self._ticks)
        return len(self._subscribers)

    async def subscribe(self) -> AsyncIterator[int]:
        queue: asyncio.Queue[int] = asyncio.Queue()
        self._subscribers.add(queue)
        try:
            while True:
                yield await queue.get()
        finally:
            self._subscribers.discard(queue)

    async def run(self, interval: float) -> None:
        LOGGER.debug("Reload timer started (every %.1fs)", interval)
        while True:
            await asyncio.sleep(interval)
            listeners = self.notify()
            LOGGER.debug("Reload tick %d sent to %d listener(s)", self._ticks, listeners)
