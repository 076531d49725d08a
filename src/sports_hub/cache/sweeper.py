from __future__ import annotations

import asyncio
import logging

from sports_hub.cache.tiered import TieredCache

logger = logging.getLogger(__name__)


class CacheSweeper:
    """Runs `TieredCache.sweep` on a fixed interval, independent of traffic."""

    def __init__(self, cache: TieredCache, *, interval_s: float) -> None:
        self._cache = cache
        self._interval_s = interval_s
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name="cache-sweeper")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval_s)
            try:
                self._cache.sweep()
            except Exception:
                # Keep the loop alive; the next tick retries.
                logger.exception("Cache sweep crashed")
