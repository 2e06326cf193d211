"""Background periodic sync.

Runs ``SyncOrchestrator.run()`` every ``interval_seconds`` as an asyncio
task owned by the app lifespan.  Runs started by the scheduler are awaited
one after another, so they never overlap each other; a manual trigger
through the API may still overlap and relies on the upsert's dedup key.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from hikvision_sync.device.sync.orchestrator import SyncOrchestrator, SyncResult

logger = logging.getLogger("hikvision_sync.device.sync.scheduler")


class SyncScheduler:
    """Periodically trigger device syncs.

    Usage::

        scheduler = SyncScheduler(orchestrator, interval_seconds=300)
        scheduler.start()
        ...
        await scheduler.stop()
    """

    def __init__(self, orchestrator: SyncOrchestrator, interval_seconds: int) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._orchestrator = orchestrator
        self._interval = interval_seconds
        self._task: asyncio.Task | None = None
        self.last_result: SyncResult | None = None
        self.last_sync_at: datetime | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.create_task(self._loop(), name="hikvision-sync")
        logger.info("SyncScheduler: syncing every %d seconds", self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("SyncScheduler: stopped")

    async def run_once(self) -> SyncResult:
        """Run a single sync and remember its result."""
        result = await self._orchestrator.run()
        self.last_result = result
        self.last_sync_at = datetime.now(timezone.utc)
        if not result.success:
            logger.warning("SyncScheduler: sync failed: %s", result.error)
        return result

    def should_sync(self, now: datetime | None = None) -> bool:
        """Return True if the interval has elapsed since the last run."""
        if self.last_sync_at is None:
            return True
        now = now or datetime.now(timezone.utc)
        return (now - self.last_sync_at).total_seconds() >= self._interval

    async def _loop(self) -> None:
        while True:
            if self.should_sync():
                await self.run_once()
            await asyncio.sleep(self._interval)
