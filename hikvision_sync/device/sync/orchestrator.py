"""One full device → database synchronization cycle.

Workflow:
1. Check device and database settings
2. Resolve the [start, now) window in device time
3. Fetch every entry in the window from the device
4. Normalize each entry
5. Upsert each event, one at a time, tallying the outcomes

A failed fetch aborts the run before anything is written.  Per-record
failures (rejected entry, store error) are logged, counted in ``failed``
and never stop the batch, so ``inserted + updated + skipped + failed``
always equals ``total``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from hikvision_sync.config import Settings
from hikvision_sync.device.base import CanonicalEvent, RawDeviceLogEntry
from hikvision_sync.device.client import HikvisionClient
from hikvision_sync.device.normalizer import normalize_entry
from hikvision_sync.device.sync.upserter import EventUpserter, UpsertOutcome
from hikvision_sync.device.time_window import resolve_window
from hikvision_sync.errors import InvalidEventError, StoreWriteError
from hikvision_sync.services.database import Database

logger = logging.getLogger("hikvision_sync.device.sync.orchestrator")

SUCCESS_MESSAGE = "Hikvision logs synced successfully."
FAILURE_MESSAGE = "Failed to sync Hikvision logs."


@dataclass
class SyncResult:
    """Outcome of one sync run.

    Attributes:
        success:      False if the run aborted before persisting.
        message:      Human-readable summary.
        inserted:     New rows created.
        updated:      Existing rows whose non-key fields changed.
        skipped:      Entries already stored unchanged (or lost a key race).
        failed:       Entries rejected by the normalizer or the store.
        total:        Entries fetched from the device.
        error:        Underlying cause when ``success`` is False.
        window_start: Start boundary sent to the device.
        window_end:   End boundary sent to the device.
    """

    success: bool = True
    message: str = SUCCESS_MESSAGE
    inserted: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    total: int = 0
    error: str | None = None
    window_start: str | None = None
    window_end: str | None = None

    def record(self, outcome: UpsertOutcome) -> None:
        if outcome is UpsertOutcome.inserted:
            self.inserted += 1
        elif outcome is UpsertOutcome.updated:
            self.updated += 1
        else:
            self.skipped += 1

    @classmethod
    def failure(cls, exc: BaseException) -> "SyncResult":
        return cls(success=False, message=FAILURE_MESSAGE, error=str(exc) or type(exc).__name__)


class SyncOrchestrator:
    """Compose window resolution, fetch, normalization and upsert.

    Usage::

        orchestrator = SyncOrchestrator(settings, database)
        result = await orchestrator.run()
    """

    def __init__(
        self,
        settings: Settings,
        database: Database,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            settings:    Device and store configuration.
            database:    Store client owned by the caller.
            http_client: Optional pre-configured httpx client (for testing).
        """
        self._settings = settings
        self._database = database
        self._http_client = http_client

    def build_client(self) -> HikvisionClient:
        s = self._settings
        return HikvisionClient(
            host=s.hikvision_ip,
            username=s.hikvision_username,
            password=s.hikvision_password,
            page_size=s.hikvision_page_size,
            max_pages=s.hikvision_max_pages,
            timeout=s.hikvision_timeout_seconds,
            http_client=self._http_client,
        )

    async def run(self) -> SyncResult:
        """Run one synchronization cycle.

        Never raises; failures before persistence come back as a
        ``SyncResult`` with ``success=False``.
        """
        try:
            self._settings.require_device()
            self._settings.require_database()

            window = resolve_window(self._settings.hikvision_start_time)
            logger.info(
                "HIKVISION CONFIG :: ip=%s username=%s password_length=%d start=%s end=%s",
                self._settings.hikvision_ip,
                self._settings.hikvision_username,
                len(self._settings.hikvision_password),
                window.start,
                window.end,
            )

            entries = await self.build_client().fetch_events(window)
            result = await self._persist(entries)
        except Exception as exc:
            logger.error("Hikvision sync error: %s", exc)
            return SyncResult.failure(exc)

        result.window_start = window.start
        result.window_end = window.end
        logger.info(
            "Sync complete: %d fetched → %d inserted, %d updated, %d skipped, %d failed",
            result.total,
            result.inserted,
            result.updated,
            result.skipped,
            result.failed,
        )
        return result

    async def _persist(self, entries: list[RawDeviceLogEntry]) -> SyncResult:
        result = SyncResult(total=len(entries))
        if not entries:
            return result

        async with self._database.connection() as conn:
            upserter = EventUpserter(conn)
            for entry in entries:
                event = self._normalize(entry)
                if event is None:
                    result.failed += 1
                    continue
                try:
                    outcome = await upserter.upsert(event)
                except StoreWriteError as exc:
                    logger.error("DB error saving Hikvision event: %s", exc)
                    result.failed += 1
                    continue
                result.record(outcome)

        return result

    @staticmethod
    def _normalize(entry: RawDeviceLogEntry) -> CanonicalEvent | None:
        try:
            return normalize_entry(entry)
        except InvalidEventError as exc:
            logger.warning("Rejected device entry: %s", exc)
            return None
