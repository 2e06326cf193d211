"""Idempotent per-record writes of canonical events.

Each event is one ``INSERT ... ON CONFLICT`` round trip.  The statement
itself tells us the outcome:

    row, inserted = true   → inserted
    row, inserted = false  → updated (some non-key column changed)
    no row                 → skipped (identical record already stored)

A unique violation can still surface when another sync run commits the same
key concurrently; that counts as skipped.
"""

from __future__ import annotations

import logging
from enum import Enum

import asyncpg

from hikvision_sync.device.base import CanonicalEvent
from hikvision_sync.device.sync.dedup import UPSERT_EVENT_SQL, event_key, event_params
from hikvision_sync.errors import StoreKeyCollision, StoreWriteError

logger = logging.getLogger("hikvision_sync.device.sync.upserter")


class UpsertOutcome(str, Enum):
    inserted = "inserted"
    updated = "updated"
    skipped = "skipped"


class EventUpserter:
    """Write canonical events through one asyncpg connection."""

    def __init__(self, conn: asyncpg.Connection) -> None:
        self._conn = conn

    async def upsert(self, event: CanonicalEvent) -> UpsertOutcome:
        """Insert or refresh one event.

        Args:
            event: Normalized device event.

        Returns:
            Which of inserted / updated / skipped happened.

        Raises:
            StoreWriteError: On any store failure other than a key collision.
        """
        try:
            row = await self._write(event)
        except StoreKeyCollision:
            logger.debug("Concurrent insert won for %s, skipping", event_key(event))
            return UpsertOutcome.skipped

        if row is None:
            return UpsertOutcome.skipped
        if row["inserted"]:
            return UpsertOutcome.inserted
        return UpsertOutcome.updated

    async def _write(self, event: CanonicalEvent) -> asyncpg.Record | None:
        try:
            return await self._conn.fetchrow(UPSERT_EVENT_SQL, *event_params(event))
        except asyncpg.UniqueViolationError as exc:
            raise StoreKeyCollision(event_key(event)) from exc
        except (asyncpg.PostgresError, asyncpg.InterfaceError) as exc:
            raise StoreWriteError(
                f"Could not save event {event_key(event)}: {exc}"
            ) from exc
