"""Postgres store client for device events.

``Database`` is constructed once by the composition root (the app lifespan
or a script) and handed to whatever needs it.  The asyncpg pool is created
on first use, so a missing ``DATABASE_URL`` surfaces as a
``ConfigurationError`` from the operation that needed it, not at startup.
"""

from __future__ import annotations

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

import asyncpg

from hikvision_sync.config import Settings
from hikvision_sync.device.sync.dedup import EVENTS_TABLE

logger = logging.getLogger("hikvision_sync.db")

SCHEMA_SQL = f"""
CREATE TABLE IF NOT EXISTS {EVENTS_TABLE} (
    id               BIGSERIAL PRIMARY KEY,
    device_time      TIMESTAMP NOT NULL,
    employee_id      TEXT NOT NULL DEFAULT '',
    name             TEXT NOT NULL DEFAULT '',
    card_no          TEXT NOT NULL DEFAULT '',
    event_type_minor INTEGER NOT NULL,
    operation        TEXT NOT NULL DEFAULT 'Unknown Event',
    raw              JSONB,
    created_at       TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at       TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    UNIQUE (employee_id, device_time, event_type_minor)
);
CREATE INDEX IF NOT EXISTS {EVENTS_TABLE}_device_time_idx
    ON {EVENTS_TABLE} (device_time DESC);
"""


async def _init_connection(conn: asyncpg.Connection) -> None:
    # jsonb in and out as Python dicts
    await conn.set_type_codec(
        "jsonb", encoder=json.dumps, decoder=json.loads, schema="pg_catalog"
    )


class Database:
    """Lazily connected asyncpg pool plus the event table schema."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._pool: asyncpg.Pool | None = None
        self._lock = asyncio.Lock()

    async def get_pool(self) -> asyncpg.Pool:
        """Return the pool, creating it and the schema on first call."""
        if self._pool is not None:
            return self._pool

        async with self._lock:
            if self._pool is None:  # double-checked under the lock
                self._settings.require_database()
                pool = await asyncpg.create_pool(
                    self._settings.database_url,
                    min_size=1,
                    max_size=10,
                    command_timeout=30,
                    init=_init_connection,
                )
                try:
                    async with pool.acquire() as conn:
                        await conn.execute(SCHEMA_SQL)
                except Exception:
                    await pool.close()
                    raise
                self._pool = pool
                logger.info("Connected to Postgres (min=1, max=10)")
        return self._pool

    async def close(self) -> None:
        """Drain the pool. Call at app shutdown."""
        if self._pool:
            await self._pool.close()
            self._pool = None
            logger.info("Database pool closed")

    @asynccontextmanager
    async def connection(self) -> AsyncGenerator[asyncpg.Connection, None]:
        """Acquire a pooled connection.

        Usage::

            async with database.connection() as conn:
                rows = await conn.fetch("SELECT 1")
        """
        pool = await self.get_pool()
        async with pool.acquire() as conn:
            yield conn

    async def fetch(self, query: str, *args: Any) -> list[asyncpg.Record]:
        async with self.connection() as conn:
            return await conn.fetch(query, *args)

    async def fetchval(self, query: str, *args: Any) -> Any:
        async with self.connection() as conn:
            return await conn.fetchval(query, *args)
