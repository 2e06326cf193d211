"""Read-side queries over stored device events."""

from __future__ import annotations

from typing import Any

from hikvision_sync.device.sync.dedup import EVENTS_TABLE
from hikvision_sync.services.database import Database

RECENT_EVENTS_LIMIT = 200

_RECENT_EVENTS_SQL = (
    "SELECT id, device_time, employee_id, name, card_no, event_type_minor, "
    "operation, raw, created_at, updated_at "
    f"FROM {EVENTS_TABLE} ORDER BY device_time DESC LIMIT $1"
)


async def list_recent_events(
    database: Database, limit: int = RECENT_EVENTS_LIMIT
) -> list[dict[str, Any]]:
    """Return up to ``limit`` events, newest device time first."""
    rows = await database.fetch(_RECENT_EVENTS_SQL, limit)
    return [dict(r) for r in rows]
