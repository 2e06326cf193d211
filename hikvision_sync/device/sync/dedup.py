"""Deduplication keys and the idempotent upsert statement for device events.

The device has no stable event id, so the natural key is:
    hikvision_events: (employee_id, device_time, event_type_minor): UNIQUE constraint

The same key drives the ``ON CONFLICT`` target of the upsert, so two
overlapping sync runs can never create two rows for one logical event.
"""

from __future__ import annotations

from hikvision_sync.device.base import CanonicalEvent

EVENTS_TABLE = "hikvision_events"

#: Columns of the UNIQUE constraint on hikvision_events.
KEY_COLUMNS: list[str] = ["employee_id", "device_time", "event_type_minor"]

#: Columns written on every upsert, in parameter order.
EVENT_COLUMNS: list[str] = KEY_COLUMNS + ["name", "card_no", "operation", "raw"]


def event_key(event: CanonicalEvent) -> str:
    """Generate the dedup key for a canonical event.

    Matches the UNIQUE constraint on hikvision_events:
    (employee_id, device_time, event_type_minor).

    Args:
        event: Normalized device event.

    Returns:
        Pipe-separated dedup key string.
    """
    return (
        f"{event.employee_id}|{event.device_time.isoformat(sep=' ')}|"
        f"{event.event_type_minor}"
    )


def event_params(event: CanonicalEvent) -> tuple:
    """Return the positional parameters for ``build_upsert_query`` in column order."""
    return (
        event.employee_id,
        event.device_time,
        event.event_type_minor,
        event.name,
        event.card_no,
        event.operation,
        event.raw,
    )


def build_upsert_query(
    table: str,
    columns: list[str],
    conflict_columns: list[str],
    update_columns: list[str] | None = None,
) -> str:
    """Build a PostgreSQL upsert that reports what it did.

    On conflict, non-key columns are updated only when at least one of them
    differs, so an identical re-write touches nothing and returns no row.
    The returned ``inserted`` column is ``true`` for a new row (``xmax = 0``)
    and ``false`` for an updated one.

    Args:
        table:            Target table name.
        columns:          All columns to insert.
        conflict_columns: Columns that define the UNIQUE constraint.
        update_columns:   Columns to update on conflict (defaults to non-key columns).

    Returns:
        Parameterized SQL string.
    """
    if update_columns is None:
        update_columns = [c for c in columns if c not in conflict_columns]

    placeholders = ", ".join(f"${i + 1}" for i in range(len(columns)))
    col_list = ", ".join(columns)
    conflict_target = ", ".join(conflict_columns)

    if update_columns:
        update_set = ", ".join(f"{col} = EXCLUDED.{col}" for col in update_columns)
        update_set += ", updated_at = NOW()"
        current = ", ".join(f"{table}.{col}" for col in update_columns)
        incoming = ", ".join(f"EXCLUDED.{col}" for col in update_columns)
        do_clause = (
            f"DO UPDATE SET {update_set} "
            f"WHERE ({current}) IS DISTINCT FROM ({incoming})"
        )
    else:
        do_clause = "DO NOTHING"

    return (
        f"INSERT INTO {table} ({col_list}) "
        f"VALUES ({placeholders}) "
        f"ON CONFLICT ({conflict_target}) {do_clause} "
        f"RETURNING (xmax = 0) AS inserted"
    )


UPSERT_EVENT_SQL = build_upsert_query(EVENTS_TABLE, EVENT_COLUMNS, KEY_COLUMNS)
