"""Tests for insert / update / skip classification of event writes."""

from __future__ import annotations

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import asyncpg
import pytest

from hikvision_sync.device.base import CanonicalEvent
from hikvision_sync.device.sync.upserter import EventUpserter, UpsertOutcome
from hikvision_sync.errors import StoreWriteError


def _event(**overrides) -> CanonicalEvent:
    fields = dict(
        device_time=datetime(2025, 11, 3, 9, 15, 27),
        employee_id="1001",
        name="Asha Verma",
        card_no="0012345678",
        event_type_minor=75,
        operation="Door Unlocked",
        raw={"minor": 75, "time": "2025-11-03T09:15:27+05:30"},
    )
    fields.update(overrides)
    return CanonicalEvent(**fields)


class TestOutcomes:
    @pytest.mark.asyncio
    async def test_new_key_is_inserted(self, fake_connection) -> None:
        upserter = EventUpserter(fake_connection)
        assert await upserter.upsert(_event()) is UpsertOutcome.inserted
        assert len(fake_connection.rows) == 1

    @pytest.mark.asyncio
    async def test_identical_rewrite_is_skipped(self, fake_connection) -> None:
        upserter = EventUpserter(fake_connection)
        await upserter.upsert(_event())
        assert await upserter.upsert(_event()) is UpsertOutcome.skipped
        assert len(fake_connection.rows) == 1

    @pytest.mark.asyncio
    async def test_changed_field_is_updated(self, fake_connection) -> None:
        upserter = EventUpserter(fake_connection)
        await upserter.upsert(_event())
        assert await upserter.upsert(_event(name="Asha V.")) is UpsertOutcome.updated
        (row,) = fake_connection.rows.values()
        assert row["name"] == "Asha V."

    @pytest.mark.asyncio
    async def test_one_write_per_event(self, fake_connection) -> None:
        upserter = EventUpserter(fake_connection)
        for _ in range(3):
            await upserter.upsert(_event())
        assert fake_connection.writes == 3
        assert len(fake_connection.rows) == 1


class TestStoreErrors:
    @pytest.mark.asyncio
    async def test_unique_violation_counts_as_skipped(self) -> None:
        conn = MagicMock()
        conn.fetchrow = AsyncMock(
            side_effect=asyncpg.UniqueViolationError(
                'duplicate key value violates unique constraint "hikvision_events_key"'
            )
        )
        upserter = EventUpserter(conn)
        assert await upserter.upsert(_event()) is UpsertOutcome.skipped

    @pytest.mark.asyncio
    async def test_other_postgres_error_raises_store_write_error(self) -> None:
        conn = MagicMock()
        conn.fetchrow = AsyncMock(
            side_effect=asyncpg.DataError("invalid input syntax for type json")
        )
        upserter = EventUpserter(conn)
        with pytest.raises(StoreWriteError) as exc_info:
            await upserter.upsert(_event())
        assert "1001|2025-11-03 09:15:27|75" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_interface_error_raises_store_write_error(self) -> None:
        conn = MagicMock()
        conn.fetchrow = AsyncMock(
            side_effect=asyncpg.InterfaceError("connection is closed")
        )
        with pytest.raises(StoreWriteError):
            await EventUpserter(conn).upsert(_event())

    @pytest.mark.asyncio
    async def test_statement_and_parameters(self) -> None:
        conn = MagicMock()
        conn.fetchrow = AsyncMock(return_value={"inserted": True})
        event = _event()
        await EventUpserter(conn).upsert(event)

        query, *args = conn.fetchrow.await_args.args
        assert query.startswith("INSERT INTO hikvision_events")
        assert args == [
            "1001",
            datetime(2025, 11, 3, 9, 15, 27),
            75,
            "Asha Verma",
            "0012345678",
            "Door Unlocked",
            event.raw,
        ]
