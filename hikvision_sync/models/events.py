"""Pydantic models for stored device events and sync responses."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from hikvision_sync.models.base import HikvisionBase


# ---------- Events ----------

class HikvisionEventRead(HikvisionBase):
    id: int
    device_time: datetime
    employee_id: str = ""
    name: str = ""
    card_no: str = ""
    event_type_minor: int
    operation: str = "Unknown Event"
    raw: dict[str, Any] | None = None
    created_at: datetime
    updated_at: datetime


class EventListResponse(HikvisionBase):
    success: bool = True
    events: list[HikvisionEventRead]


# ---------- Sync ----------

class SyncResponse(HikvisionBase):
    success: bool = True
    message: str
    inserted: int
    updated: int
    skipped: int
    failed: int
    total: int
