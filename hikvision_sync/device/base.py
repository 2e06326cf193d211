"""Canonical data models for the device event sync.

``RawDeviceLogEntry`` is whatever the device returns for one log line and
is never modified.  ``CanonicalEvent`` is the normalized record written to
the ``hikvision_events`` table and is the only type the upserter accepts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

#: One entry of ``AcsEvent.InfoList`` exactly as the device sent it.
RawDeviceLogEntry = dict[str, Any]


@dataclass(frozen=True)
class TimeWindow:
    """Half-open [start, end) range sent to the device.

    Both boundaries are device civil-time strings with a fixed UTC offset,
    e.g. ``2025-11-03T00:00:00+05:30``.
    """

    start: str
    end: str


@dataclass
class CanonicalEvent:
    """Normalized access-control event.

    Attributes:
        device_time:      Device-local civil time, whole seconds, naive.
        employee_id:      Employee number as a string, "" if absent.
        name:             Display name, "" if absent.
        card_no:          Card number as a string, "" if absent.
        event_type_minor: Device minor event-type code.
        operation:        Human-readable label for ``event_type_minor``.
        raw:              Original device entry, kept for audit/reprocessing.
    """

    device_time: datetime
    employee_id: str
    name: str
    card_no: str
    event_type_minor: int
    operation: str
    raw: RawDeviceLogEntry = field(default_factory=dict)
