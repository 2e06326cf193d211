"""Map raw device log entries onto ``CanonicalEvent``.

Pure functions: no I/O, same input always gives the same event.
"""

from __future__ import annotations

from datetime import datetime

from hikvision_sync.device.base import CanonicalEvent, RawDeviceLogEntry
from hikvision_sync.errors import InvalidEventError

UNKNOWN_EVENT = "Unknown Event"

#: Device minor event-type code → operation label.
EVENT_LABELS: dict[int, str] = {
    1: "Alarm",
    75: "Door Unlocked",
    76: "Door Locked",
    34: "Face Authentication Pass",
    38: "Face Authentication Fail",
    8: "Card Swiped",
}

_DEVICE_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def operation_label(minor: object) -> str:
    """Return the label for a minor code, ``Unknown Event`` if unmapped."""
    code = _as_int(minor)
    if code is None:
        return UNKNOWN_EVENT
    return EVENT_LABELS.get(code, UNKNOWN_EVENT)


def parse_device_time(value: object) -> datetime:
    """Parse ``2025-11-03T09:15:27+05:30`` (or with ``.123``) as naive civil time.

    The date/time separator becomes a space and everything after the first
    19 characters (fraction, offset) is discarded.

    Raises:
        InvalidEventError: If the value is missing or not a device timestamp.
    """
    if not isinstance(value, str) or not value:
        raise InvalidEventError(f"Missing device timestamp: {value!r}")
    cleaned = value.replace("T", " ", 1)[:19]
    try:
        return datetime.strptime(cleaned, _DEVICE_TIME_FORMAT)
    except ValueError as exc:
        raise InvalidEventError(f"Unparseable device timestamp: {value!r}") from exc


def normalize_entry(raw: RawDeviceLogEntry) -> CanonicalEvent:
    """Convert one device entry to a canonical event.

    Args:
        raw: Entry from ``AcsEvent.InfoList``.

    A missing or non-numeric ``minor`` is rejected here rather than mapped to
    ``Unknown Event``: the code is part of the dedup key, so there is no
    integer to store.  ``operation_label()`` alone still maps such values to
    ``Unknown Event``.

    Returns:
        CanonicalEvent with ``raw`` set to the untouched entry.

    Raises:
        InvalidEventError: If the entry is not an object, or its timestamp
            or minor code is unusable.
    """
    if not isinstance(raw, dict):
        raise InvalidEventError(f"Device entry is not an object: {raw!r}")

    minor = _as_int(raw.get("minor"))
    if minor is None:
        raise InvalidEventError(f"Missing or non-numeric minor code: {raw.get('minor')!r}")

    return CanonicalEvent(
        device_time=parse_device_time(raw.get("time")),
        employee_id=_employee_id(raw),
        name=_as_text(raw.get("name")),
        card_no=_as_text(raw.get("cardNo")),
        event_type_minor=minor,
        operation=EVENT_LABELS.get(minor, UNKNOWN_EVENT),
        raw=raw,
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _employee_id(raw: RawDeviceLogEntry) -> str:
    # employeeNoString is the newer firmware field; employeeNo may be numeric
    for key in ("employeeNoString", "employeeNo"):
        value = raw.get(key)
        if value not in (None, ""):
            return str(value)
    return ""


def _as_text(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def _as_int(value: object) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
