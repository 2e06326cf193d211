"""Resolve the [start, end) window sent to the device.

The device speaks civil time with an explicit UTC offset.  The offset is a
module constant rather than the host timezone so that a container running
in UTC and the device agree on what "now" means.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from hikvision_sync.device.base import TimeWindow

#: Fixed UTC offset of the device's clock (IST).
DEVICE_UTC_OFFSET = timedelta(hours=5, minutes=30)
DEVICE_TZ = timezone(DEVICE_UTC_OFFSET)


def format_device_time(moment: datetime) -> str:
    """Render ``moment`` as device civil time, e.g. ``2025-11-03T09:15:00+05:30``.

    Naive datetimes are treated as UTC.  Sub-second precision is dropped.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    local = moment.astimezone(DEVICE_TZ).replace(microsecond=0)
    return local.isoformat(timespec="seconds")


def resolve_window(start: str, now: datetime | None = None) -> TimeWindow:
    """Return the window from the configured ``start`` up to ``now``.

    Args:
        start: Configured start boundary, already in device format.
        now:   Current instant; defaults to ``datetime.now(timezone.utc)``.

    Returns:
        TimeWindow with ``end`` in the same fixed-offset format as ``start``.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    return TimeWindow(start=start, end=format_device_time(now))
