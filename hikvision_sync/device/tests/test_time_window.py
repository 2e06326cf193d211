"""Tests for the device-time window resolver."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from hikvision_sync.device.time_window import (
    DEVICE_UTC_OFFSET,
    format_device_time,
    resolve_window,
)

START = "2025-11-03T00:00:00+05:30"


class TestResolveWindow:
    def test_end_is_now_in_device_offset(self) -> None:
        now = datetime(2025, 11, 4, 5, 0, 0, tzinfo=timezone.utc)
        window = resolve_window(START, now=now)
        assert window.start == START
        assert window.end == "2025-11-04T10:30:00+05:30"

    def test_sub_seconds_are_truncated(self) -> None:
        now = datetime(2025, 11, 4, 5, 0, 7, 999999, tzinfo=timezone.utc)
        assert resolve_window(START, now=now).end == "2025-11-04T10:30:07+05:30"

    def test_host_timezone_is_irrelevant(self) -> None:
        """The same instant expressed in another zone gives the same boundary."""
        utc_now = datetime(2025, 11, 4, 5, 0, 0, tzinfo=timezone.utc)
        pacific_now = utc_now.astimezone(timezone(timedelta(hours=-8)))
        assert resolve_window(START, now=pacific_now) == resolve_window(START, now=utc_now)

    def test_crosses_midnight(self) -> None:
        now = datetime(2025, 11, 4, 20, 0, 0, tzinfo=timezone.utc)
        assert resolve_window(START, now=now).end == "2025-11-05T01:30:00+05:30"

    def test_defaults_to_current_time(self) -> None:
        window = resolve_window(START)
        end = datetime.fromisoformat(window.end)
        assert end.utcoffset() == DEVICE_UTC_OFFSET
        assert abs(datetime.now(timezone.utc) - end) < timedelta(seconds=5)


class TestFormatDeviceTime:
    def test_naive_treated_as_utc(self) -> None:
        assert format_device_time(datetime(2025, 11, 3, 0, 0, 0)) == "2025-11-03T05:30:00+05:30"

    def test_no_fraction_in_output(self) -> None:
        rendered = format_device_time(datetime(2025, 11, 3, 0, 0, 0, 123456, tzinfo=timezone.utc))
        assert "." not in rendered
