"""Hikvision access-control device integration.

Subpackages:
    sync/: Dedup keys, idempotent upsert, sync orchestrator, periodic scheduler

Core modules:
    base       : CanonicalEvent, TimeWindow and the raw entry type
    time_window: Resolve the device-time query window
    client     : Paginated, digest-authenticated ISAPI event fetcher
    normalizer : Raw entry → CanonicalEvent, minor code → operation label
"""

from hikvision_sync.device.base import CanonicalEvent, RawDeviceLogEntry, TimeWindow
from hikvision_sync.device.client import HikvisionClient
from hikvision_sync.device.normalizer import EVENT_LABELS, normalize_entry, operation_label
from hikvision_sync.device.time_window import resolve_window

__all__ = [
    "CanonicalEvent",
    "RawDeviceLogEntry",
    "TimeWindow",
    "HikvisionClient",
    "EVENT_LABELS",
    "normalize_entry",
    "operation_label",
    "resolve_window",
]
