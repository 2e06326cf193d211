"""Error taxonomy for the device sync pipeline.

Fatal errors (configuration, device) abort a sync run before anything is
persisted.  Per-record errors (invalid event, store write) are isolated to
the record that raised them.
"""

from __future__ import annotations


class SyncError(Exception):
    """Base class for every error raised by the sync pipeline."""


class ConfigurationError(SyncError):
    """A required device or database setting is missing."""


# ---------------------------------------------------------------------------
# Device
# ---------------------------------------------------------------------------


class DeviceError(SyncError):
    """The device could not deliver the requested event window."""


class DeviceAuthError(DeviceError):
    """The device rejected the credentials on the first page."""


class DeviceProtocolError(DeviceError):
    """Non-auth, non-success response (or unusable body) from the device.

    Attributes:
        status_code: HTTP status returned by the device, 0 if no response.
        body:        Response body captured for diagnostics.
    """

    def __init__(self, message: str, status_code: int = 0, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class DeviceStreamEnd(SyncError):
    """The device stopped serving pages after some data was returned.

    Raised for a late authentication failure or when the page cap is
    reached.  The fetcher catches it and returns what it accumulated.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


# ---------------------------------------------------------------------------
# Records / store
# ---------------------------------------------------------------------------


class InvalidEventError(SyncError):
    """A raw device entry cannot be turned into a canonical event."""


class StoreWriteError(SyncError):
    """Persisting a single event failed for a reason other than a key collision."""


class StoreKeyCollision(SyncError):
    """Another writer inserted the same dedup key first."""
