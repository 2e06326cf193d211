"""Hikvision ISAPI access-control event client.

Pages through ``/ISAPI/AccessControl/AcsEvent`` with HTTP digest auth and
returns every entry in the requested window as one oldest-first batch.

Paging rules:
    - cursor (``searchResultPosition``) starts at 0 and advances by the
      number of entries actually returned
    - an empty page or a page shorter than ``page_size`` ends the window
    - a 401 after at least one page is the device refusing further pages;
      the entries already fetched are returned
    - a 401 on the first page is a credential problem and is fatal
    - ``max_pages`` bounds the number of requests per call
"""

from __future__ import annotations

import logging
from typing import AsyncIterator

import httpx

from hikvision_sync.device.base import RawDeviceLogEntry, TimeWindow
from hikvision_sync.errors import (
    DeviceAuthError,
    DeviceProtocolError,
    DeviceStreamEnd,
)

logger = logging.getLogger("hikvision_sync.device.client")

_ACS_EVENT_PATH = "/ISAPI/AccessControl/AcsEvent"
_SEARCH_ID = "1"


class HikvisionClient:
    """Paginated, digest-authenticated reader of device event logs."""

    def __init__(
        self,
        host: str,
        username: str,
        password: str,
        page_size: int = 30,
        max_pages: int = 50,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            host:        Device network address (``ip`` or ``ip:port``).
            username:    Digest auth user.
            password:    Digest auth password.
            page_size:   ``maxResults`` sent with every page request.
            max_pages:   Hard cap on requests per ``fetch_events`` call.
            timeout:     Per-request timeout in seconds.
            http_client: Optional pre-configured httpx client (for testing).
        """
        self._host = host
        self._auth = httpx.DigestAuth(username, password)
        self._page_size = page_size
        self._max_pages = max_pages
        self._timeout = timeout
        self._http_client = http_client

    @property
    def url(self) -> str:
        return f"http://{self._host}{_ACS_EVENT_PATH}?format=json"

    async def fetch_events(self, window: TimeWindow) -> list[RawDeviceLogEntry]:
        """Fetch every entry in ``window``.

        Args:
            window: Start/end boundaries in device civil time.

        Returns:
            All entries, reversed from device order so the oldest comes first.

        Raises:
            DeviceAuthError:     First page rejected with 401.
            DeviceProtocolError: Any other failed page.
        """
        entries: list[RawDeviceLogEntry] = []

        if self._http_client:
            await self._collect(self._http_client, window, entries)
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                await self._collect(client, window, entries)

        logger.info("TOTAL logs fetched from device: %d", len(entries))
        entries.reverse()
        return entries

    async def _collect(
        self,
        client: httpx.AsyncClient,
        window: TimeWindow,
        entries: list[RawDeviceLogEntry],
    ) -> None:
        try:
            async for page in self._iter_pages(client, window, entries):
                entries.extend(page)
        except DeviceStreamEnd as end:
            logger.warning(
                "Device stream ended after %d logs: %s", len(entries), end.reason
            )

    async def _iter_pages(
        self,
        client: httpx.AsyncClient,
        window: TimeWindow,
        entries: list[RawDeviceLogEntry],
    ) -> AsyncIterator[list[RawDeviceLogEntry]]:
        position = 0

        for _ in range(self._max_pages):
            try:
                page = await self._fetch_page(client, window, position)
            except DeviceAuthError:
                if entries:
                    raise DeviceStreamEnd(
                        "received 401 after a successful page, returning partial data"
                    ) from None
                raise

            if not page:
                return

            logger.info(
                "Fetched batch: %d to %d (size: %d)",
                position + 1,
                position + len(page),
                len(page),
            )
            yield page

            position += len(page)
            if len(page) < self._page_size:
                return

        raise DeviceStreamEnd(f"page cap of {self._max_pages} reached")

    async def _fetch_page(
        self, client: httpx.AsyncClient, window: TimeWindow, position: int
    ) -> list[RawDeviceLogEntry]:
        """POST one search request and return its ``InfoList``.

        Raises:
            DeviceAuthError:     On HTTP 401.
            DeviceProtocolError: On other non-2xx, transport failure or bad JSON.
        """
        payload = {
            "AcsEventCond": {
                "searchID": _SEARCH_ID,
                "searchResultPosition": position,
                "maxResults": self._page_size,
                "major": 0,
                "minor": 0,
                "startTime": window.start,
                "endTime": window.end,
            }
        }

        try:
            response = await client.post(
                self.url, json=payload, auth=self._auth, timeout=self._timeout
            )
        except httpx.TransportError as exc:
            raise DeviceProtocolError(f"Could not reach device at {self._host}: {exc}") from exc

        if response.status_code == 401:
            raise DeviceAuthError(
                f"Hikvision Error 401 - {response.reason_phrase} :: {response.text}"
            )
        if not response.is_success:
            logger.error(
                "Hikvision HTTP error: %d %s :: %s",
                response.status_code,
                response.reason_phrase,
                response.text,
            )
            raise DeviceProtocolError(
                f"Hikvision Error {response.status_code} - "
                f"{response.reason_phrase} :: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise DeviceProtocolError(
                "Device returned a non-JSON body",
                status_code=response.status_code,
                body=response.text,
            ) from exc
        if not isinstance(data, dict):
            raise DeviceProtocolError(
                "Device returned an unexpected JSON document",
                status_code=response.status_code,
                body=response.text,
            )

        acs_event = data.get("AcsEvent") or {}
        entries = (acs_event.get("InfoList") or []) if isinstance(acs_event, dict) else None
        if not isinstance(entries, list):
            raise DeviceProtocolError(
                "Device returned a malformed AcsEvent document",
                status_code=response.status_code,
                body=response.text,
            )
        return entries
