"""Read-only listing of the most recent stored device events."""

from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from hikvision_sync.dependencies import AppDatabase
from hikvision_sync.models.base import ErrorResponse
from hikvision_sync.models.events import EventListResponse, HikvisionEventRead
from hikvision_sync.services.events import list_recent_events

router = APIRouter(tags=["events"])
logger = logging.getLogger("hikvision_sync.events")


@router.get(
    "/events",
    response_model=EventListResponse,
    responses={500: {"model": ErrorResponse}},
)
async def list_events(database: AppDatabase) -> JSONResponse:
    try:
        rows = await list_recent_events(database)
    except Exception as exc:
        logger.error("Error fetching events: %s", exc)
        body = ErrorResponse(
            message="Failed to fetch events", error=str(exc) or "Unknown error"
        )
        return JSONResponse(status_code=500, content=body.model_dump())

    body = EventListResponse(events=[HikvisionEventRead.model_validate(r) for r in rows])
    return JSONResponse(status_code=200, content=body.model_dump(mode="json"))
