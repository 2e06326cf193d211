"""Manual sync trigger: thin adapter over ``SyncOrchestrator.run()``."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from hikvision_sync.dependencies import AppOrchestrator
from hikvision_sync.models.base import ErrorResponse
from hikvision_sync.models.events import SyncResponse

router = APIRouter(prefix="/hikvision", tags=["sync"])


@router.post(
    "/sync",
    response_model=SyncResponse,
    responses={500: {"model": ErrorResponse}},
)
async def sync_now(orchestrator: AppOrchestrator) -> JSONResponse:
    result = await orchestrator.run()

    if not result.success:
        body = ErrorResponse(message=result.message, error=result.error or "Unknown error")
        return JSONResponse(status_code=500, content=body.model_dump())

    body = SyncResponse(
        message=result.message,
        inserted=result.inserted,
        updated=result.updated,
        skipped=result.skipped,
        failed=result.failed,
        total=result.total,
    )
    return JSONResponse(status_code=200, content=body.model_dump())
