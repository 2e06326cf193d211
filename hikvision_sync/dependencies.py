"""Shared FastAPI dependencies injected into route handlers.

The ``Database`` and ``SyncOrchestrator`` are built once in the app
lifespan and stored on ``app.state``; route handlers receive them here.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from hikvision_sync.config import Settings, get_settings
from hikvision_sync.device.sync.orchestrator import SyncOrchestrator
from hikvision_sync.services.database import Database


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_orchestrator(request: Request) -> SyncOrchestrator:
    return request.app.state.orchestrator


# Annotated shortcuts for route signatures
AppDatabase = Annotated[Database, Depends(get_database)]
AppOrchestrator = Annotated[SyncOrchestrator, Depends(get_orchestrator)]
AppSettings = Annotated[Settings, Depends(get_settings)]
