"""Hikvision Sync API. FastAPI application entry point.

Run locally:
    uvicorn hikvision_sync.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from hikvision_sync.config import Settings, get_settings
from hikvision_sync.device.sync.orchestrator import SyncOrchestrator
from hikvision_sync.device.sync.scheduler import SyncScheduler
from hikvision_sync.routers import events, health, sync
from hikvision_sync.services.database import Database

# ---------- Logging ----------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger("hikvision_sync")


# ---------- App factory ----------

def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    logger.setLevel(settings.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Build the composition root; the database connects on first use."""
        logger.info(
            "Starting %s v%s [%s]",
            settings.app_name,
            settings.app_version,
            settings.environment,
        )
        database = Database(settings)
        orchestrator = SyncOrchestrator(settings, database)
        app.state.database = database
        app.state.orchestrator = orchestrator

        scheduler: SyncScheduler | None = None
        if settings.sync_interval_seconds > 0:
            scheduler = SyncScheduler(orchestrator, settings.sync_interval_seconds)
            scheduler.start()

        yield

        if scheduler:
            await scheduler.stop()
        await database.close()
        logger.info("%s shut down", settings.app_name)

    app = FastAPI(
        title="Hikvision Sync API",
        description=(
            "Pulls access-control event logs from a Hikvision device and "
            "stores them without duplicates."
        ),
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ---------- Health check (outside the api prefix, always at /health) ----------
    app.include_router(health.router)

    # ---------- API routes ----------
    api_prefix = "/api"

    app.include_router(sync.router, prefix=api_prefix)
    app.include_router(events.router, prefix=api_prefix)

    return app


app = create_app()
