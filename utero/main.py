"""Utero API — FastAPI application entry point.

Run locally:
    uvicorn utero.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from utero.config import Settings, get_settings
from utero.cycles.config_loader import get_cycle_config
from utero.routers import calendar, cycles, health, predictions, symptoms
from utero.services import postgres
from utero.services.state import TrackerState
from utero.services.store import KeyValueStore, MemoryStore

logger = logging.getLogger("utero")


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )


async def open_store(settings: Settings) -> KeyValueStore:
    """Build the configured storage backend.

    A Postgres backend that cannot be reached at startup degrades to the
    in-memory store so the tracker stays usable.
    """
    if settings.storage_backend == "postgres":
        try:
            await postgres.init_pool(settings)
            return postgres.PostgresStore(settings.storage_namespace)
        except postgres.STORAGE_ERRORS as exc:
            logger.error("Postgres unavailable (%s); falling back to in-memory storage", exc)
    elif settings.storage_backend != "memory":
        logger.warning("Unknown storage backend %r; using in-memory storage", settings.storage_backend)
    return MemoryStore(settings.storage_namespace)


# ---------- Lifespan ----------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup / shutdown hooks."""
    settings = get_settings()
    logger.info(
        "Starting Utero API v%s [%s]",
        settings.app_version,
        settings.environment,
    )
    get_cycle_config()
    store = await open_store(settings)
    tracker = TrackerState(
        store,
        cycles_key=settings.cycles_storage_key,
        logs_key=settings.logs_storage_key,
    )
    await tracker.load()
    app.state.tracker = tracker
    yield
    await postgres.close_pool()
    logger.info("Utero API shut down")


# ---------- App factory ----------

def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Utero API",
        description="Personal cycle companion: period logging, predictions, and symptoms.",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------- Health check (outside v1 prefix, always at /health) ----------
    app.include_router(health.router)

    # ---------- API v1 routes ----------
    v1_prefix = "/api/v1"

    app.include_router(cycles.router, prefix=v1_prefix)
    app.include_router(predictions.router, prefix=v1_prefix)
    app.include_router(calendar.router, prefix=v1_prefix)
    app.include_router(symptoms.router, prefix=v1_prefix)

    return app


app = create_app()
