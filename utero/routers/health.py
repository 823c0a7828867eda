"""Health check endpoint."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from utero.dependencies import AppSettings, State

router = APIRouter(tags=["system"])
logger = logging.getLogger("utero.health")


@router.get("/health")
async def health_check(state: State, settings: AppSettings) -> dict:
    """Liveness check. Returns 200 if the API process is up.

    Storage is checked too; an unreachable backend reports ``degraded``
    because the tracker keeps working on in-memory state.
    """
    storage_ok = await state.store.ping()
    if not storage_ok:
        logger.warning("Health check could not reach storage")

    return {
        "status": "healthy" if storage_ok else "degraded",
        "version": settings.app_version,
        "environment": settings.environment,
        "storage": "connected" if storage_ok else "unreachable",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
