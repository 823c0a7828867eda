"""Shared FastAPI dependencies injected into route handlers."""

from __future__ import annotations

from datetime import date
from typing import Annotated

from fastapi import Depends, HTTPException, Query, Request

from utero.config import Settings, get_settings
from utero.cycles.config_loader import CycleConfig, get_cycle_config
from utero.services.state import TrackerState


def get_state(request: Request) -> TrackerState:
    """Return the tracker state built by the app lifespan."""
    state: TrackerState | None = getattr(request.app.state, "tracker", None)
    if state is None:
        raise HTTPException(status_code=503, detail="Tracker state not initialized")
    return state


def get_today(
    today: date | None = Query(
        default=None,
        description="Reference day (YYYY-MM-DD). Defaults to the server's local date.",
    ),
) -> date:
    return today or date.today()


# Annotated shortcuts for route signatures
State = Annotated[TrackerState, Depends(get_state)]
Today = Annotated[date, Depends(get_today)]
AppSettings = Annotated[Settings, Depends(get_settings)]
EngineConfig = Annotated[CycleConfig, Depends(get_cycle_config)]
