"""Logged periods: list, save (replace-or-append), and form defaults."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException

from utero.cycles.calculator import sort_cycles
from utero.cycles.history import PeriodValidationError, default_period_entry, save_period
from utero.dependencies import State, Today
from utero.models.base import ErrorDetail
from utero.models.cycles import CycleRead, PeriodDefaultsRead, PeriodLogCreate

router = APIRouter(prefix="/cycles", tags=["cycles"])


@router.get("", response_model=list[CycleRead])
async def list_cycles(state: State) -> Any:
    return sort_cycles(state.cycles)


@router.post(
    "",
    response_model=list[CycleRead],
    status_code=201,
    responses={422: {"model": ErrorDetail}},
)
async def log_period(state: State, body: PeriodLogCreate) -> Any:
    """Save a period.  Overlapping the most recent cycle edits it."""
    try:
        return await state.update_cycles(
            lambda cycles: save_period(cycles, body.start_date, body.end_date)
        )
    except PeriodValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.get("/defaults", response_model=PeriodDefaultsRead)
async def period_defaults(state: State, today: Today) -> Any:
    return default_period_entry(state.cycles, today)
