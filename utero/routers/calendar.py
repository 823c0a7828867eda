"""Month calendar grid with per-day classification and symptoms."""

from __future__ import annotations

from fastapi import APIRouter, Path

from utero.cycles.calculator import calculate_predictions
from utero.cycles.calendar import generate_calendar_days
from utero.dependencies import EngineConfig, State, Today
from utero.models.cycles import CalendarDayRead

router = APIRouter(prefix="/calendar", tags=["calendar"])


@router.get("/{year}/{month}", response_model=list[CalendarDayRead])
async def month_grid(
    state: State,
    today: Today,
    config: EngineConfig,
    year: int = Path(ge=1900, le=9998),
    month: int = Path(ge=1, le=12),
) -> list[CalendarDayRead]:
    cycles = state.cycles
    prediction = calculate_predictions(cycles, today=today, config=config)
    days = generate_calendar_days(
        year, month, cycles, prediction, logs=state.logs, today=today, config=config
    )
    return [CalendarDayRead.from_day(d) for d in days]
