"""Daily symptom log endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter

from utero.cycles.symptoms import Symptom, log_for_day, toggle_symptom
from utero.dependencies import State
from utero.models.cycles import SymptomLogRead, SymptomToggle

router = APIRouter(tags=["symptoms"])


@router.get("/symptoms", response_model=list[Symptom])
async def list_symptoms() -> list[Symptom]:
    return list(Symptom)


@router.get("/logs/{day}", response_model=SymptomLogRead)
async def get_log(day: date, state: State) -> SymptomLogRead:
    return SymptomLogRead.for_day(day, log_for_day(state.logs, day))


@router.post("/logs/{day}/toggle", response_model=SymptomLogRead)
async def toggle(day: date, state: State, body: SymptomToggle) -> SymptomLogRead:
    logs = await state.update_logs(lambda current: toggle_symptom(current, day, body.symptom))
    return SymptomLogRead.for_day(day, log_for_day(logs, day))
