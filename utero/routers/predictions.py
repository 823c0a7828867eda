"""Cycle prediction endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from utero.cycles.calculator import calculate_predictions
from utero.dependencies import EngineConfig, State, Today
from utero.models.cycles import PredictionRead

router = APIRouter(prefix="/predictions", tags=["predictions"])


@router.get("", response_model=PredictionRead)
async def get_prediction(state: State, today: Today, config: EngineConfig) -> PredictionRead:
    prediction = calculate_predictions(state.cycles, today=today, config=config)
    return PredictionRead.from_prediction(prediction)
