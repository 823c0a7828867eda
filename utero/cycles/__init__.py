"""Cycle tracking for Utero.

Modules:
    dates         — Calendar-day arithmetic and date keys
    calculator    — Prediction engine (averages, next period, fertile window, phase)
    calendar      — Month grid classification
    history       — Period validation and the save/merge policy
    symptoms      — Daily symptom log
    config_loader — Load/validate/hot-reload cycle_config.yaml
"""

from utero.cycles.calculator import Cycle, CyclePhase, CyclePrediction, calculate_predictions
from utero.cycles.calendar import CycleDay, DayType, generate_calendar_days
from utero.cycles.history import PeriodValidationError, save_period
from utero.cycles.symptoms import DailyLog, Symptom, toggle_symptom

__all__ = [
    "Cycle",
    "CyclePhase",
    "CyclePrediction",
    "calculate_predictions",
    "CycleDay",
    "DayType",
    "generate_calendar_days",
    "PeriodValidationError",
    "save_period",
    "DailyLog",
    "Symptom",
    "toggle_symptom",
]
