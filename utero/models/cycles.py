"""Pydantic schemas for cycles, predictions, the calendar grid and symptoms."""

from __future__ import annotations

import datetime as dt

from pydantic import Field

from utero.cycles.calculator import CyclePrediction
from utero.cycles.calendar import CycleDay, DayType
from utero.cycles.symptoms import DailyLog, Symptom
from utero.models.base import UteroBase


# ---------- Cycles ----------

class CycleRead(UteroBase):
    id: str
    start_date: dt.date
    end_date: dt.date


class PeriodLogCreate(UteroBase):
    # Optional so a missing date reaches the save policy's own message.
    start_date: dt.date | None = None
    end_date: dt.date | None = None


class PeriodDefaultsRead(UteroBase):
    start_date: dt.date
    end_date: dt.date


# ---------- Predictions ----------

class PhaseRead(UteroBase):
    name: str
    description: str


class PredictionRead(UteroBase):
    average_cycle_length: int
    average_period_length: int
    predicted_period: list[dt.date] = Field(default_factory=list)
    fertile_window: list[dt.date] = Field(default_factory=list)
    ovulation_day: dt.date | None = None
    current_phase: PhaseRead
    day_of_cycle: int | None = None

    @classmethod
    def from_prediction(cls, prediction: CyclePrediction) -> "PredictionRead":
        return cls(
            average_cycle_length=prediction.average_cycle_length,
            average_period_length=prediction.average_period_length,
            predicted_period=list(prediction.predicted_period),
            fertile_window=list(prediction.fertile_window),
            ovulation_day=prediction.ovulation_day,
            current_phase=PhaseRead(
                name=prediction.current_phase.name,
                description=prediction.current_phase.description,
            ),
            day_of_cycle=prediction.day_of_cycle,
        )


# ---------- Symptoms ----------

class SymptomLogRead(UteroBase):
    date: dt.date
    symptoms: list[Symptom] = Field(default_factory=list)

    @classmethod
    def for_day(cls, day: dt.date, log: DailyLog | None) -> "SymptomLogRead":
        return cls(date=day, symptoms=list(log.symptoms) if log else [])


class SymptomToggle(UteroBase):
    symptom: Symptom


# ---------- Calendar ----------

class CalendarDayRead(UteroBase):
    date: dt.date
    day_of_month: int = Field(ge=1, le=31)
    is_current_month: bool
    is_today: bool
    type: DayType
    symptoms: list[Symptom] = Field(default_factory=list)

    @classmethod
    def from_day(cls, day: CycleDay) -> "CalendarDayRead":
        return cls(
            date=day.date,
            day_of_month=day.day_of_month,
            is_current_month=day.is_current_month,
            is_today=day.is_today,
            type=day.type,
            symptoms=list(day.log.symptoms) if day.log else [],
        )
