"""Month grid classification for the calendar view.

A grid covers six full weeks starting on the Sunday on/before the 1st of
the month.  Each day gets exactly one ``DayType``; checks run in order and
later matches override earlier ones:

    Past/Future → logged Period → Fertile → Ovulation → predicted Period

A predicted period day never hides an actually logged one.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, Mapping

from utero.cycles.calculator import Cycle, CyclePrediction
from utero.cycles.config_loader import CycleConfig, get_cycle_config
from utero.cycles.dates import add_days, start_of_day
from utero.cycles.symptoms import DailyLog, log_for_day


class DayType(str, Enum):
    past = "PAST"
    future = "FUTURE"
    period = "PERIOD"
    fertile = "FERTILE"
    ovulation = "OVULATION"
    today = "TODAY"


@dataclass(frozen=True)
class CycleDay:
    """One cell of the month grid.

    Attributes:
        date:             Calendar date of the cell.
        day_of_month:     1–31.
        is_current_month: False for leading/trailing days of adjacent months.
        is_today:         True for the reference day.
        type:             Classification after precedence is applied.
        log:              Symptoms logged on this day, if any.
    """

    date: date
    day_of_month: int
    is_current_month: bool
    is_today: bool
    type: DayType
    log: DailyLog | None = None


def grid_start(year: int, month: int) -> date:
    """The Sunday on/before the 1st of the month."""
    first = date(year, month, 1)
    # date.weekday(): Monday=0 … Sunday=6
    return add_days(first, -((first.weekday() + 1) % 7))


def classify_day(
    day: date,
    today: date,
    cycles: Iterable[Cycle],
    prediction: CyclePrediction,
) -> DayType:
    """Classify a single day against the history and prediction."""
    day_type = DayType.past if day < today else DayType.future

    in_period = any(c.contains(day) for c in cycles)
    if in_period:
        day_type = DayType.period

    if day in prediction.fertile_window:
        day_type = DayType.fertile

    if prediction.ovulation_day is not None and day == prediction.ovulation_day:
        day_type = DayType.ovulation

    if day in prediction.predicted_period and not in_period:
        day_type = DayType.period

    return day_type


def generate_calendar_days(
    year: int,
    month: int,
    cycles: Iterable[Cycle],
    prediction: CyclePrediction,
    logs: Mapping[str, DailyLog] | None = None,
    today: date | None = None,
    config: CycleConfig | None = None,
) -> list[CycleDay]:
    """Build the classified grid for a month.

    Args:
        year:       Displayed year.
        month:      Displayed month (1–12).
        cycles:     Logged history.
        prediction: Output of ``calculate_predictions`` for the same history.
        logs:       Symptom logs keyed by date key.
        today:      Reference day.  Defaults to the local date.
        config:     Engine settings (grid size).

    Returns:
        ``config.calendar_grid_days`` days, oldest first.
    """
    cfg = config or get_cycle_config()
    reference = start_of_day(today or date.today())
    history = list(cycles)
    logs = logs or {}
    start = grid_start(year, month)

    days: list[CycleDay] = []
    for offset in range(cfg.calendar_grid_days):
        day = add_days(start, offset)
        days.append(
            CycleDay(
                date=day,
                day_of_month=day.day,
                is_current_month=day.month == month,
                is_today=day == reference,
                type=classify_day(day, reference, history, prediction),
                log=log_for_day(logs, day),
            )
        )
    return days
