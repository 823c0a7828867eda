"""Menstrual cycle prediction engine.

Calendar averaging over the logged history predicts:
- Average cycle and period length
- Next period days
- Ovulation day and fertile window
- Current phase and day of cycle

``calculate_predictions`` is a pure function: it never mutates its input,
keeps no state between calls, and reads no clock unless ``today`` is
omitted.  Empty or inconsistent history degrades to defaults rather than
raising.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable

from utero.cycles.config_loader import CycleConfig, get_cycle_config
from utero.cycles.dates import add_days, difference_in_days, start_of_day

logger = logging.getLogger("utero.cycles.calculator")


@dataclass(frozen=True)
class Cycle:
    """A single logged period.

    Attributes:
        id:         Opaque identifier (creation-time derived, never used for ordering).
        start_date: First day of bleeding.
        end_date:   Last day of bleeding, inclusive.
    """

    id: str
    start_date: date
    end_date: date

    def contains(self, day: date) -> bool:
        """True if ``day`` falls within the inclusive logged range."""
        return start_of_day(self.start_date) <= day <= start_of_day(self.end_date)


@dataclass(frozen=True)
class CyclePhase:
    name: str
    description: str


@dataclass(frozen=True)
class CyclePrediction:
    """Forward-looking prediction derived from the cycle history.

    Attributes:
        average_cycle_length:  Mean gap between consecutive period starts.
        average_period_length: Mean inclusive period length.
        predicted_period:      Consecutive days of the next predicted period.
        fertile_window:        Consecutive days ending on ovulation day.
        ovulation_day:         Predicted ovulation, or None with no history.
        current_phase:         Phase for the reference day.
        day_of_cycle:          1-based day since the last period start, unclamped.
    """

    average_cycle_length: int
    average_period_length: int
    predicted_period: tuple[date, ...] = ()
    fertile_window: tuple[date, ...] = ()
    ovulation_day: date | None = None
    current_phase: CyclePhase = CyclePhase(name="", description="")
    day_of_cycle: int | None = None

    @property
    def next_period_start(self) -> date | None:
        return self.predicted_period[0] if self.predicted_period else None


@dataclass(frozen=True)
class _PhaseContext:
    today: date
    cycles: tuple[Cycle, ...]
    fertile_window: tuple[date, ...]
    ovulation_day: date
    next_period_start: date


# Evaluated top to bottom; every matching rule overwrites the previous
# result, so menstruation always wins.
PHASE_RULES: tuple[tuple[str, Callable[[_PhaseContext], bool]], ...] = (
    ("follicular", lambda ctx: True),
    ("fertile", lambda ctx: ctx.today in ctx.fertile_window),
    ("ovulation", lambda ctx: ctx.today == ctx.ovulation_day),
    (
        "luteal",
        lambda ctx: add_days(ctx.ovulation_day, 1) <= ctx.today < ctx.next_period_start,
    ),
    ("menstruation", lambda ctx: any(c.contains(ctx.today) for c in ctx.cycles)),
)


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer, ties away from zero (2.5 → 3, -2.5 → -3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _phase(config: CycleConfig, key: str) -> CyclePhase:
    text = config.phase(key)
    return CyclePhase(name=text.name, description=text.description)


def default_prediction(config: CycleConfig | None = None) -> CyclePrediction:
    """The prediction for an empty history."""
    cfg = config or get_cycle_config()
    return CyclePrediction(
        average_cycle_length=cfg.default_cycle_length,
        average_period_length=cfg.default_period_length,
        current_phase=_phase(cfg, "no_data"),
    )


def sort_cycles(cycles: Iterable[Cycle]) -> list[Cycle]:
    """Return a new list ordered by start date, oldest first."""
    return sorted(cycles, key=lambda c: start_of_day(c.start_date))


def average_cycle_length(sorted_cycles: list[Cycle], default: int) -> int:
    """Mean whole-day gap between consecutive starts, or ``default`` with < 2 cycles."""
    if len(sorted_cycles) < 2:
        return default
    total = sum(
        difference_in_days(prev.start_date, nxt.start_date)
        for prev, nxt in zip(sorted_cycles, sorted_cycles[1:])
    )
    return round_half_away_from_zero(total / (len(sorted_cycles) - 1))


def average_period_length(sorted_cycles: list[Cycle]) -> int:
    """Mean inclusive span of each logged period."""
    total = sum(difference_in_days(c.start_date, c.end_date) + 1 for c in sorted_cycles)
    return round_half_away_from_zero(total / len(sorted_cycles))


def derive_phase(context: _PhaseContext, config: CycleConfig) -> CyclePhase:
    """Apply every phase rule in order and keep the last one that matched."""
    key = "follicular"
    for rule_key, matches in PHASE_RULES:
        if matches(context):
            key = rule_key
    return _phase(config, key)


def calculate_predictions(
    cycles: Iterable[Cycle],
    today: date | None = None,
    config: CycleConfig | None = None,
) -> CyclePrediction:
    """Predict the next period, fertile window and current phase.

    Args:
        cycles: Logged periods in any order.  Not modified.
        today:  Reference day (normalized to a calendar date).  Defaults to
                the local date when omitted.
        config: Engine settings.  Uses the global cycle config by default.

    Returns:
        A fresh CyclePrediction.
    """
    cfg = config or get_cycle_config()
    sorted_cycles = sort_cycles(cycles)

    if not sorted_cycles:
        return default_prediction(cfg)

    cycle_length = average_cycle_length(sorted_cycles, cfg.default_cycle_length)
    period_length = average_period_length(sorted_cycles)

    last_start = start_of_day(sorted_cycles[-1].start_date)
    next_period_start = add_days(last_start, cycle_length)
    predicted_period = tuple(add_days(next_period_start, i) for i in range(period_length))

    ovulation_day = add_days(next_period_start, -cfg.luteal_phase_days)
    fertile_window = tuple(
        add_days(ovulation_day, -offset)
        for offset in range(cfg.fertile_window_days - 1, -1, -1)
    )

    reference = start_of_day(today or date.today())
    day_of_cycle = difference_in_days(last_start, reference) + 1

    phase = derive_phase(
        _PhaseContext(
            today=reference,
            cycles=tuple(sorted_cycles),
            fertile_window=fertile_window,
            ovulation_day=ovulation_day,
            next_period_start=next_period_start,
        ),
        cfg,
    )

    logger.debug(
        "Prediction from %d cycle(s): cycle=%dd period=%dd next=%s phase=%s",
        len(sorted_cycles),
        cycle_length,
        period_length,
        next_period_start,
        phase.name,
    )

    return CyclePrediction(
        average_cycle_length=cycle_length,
        average_period_length=period_length,
        predicted_period=predicted_period,
        fertile_window=fertile_window,
        ovulation_day=ovulation_day,
        current_phase=phase,
        day_of_cycle=day_of_cycle,
    )
