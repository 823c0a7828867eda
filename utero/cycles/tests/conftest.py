"""Shared fixtures for cycle engine tests.

"Today" is always passed explicitly; no test reads the wall clock.
"""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from utero.cycles.calculator import Cycle
from utero.cycles.config_loader import CycleConfig, load_cycle_config

TEST_TODAY = date(2024, 1, 20)


def make_cycle(start: date, length: int = 5, cycle_id: str | None = None) -> Cycle:
    """A cycle starting on ``start`` lasting ``length`` days inclusive."""
    return Cycle(
        id=cycle_id or start.isoformat(),
        start_date=start,
        end_date=start + timedelta(days=length - 1),
    )


def build_cycles(first_start: date, gaps: list[int], length: int = 5) -> list[Cycle]:
    """Cycles whose consecutive starts are separated by ``gaps`` days."""
    cycles = [make_cycle(first_start, length)]
    start = first_start
    for gap in gaps:
        start += timedelta(days=gap)
        cycles.append(make_cycle(start, length))
    return cycles


@pytest.fixture
def cycle_config() -> CycleConfig:
    """Load the real bundled config for tests."""
    return load_cycle_config()


@pytest.fixture
def single_cycle() -> list[Cycle]:
    return [Cycle(id="1", start_date=date(2024, 1, 1), end_date=date(2024, 1, 5))]
