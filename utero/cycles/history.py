"""Cycle history maintenance: validation, the save/merge policy, and the
stored-record boundary.

Saving a period either edits the most recent cycle or appends a new one:

- sort the existing cycles by start date
- if the new start is on/before the last cycle's end, replace that cycle
- otherwise append

This keeps the stored history chronological and free of overlaps in the
normal case.  The prediction engine still sorts defensively.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Mapping

from utero.cycles.calculator import Cycle, sort_cycles
from utero.cycles.dates import date_key, parse_date_key, start_of_day

logger = logging.getLogger("utero.cycles.history")


class PeriodValidationError(ValueError):
    """Raised when a logged period cannot be saved."""


@dataclass(frozen=True)
class PeriodEntry:
    """Start/end dates pre-filled in the log-period form."""

    start_date: date
    end_date: date


def new_cycle_id(now: float | None = None) -> str:
    """Creation-time id: epoch milliseconds as a string."""
    return str(int((time.time() if now is None else now) * 1000))


def validate_period(start_date: date | None, end_date: date | None) -> None:
    """Check a period before saving.

    Raises:
        PeriodValidationError: If either date is missing or start is after end.
    """
    if not start_date or not end_date:
        raise PeriodValidationError("Please select both a start and end date.")
    if start_of_day(start_date) > start_of_day(end_date):
        raise PeriodValidationError("Start date cannot be after the end date.")


def save_period(
    cycles: Iterable[Cycle],
    start_date: date,
    end_date: date,
    cycle_id: str | None = None,
    now: float | None = None,
) -> list[Cycle]:
    """Apply the replace-or-append policy for a newly logged period.

    Args:
        cycles:     Existing history, any order.  Not modified.
        start_date: First day of the logged period.
        end_date:   Last day of the logged period.
        cycle_id:   Id for the saved cycle.  Defaults to ``new_cycle_id(now)``.
        now:        Epoch seconds used for the default id.

    Returns:
        The new history, sorted by start date.

    Raises:
        PeriodValidationError: If the dates are invalid.
    """
    validate_period(start_date, end_date)

    new_cycle = Cycle(
        id=cycle_id or new_cycle_id(now),
        start_date=start_of_day(start_date),
        end_date=start_of_day(end_date),
    )
    history = sort_cycles(cycles)

    if history and new_cycle.start_date <= start_of_day(history[-1].end_date):
        logger.info(
            "Replacing last cycle %s (%s..%s) with %s..%s",
            history[-1].id,
            history[-1].start_date,
            history[-1].end_date,
            new_cycle.start_date,
            new_cycle.end_date,
        )
        history[-1] = new_cycle
        return sort_cycles(history)

    logger.info("Appending cycle %s..%s", new_cycle.start_date, new_cycle.end_date)
    history.append(new_cycle)
    return sort_cycles(history)


def default_period_entry(cycles: Iterable[Cycle], today: date | None = None) -> PeriodEntry:
    """Dates to pre-fill when the user opens the log-period form.

    The last cycle's dates when there is history, otherwise today for both.
    """
    history = sort_cycles(cycles)
    if history:
        last = history[-1]
        return PeriodEntry(start_date=last.start_date, end_date=last.end_date)
    day = start_of_day(today or date.today())
    return PeriodEntry(start_date=day, end_date=day)


# ---------------------------------------------------------------------------
# Stored-record boundary
# ---------------------------------------------------------------------------


def cycle_from_record(record: Mapping[str, Any]) -> Cycle:
    """Parse one ``{id, startDate, endDate}`` record.

    Raises:
        ValueError: If a date is missing or malformed.
    """
    try:
        start = parse_date_key(record["startDate"])
        end = parse_date_key(record["endDate"])
    except KeyError as exc:
        raise ValueError(f"Cycle record missing {exc.args[0]!r}") from exc
    return Cycle(id=str(record.get("id", "")), start_date=start, end_date=end)


def cycles_from_records(records: Any) -> list[Cycle]:
    """Parse stored cycle records, skipping any that are invalid."""
    if not isinstance(records, list):
        logger.warning("Ignoring cycle history: expected a list, got %s", type(records).__name__)
        return []

    cycles: list[Cycle] = []
    for record in records:
        if not isinstance(record, Mapping):
            logger.warning("Skipping non-object cycle record %r", record)
            continue
        try:
            cycles.append(cycle_from_record(record))
        except ValueError as exc:
            logger.warning("Skipping invalid cycle record %r: %s", record.get("id"), exc)
    return cycles


def cycles_to_records(cycles: Iterable[Cycle]) -> list[dict[str, str]]:
    return [
        {
            "id": c.id,
            "startDate": date_key(c.start_date),
            "endDate": date_key(c.end_date),
        }
        for c in cycles
    ]
