"""Daily symptom log.

Symptoms are a closed set of tags logged per calendar day.  Logs are keyed
by the ``YYYY-MM-DD`` date key so calendar lookups and stored JSON agree.
The prediction engine never reads them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Mapping

from utero.cycles.dates import date_key, parse_date_key

logger = logging.getLogger("utero.cycles.symptoms")


class Symptom(str, Enum):
    cramps = "Cramps"
    headache = "Headache"
    bloating = "Bloating"
    fatigue = "Fatigue"
    mood_swings = "Mood Swings"
    cravings = "Cravings"
    acne = "Acne"
    tender_breasts = "Tender Breasts"


@dataclass(frozen=True)
class DailyLog:
    """Symptoms logged for one day, in the order they were added."""

    symptoms: tuple[Symptom, ...] = ()

    def has(self, symptom: Symptom) -> bool:
        return symptom in self.symptoms


Logs = dict[str, DailyLog]


def toggle_symptom(logs: Mapping[str, DailyLog], day: date, symptom: Symptom) -> Logs:
    """Add ``symptom`` to the day's log, or remove it if already present.

    Args:
        logs:    Current logs.  Not modified.
        day:     Day to toggle.
        symptom: Symptom tag.

    Returns:
        A new logs mapping.  A day whose last symptom is removed keeps an
        empty entry.
    """
    key = date_key(day)
    current = logs.get(key, DailyLog())
    if symptom in current.symptoms:
        updated = tuple(s for s in current.symptoms if s != symptom)
    else:
        updated = current.symptoms + (symptom,)

    new_logs = dict(logs)
    new_logs[key] = DailyLog(symptoms=updated)
    return new_logs


def log_for_day(logs: Mapping[str, DailyLog], day: date) -> DailyLog | None:
    return logs.get(date_key(day))


# ---------------------------------------------------------------------------
# JSON boundary
# ---------------------------------------------------------------------------


def logs_from_records(records: Any) -> Logs:
    """Build logs from stored ``{"YYYY-MM-DD": {"symptoms": [...]}}`` JSON.

    Malformed date keys and unknown symptom labels are dropped and logged.
    """
    if not isinstance(records, Mapping):
        logger.warning("Ignoring symptom logs: expected a mapping, got %s", type(records).__name__)
        return {}

    logs: Logs = {}
    for key, entry in records.items():
        try:
            day = parse_date_key(key)
        except ValueError:
            logger.warning("Skipping symptom log with malformed date key %r", key)
            continue

        raw_symptoms = entry.get("symptoms", []) if isinstance(entry, Mapping) else []
        symptoms: list[Symptom] = []
        for label in raw_symptoms:
            try:
                symptoms.append(Symptom(label))
            except ValueError:
                logger.warning("Dropping unknown symptom %r on %s", label, key)
        logs[date_key(day)] = DailyLog(symptoms=tuple(symptoms))
    return logs


def logs_to_records(logs: Mapping[str, DailyLog]) -> dict[str, dict[str, list[str]]]:
    return {
        key: {"symptoms": [s.value for s in log.symptoms]}
        for key, log in logs.items()
    }
