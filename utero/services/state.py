"""In-memory tracker state mirrored to the key-value store.

State is read from storage once at startup and written back after every
change.  The in-memory copy is authoritative for the running process, so a
failed read starts from empty state and a failed write keeps the update
for this session.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from utero.cycles.calculator import Cycle
from utero.cycles.history import cycles_from_records, cycles_to_records
from utero.cycles.symptoms import Logs, logs_from_records, logs_to_records
from utero.services.store import KeyValueStore, load_json, save_json

logger = logging.getLogger("utero.state")


class TrackerState:
    """Cycle history and symptom logs for the single local user.

    Usage::

        state = TrackerState(store)
        await state.load()
        await state.update_cycles(lambda cycles: save_period(cycles, start, end))
    """

    def __init__(
        self,
        store: KeyValueStore,
        cycles_key: str = "utero-cycles",
        logs_key: str = "utero-logs",
    ) -> None:
        self.store = store
        self._cycles_key = cycles_key
        self._logs_key = logs_key
        self._cycles: list[Cycle] = []
        self._logs: Logs = {}
        self._lock = asyncio.Lock()

    @property
    def cycles(self) -> list[Cycle]:
        return list(self._cycles)

    @property
    def logs(self) -> Logs:
        return dict(self._logs)

    async def load(self) -> None:
        """Populate state from storage, falling back to empty history."""
        raw_cycles = await load_json(self.store, self._cycles_key, [])
        raw_logs = await load_json(self.store, self._logs_key, {})
        async with self._lock:
            self._cycles = cycles_from_records(raw_cycles)
            self._logs = logs_from_records(raw_logs)
        logger.info(
            "Loaded %d cycle(s) and %d symptom log day(s)",
            len(self._cycles),
            len(self._logs),
        )

    async def update_cycles(self, change: Callable[[list[Cycle]], list[Cycle]]) -> list[Cycle]:
        """Apply ``change`` to the history and persist the result.

        Exceptions raised by ``change`` propagate and leave state untouched.
        Writes happen under the lock so storage sees updates in the same
        order as memory.
        """
        async with self._lock:
            updated = change(list(self._cycles))
            self._cycles = updated
            await save_json(self.store, self._cycles_key, cycles_to_records(updated))
        return list(updated)

    async def update_logs(self, change: Callable[[Logs], Logs]) -> Logs:
        """Apply ``change`` to the symptom logs and persist the result."""
        async with self._lock:
            updated = change(dict(self._logs))
            self._logs = updated
            await save_json(self.store, self._logs_key, logs_to_records(updated))
        return dict(updated)
