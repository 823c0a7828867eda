"""Tests for key-value persistence and the tracker state mirror."""

from __future__ import annotations

import asyncio
from datetime import date

import pytest

from utero.cycles.calculator import Cycle
from utero.cycles.history import save_period
from utero.cycles.symptoms import DailyLog, Symptom, toggle_symptom
from utero.services.state import TrackerState
from utero.services.store import MemoryStore, load_json, save_json
from utero.services.tests.conftest import UnavailableStore


class TestMemoryStore:
    @pytest.mark.asyncio
    async def test_missing_key(self, memory_store: MemoryStore) -> None:
        assert await memory_store.get("absent") == (True, None)

    @pytest.mark.asyncio
    async def test_set_then_get(self, memory_store: MemoryStore) -> None:
        assert await memory_store.set("k", "[1]")
        assert await memory_store.get("k") == (True, "[1]")

    @pytest.mark.asyncio
    async def test_namespaces_are_isolated(self) -> None:
        a = MemoryStore(namespace="a")
        b = MemoryStore(namespace="b")
        await a.set("k", "1")
        assert await b.get("k") == (True, None)

    @pytest.mark.asyncio
    async def test_ping(self, memory_store: MemoryStore) -> None:
        assert await memory_store.ping()


class TestJsonHelpers:
    @pytest.mark.asyncio
    async def test_round_trip(self, memory_store: MemoryStore) -> None:
        assert await save_json(memory_store, "logs", {"2024-01-01": {"symptoms": ["Acne"]}})
        assert await load_json(memory_store, "logs", {}) == {"2024-01-01": {"symptoms": ["Acne"]}}

    @pytest.mark.asyncio
    async def test_absent_key_returns_default(self, memory_store: MemoryStore) -> None:
        assert await load_json(memory_store, "cycles", []) == []

    @pytest.mark.asyncio
    async def test_corrupt_json_returns_default(
        self, memory_store: MemoryStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        await memory_store.set("cycles", "{not json")
        assert await load_json(memory_store, "cycles", []) == []
        assert "Corrupt JSON" in caplog.text

    @pytest.mark.asyncio
    async def test_read_failure_returns_default(
        self, unavailable_store: UnavailableStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        assert await load_json(unavailable_store, "cycles", ["fallback"]) == ["fallback"]
        assert "Error reading" in caplog.text

    @pytest.mark.asyncio
    async def test_write_failure_reported_not_raised(
        self, unavailable_store: UnavailableStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        assert not await save_json(unavailable_store, "cycles", [])
        assert "Error writing" in caplog.text

    @pytest.mark.asyncio
    async def test_unserializable_value(self, memory_store: MemoryStore) -> None:
        assert not await save_json(memory_store, "cycles", {"when": date(2024, 1, 1)})


class TestTrackerState:
    @pytest.mark.asyncio
    async def test_load_parses_stored_records(self, memory_store: MemoryStore) -> None:
        await save_json(
            memory_store,
            "utero-cycles",
            [{"id": "1", "startDate": "2024-01-01", "endDate": "2024-01-05"}],
        )
        await save_json(memory_store, "utero-logs", {"2024-01-02": {"symptoms": ["Cramps"]}})
        state = TrackerState(memory_store)
        await state.load()
        assert state.cycles == [Cycle(id="1", start_date=date(2024, 1, 1), end_date=date(2024, 1, 5))]
        assert state.logs == {"2024-01-02": DailyLog(symptoms=(Symptom.cramps,))}

    @pytest.mark.asyncio
    async def test_updates_are_persisted(self, memory_store: MemoryStore) -> None:
        state = TrackerState(memory_store)
        await state.load()
        await state.update_cycles(
            lambda cycles: save_period(cycles, date(2024, 1, 1), date(2024, 1, 5), cycle_id="x")
        )
        await state.update_logs(lambda logs: toggle_symptom(logs, date(2024, 1, 1), Symptom.acne))

        assert await load_json(memory_store, "utero-cycles", []) == [
            {"id": "x", "startDate": "2024-01-01", "endDate": "2024-01-05"}
        ]
        assert await load_json(memory_store, "utero-logs", {}) == {
            "2024-01-01": {"symptoms": ["Acne"]}
        }

    @pytest.mark.asyncio
    async def test_unavailable_storage_keeps_ephemeral_state(
        self, unavailable_store: UnavailableStore
    ) -> None:
        state = TrackerState(unavailable_store)
        await state.load()
        assert state.cycles == []
        await state.update_cycles(
            lambda cycles: save_period(cycles, date(2024, 1, 1), date(2024, 1, 5), cycle_id="x")
        )
        assert [c.id for c in state.cycles] == ["x"]

    @pytest.mark.asyncio
    async def test_failed_change_leaves_state_untouched(self, memory_store: MemoryStore) -> None:
        state = TrackerState(memory_store)
        await state.load()

        def boom(cycles: list[Cycle]) -> list[Cycle]:
            raise ValueError("rejected")

        with pytest.raises(ValueError):
            await state.update_cycles(boom)
        assert state.cycles == []

    @pytest.mark.asyncio
    async def test_returned_collections_are_copies(self, memory_store: MemoryStore) -> None:
        state = TrackerState(memory_store)
        await state.load()
        state.cycles.append(Cycle(id="z", start_date=date(2024, 1, 1), end_date=date(2024, 1, 1)))
        assert state.cycles == []


class SlowFirstWriteStore(MemoryStore):
    """Memory store whose first write yields for a while before landing."""

    def __init__(self) -> None:
        super().__init__(namespace="test")
        self._writes = 0

    async def set(self, key: str, value: str) -> bool:
        self._writes += 1
        if self._writes == 1:
            await asyncio.sleep(0.05)
        return await super().set(key, value)


class TestConcurrentUpdates:
    @pytest.mark.asyncio
    async def test_storage_keeps_latest_cycles(self) -> None:
        store = SlowFirstWriteStore()
        state = TrackerState(store)
        await state.load()

        await asyncio.gather(
            state.update_cycles(
                lambda cycles: save_period(cycles, date(2024, 1, 1), date(2024, 1, 5), cycle_id="a")
            ),
            state.update_cycles(
                lambda cycles: save_period(cycles, date(2024, 1, 29), date(2024, 2, 2), cycle_id="b")
            ),
        )

        persisted = await load_json(store, "utero-cycles", [])
        assert [c.id for c in state.cycles] == ["a", "b"]
        assert [r["id"] for r in persisted] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_storage_keeps_latest_logs(self) -> None:
        store = SlowFirstWriteStore()
        state = TrackerState(store)
        await state.load()
        day = date(2024, 1, 3)

        await asyncio.gather(
            state.update_logs(lambda logs: toggle_symptom(logs, day, Symptom.cramps)),
            state.update_logs(lambda logs: toggle_symptom(logs, day, Symptom.acne)),
        )

        assert await load_json(store, "utero-logs", {}) == {
            "2024-01-03": {"symptoms": ["Cramps", "Acne"]}
        }
