"""Shared fixtures for storage tests."""

from __future__ import annotations

import pytest

from utero.services.store import KeyValueStore, MemoryStore


class UnavailableStore(KeyValueStore):
    """A backend whose every call fails, like storage that is down or full."""

    async def get(self, key: str) -> tuple[bool, str | None]:
        return False, None

    async def set(self, key: str, value: str) -> bool:
        return False


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore(namespace="test")


@pytest.fixture
def unavailable_store() -> UnavailableStore:
    return UnavailableStore(namespace="test")
