"""Scoped key-value persistence.

Backends implement ``get``/``set`` and report success instead of raising,
so the app stays usable with in-memory state when storage is unavailable.
Values are JSON text; ``load_json``/``save_json`` handle encoding and fall
back to the caller's default on any failure.

Usage::

    store = MemoryStore(namespace="utero")
    cycles = await load_json(store, "utero-cycles", [])
    await save_json(store, "utero-cycles", cycles)
"""

from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, TypeVar

logger = logging.getLogger("utero.store")

T = TypeVar("T")


class KeyValueStore(ABC):
    """A namespaced string store.

    Attributes:
        namespace: Scope prefix separating this app's keys from others.
    """

    def __init__(self, namespace: str = "utero") -> None:
        self.namespace = namespace

    @abstractmethod
    async def get(self, key: str) -> tuple[bool, str | None]:
        """Read a raw value.

        Returns:
            ``(ok, value)``.  ``ok`` is False if the backend failed;
            ``value`` is None when the key is absent.
        """

    @abstractmethod
    async def set(self, key: str, value: str) -> bool:
        """Write a raw value.  Returns False if the backend failed."""

    async def ping(self) -> bool:
        """Cheap reachability check."""
        ok, _ = await self.get("__ping__")
        return ok


class MemoryStore(KeyValueStore):
    """Process-local store.  Contents are lost on restart."""

    def __init__(self, namespace: str = "utero") -> None:
        super().__init__(namespace)
        self._data: dict[tuple[str, str], str] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> tuple[bool, str | None]:
        async with self._lock:
            return True, self._data.get((self.namespace, key))

    async def set(self, key: str, value: str) -> bool:
        async with self._lock:
            self._data[(self.namespace, key)] = value
        return True


async def load_json(store: KeyValueStore, key: str, default: T) -> T | Any:
    """Read and decode a JSON value, returning ``default`` on any failure."""
    ok, raw = await store.get(key)
    if not ok:
        logger.warning("Error reading %s/%s from storage; using default", store.namespace, key)
        return default
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.warning("Corrupt JSON in %s/%s (%s); using default", store.namespace, key, exc)
        return default


async def save_json(store: KeyValueStore, key: str, value: Any) -> bool:
    """Encode and write a JSON value.  Failures are logged, never raised."""
    try:
        raw = json.dumps(value)
    except (TypeError, ValueError):
        logger.exception("Cannot serialize value for %s/%s", store.namespace, key)
        return False
    ok = await store.set(key, raw)
    if not ok:
        logger.warning("Error writing %s/%s to storage; keeping in-memory state", store.namespace, key)
    return ok
