"""Postgres-backed key-value store.

Uses ``asyncpg`` with a module-level connection pool created once at app
startup.  Rows live in a single ``kv_store`` table keyed by
``(namespace, key)``; values are stored as ``jsonb`` and read back as JSON text.
"""

from __future__ import annotations

import asyncio
import logging

import asyncpg

from utero.config import Settings, get_settings
from utero.services.store import KeyValueStore

logger = logging.getLogger("utero.db")

# Module-level connection pool, initialized once at app startup
_pool: asyncpg.Pool | None = None

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS kv_store (
    namespace  TEXT        NOT NULL,
    key        TEXT        NOT NULL,
    value      JSONB       NOT NULL,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    PRIMARY KEY (namespace, key)
)
"""

# Errors that mean "storage unavailable", not a programming mistake.
STORAGE_ERRORS = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    asyncio.TimeoutError,
    OSError,
    RuntimeError,
)


async def init_pool(settings: Settings | None = None) -> asyncpg.Pool:
    """Create the asyncpg connection pool and the kv_store table."""
    global _pool
    s = settings or get_settings()
    _pool = await asyncpg.create_pool(
        s.database_url,
        min_size=1,
        max_size=5,
        command_timeout=10,
    )
    try:
        async with _pool.acquire() as conn:
            await conn.execute(SCHEMA_SQL)
    except STORAGE_ERRORS:
        await close_pool()
        raise
    logger.info("Database pool initialized (min=1, max=5)")
    return _pool


async def close_pool() -> None:
    """Drain the pool. Call at app shutdown."""
    global _pool
    if _pool:
        await _pool.close()
        _pool = None
        logger.info("Database pool closed")


def get_pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("Database pool not initialized — call init_pool() first")
    return _pool


class PostgresStore(KeyValueStore):
    """KeyValueStore over the shared asyncpg pool."""

    async def get(self, key: str) -> tuple[bool, str | None]:
        try:
            async with get_pool().acquire() as conn:
                value = await conn.fetchval(
                    "SELECT value FROM kv_store WHERE namespace = $1 AND key = $2",
                    self.namespace, key,
                )
        except STORAGE_ERRORS as exc:
            logger.warning("kv_store read failed for %s/%s: %s", self.namespace, key, exc)
            return False, None
        return True, value

    async def set(self, key: str, value: str) -> bool:
        try:
            async with get_pool().acquire() as conn:
                await conn.execute(
                    """
                    INSERT INTO kv_store (namespace, key, value)
                    VALUES ($1, $2, $3::jsonb)
                    ON CONFLICT (namespace, key) DO UPDATE SET
                        value = EXCLUDED.value,
                        updated_at = NOW()
                    """,
                    self.namespace, key, value,
                )
        except STORAGE_ERRORS as exc:
            logger.warning("kv_store write failed for %s/%s: %s", self.namespace, key, exc)
            return False
        return True
