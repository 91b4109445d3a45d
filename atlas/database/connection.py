import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import psycopg
from psycopg_pool import AsyncConnectionPool

from atlas.config.settings import Settings
from atlas.logging.logger import Log


def build_conninfo(settings: Settings) -> str:
    return (
        f"host={settings.db_host} "
        f"port={settings.db_port} "
        f"dbname={settings.db_database} "
        f"user={settings.db_username} "
        f"password={settings.db_password}"
    )


class Database:
    """Owns the connection pool; opened lazily and reopened after invalidation."""

    def __init__(self, settings: Settings) -> None:
        self._conninfo = build_conninfo(settings)
        self._max_size = settings.db_pool_max_size
        self._timeout = settings.store_timeout_seconds
        self._pool: AsyncConnectionPool | None = None
        self._open_lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    async def _ensure_pool(self) -> AsyncConnectionPool:
        if self._pool is not None:
            return self._pool
        async with self._open_lock:
            # Another caller may have reopened the pool while we waited.
            if self._pool is not None:
                return self._pool
            pool = AsyncConnectionPool(
                self._conninfo,
                min_size=1,
                max_size=self._max_size,
                timeout=self._timeout,
                open=False,
            )
            try:
                await pool.open(wait=True, timeout=self._timeout)
            except BaseException:
                await pool.close(timeout=0)
                raise
            self._pool = pool
            Log.debug("Document store connection pool opened")
            return pool

    @asynccontextmanager
    async def connection(self) -> AsyncGenerator[psycopg.AsyncConnection[Any], None]:
        """Yield a pooled connection. Caller manages commit/rollback."""
        pool = await self._ensure_pool()
        async with pool.connection() as conn:
            yield conn

    async def invalidate(self) -> None:
        """Discard the pool so the next operation opens a fresh one."""
        pool, self._pool = self._pool, None
        if pool is None:
            return
        Log.warning("Document store connection invalidated, will reopen on next use")
        try:
            await pool.close(timeout=0)
        except Exception as exc:
            Log.debug(f"Ignoring error while closing invalidated pool: {exc}")

    async def close(self) -> None:
        pool, self._pool = self._pool, None
        if pool is not None:
            await pool.close()
