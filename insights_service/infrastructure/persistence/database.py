"""
Asyncpg pool owner for the insights table.

One DatabaseManager lives on app.state for the process lifetime; the
repository borrows connections through acquire().
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import asyncpg

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Asyncpg connection pool with explicit connect/disconnect."""

    def __init__(
        self,
        dsn: str,
        min_size: int = 1,
        max_size: int = 10,
        command_timeout: float = 10.0,
    ):
        self._dsn = dsn
        self._min_size = min_size
        self._max_size = max_size
        self._command_timeout = command_timeout
        self._pool: Optional[asyncpg.Pool] = None

    @property
    def connected(self) -> bool:
        return self._pool is not None

    async def connect(self) -> None:
        if self._pool is not None:
            return
        self._pool = await asyncpg.create_pool(
            dsn=self._dsn,
            min_size=self._min_size,
            max_size=self._max_size,
            command_timeout=self._command_timeout,
        )
        logger.info("db_pool_created", extra={"min_size": self._min_size, "max_size": self._max_size})

    async def disconnect(self) -> None:
        if self._pool is None:
            return
        pool, self._pool = self._pool, None
        await pool.close()
        logger.info("db_pool_closed")

    async def get_pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("Database pool not initialized. Call connect() first")
        return self._pool

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        pool = await self.get_pool()
        async with pool.acquire() as conn:
            yield conn

    async def health_check(self) -> dict[str, Optional[float]]:
        """Run SELECT 1 and report latency. Never raises."""
        start = time.perf_counter()
        try:
            async with self.acquire() as conn:
                await conn.fetchval("SELECT 1")
        except Exception as e:
            logger.error("db_health_check_failed", exc_info=True)
            return {"healthy": False, "error": str(e), "latency_ms": None}
        return {"healthy": True, "error": None, "latency_ms": round((time.perf_counter() - start) * 1000, 2)}


def create_database_manager_from_settings(settings) -> DatabaseManager:
    if not settings.DB_DSN:
        raise RuntimeError("INSIGHTS_DB_DSN is not configured")
    return DatabaseManager(
        dsn=settings.DB_DSN,
        min_size=settings.DB_POOL_MIN_SIZE,
        max_size=settings.DB_POOL_MAX_SIZE,
        command_timeout=settings.DB_COMMAND_TIMEOUT,
    )
