"""PostgreSQL connection pool management.

The pool is created during the application lifespan when the ``postgres``
storage backend is selected, and the tables the repositories use are
created if they do not exist yet.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import asyncpg

from auth_gateway.observability.logging import get_logger


if TYPE_CHECKING:
    from asyncpg import Pool

    from auth_gateway.core.config import Settings

logger = get_logger(__name__)

_pool: Pool | None = None

SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS products (
        position BIGSERIAL UNIQUE,
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        category TEXT NOT NULL,
        price DOUBLE PRECISION NOT NULL CHECK (price >= 0)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS users (
        username TEXT PRIMARY KEY,
        password_hash TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS api_keys (
        key TEXT PRIMARY KEY,
        owner TEXT NOT NULL,
        active BOOLEAN NOT NULL DEFAULT TRUE
    )
    """,
)


async def init_database_pool(settings: Settings) -> Pool:
    """Create the connection pool, verify it and ensure the schema exists."""
    global _pool  # noqa: PLW0603

    logger.info(
        "Initializing database connection pool",
        host=settings.database.host,
        port=settings.database.port,
        database=settings.database.name,
    )

    pool = await asyncpg.create_pool(
        host=settings.database.host,
        port=settings.database.port,
        database=settings.database.name,
        user=settings.database.user,
        password=settings.DATABASE_PASSWORD or None,
        min_size=settings.database.min_pool_size,
        max_size=settings.database.max_pool_size,
        command_timeout=settings.database.command_timeout,
        ssl=settings.database.ssl or None,
    )

    try:
        async with pool.acquire() as conn, conn.transaction():
            for statement in SCHEMA_STATEMENTS:
                await conn.execute(statement)
    except asyncpg.PostgresError:
        logger.exception("Failed to prepare database schema")
        await pool.close()
        raise

    _pool = pool
    logger.info("Database connection established successfully")
    return pool


async def close_database_pool() -> None:
    """Close the connection pool if one is open."""
    global _pool  # noqa: PLW0603

    if _pool is not None:
        await _pool.close()
        _pool = None
        logger.info("Database connection pool closed")


def get_database_pool() -> Pool:
    """Return the open pool.

    Raises:
        RuntimeError: If the pool has not been initialized.
    """
    if _pool is None:
        msg = "Database pool not initialized. Call init_database_pool() first."
        raise RuntimeError(msg)
    return _pool


async def check_database_health() -> str:
    """Return ``healthy``, ``unhealthy`` or ``not_initialized``."""
    if _pool is None:
        return "not_initialized"
    try:
        async with _pool.acquire() as conn:
            await conn.fetchval("SELECT 1")
    except (asyncpg.PostgresError, OSError):
        logger.warning("Database health check failed")
        return "unhealthy"
    return "healthy"
