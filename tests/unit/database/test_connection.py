"""Unit tests for database connection module.

Tests cover:
- Connection pool initialization and schema creation
- Connection pool closing
- Pool getter
- Health checks
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, MagicMock, patch

import asyncpg
import pytest

import auth_gateway.database.connection as db_module
from auth_gateway.core.config import StorageBackend
from auth_gateway.core.config.settings import DatabaseSettings, StorageSettings
from auth_gateway.database.connection import (
    SCHEMA_STATEMENTS,
    check_database_health,
    close_database_pool,
    get_database_pool,
    init_database_pool,
)


if TYPE_CHECKING:
    from collections.abc import Callable

    from auth_gateway.core.config import Settings


pytestmark = pytest.mark.unit


@pytest.fixture
def postgres_settings(settings_factory: Callable[..., Settings]) -> Settings:
    return settings_factory(
        DATABASE_PASSWORD="db-secret",
        storage=StorageSettings(backend=StorageBackend.POSTGRES),
        database=DatabaseSettings(
            host="db.internal",
            port=5433,
            name="products",
            user="gateway",
            min_pool_size=1,
            max_pool_size=5,
        ),
    )


class TestGetDatabasePool:
    """Tests for get_database_pool function."""

    def test_raises_when_not_initialized(self) -> None:
        """Should raise RuntimeError when pool not initialized."""
        with pytest.raises(RuntimeError, match="not initialized"):
            get_database_pool()

    def test_returns_pool_when_initialized(self) -> None:
        """Should return pool when initialized."""
        mock_pool = MagicMock()
        db_module._pool = mock_pool

        assert get_database_pool() is mock_pool


class TestInitDatabasePool:
    """Tests for init_database_pool function."""

    @pytest.mark.asyncio
    async def test_initializes_pool(
        self,
        postgres_settings: Settings,
        mock_pool: MagicMock,
    ) -> None:
        """Should create the pool from settings and register it."""
        with patch(
            "auth_gateway.database.connection.asyncpg.create_pool",
            new_callable=AsyncMock,
            return_value=mock_pool,
        ) as create_pool:
            result = await init_database_pool(postgres_settings)

        assert result is mock_pool
        assert db_module._pool is mock_pool
        kwargs = create_pool.call_args.kwargs
        assert kwargs["host"] == "db.internal"
        assert kwargs["port"] == 5433
        assert kwargs["user"] == "gateway"
        assert kwargs["password"] == "db-secret"  # noqa: S105
        assert kwargs["max_size"] == 5

    @pytest.mark.asyncio
    async def test_creates_schema(
        self,
        postgres_settings: Settings,
        mock_pool: MagicMock,
        mock_conn: AsyncMock,
    ) -> None:
        """Should create every table inside one transaction."""
        with patch(
            "auth_gateway.database.connection.asyncpg.create_pool",
            new_callable=AsyncMock,
            return_value=mock_pool,
        ):
            await init_database_pool(postgres_settings)

        mock_conn.transaction.assert_called_once()
        assert mock_conn.execute.await_count == len(SCHEMA_STATEMENTS)

    @pytest.mark.asyncio
    async def test_schema_failure_closes_pool(
        self,
        postgres_settings: Settings,
        mock_pool: MagicMock,
        mock_conn: AsyncMock,
    ) -> None:
        """Should close the pool and re-raise if the schema cannot be created."""
        mock_conn.execute.side_effect = asyncpg.PostgresError("boom")

        with (
            patch(
                "auth_gateway.database.connection.asyncpg.create_pool",
                new_callable=AsyncMock,
                return_value=mock_pool,
            ),
            pytest.raises(asyncpg.PostgresError),
        ):
            await init_database_pool(postgres_settings)

        mock_pool.close.assert_awaited_once()
        assert db_module._pool is None


class TestCloseDatabasePool:
    """Tests for close_database_pool function."""

    @pytest.mark.asyncio
    async def test_closes_pool(self) -> None:
        """Should close the database pool."""
        mock_pool = AsyncMock()
        db_module._pool = mock_pool

        await close_database_pool()

        mock_pool.close.assert_called_once()
        assert db_module._pool is None

    @pytest.mark.asyncio
    async def test_noop_when_not_initialized(self) -> None:
        """Should do nothing when no pool is open."""
        await close_database_pool()

        assert db_module._pool is None


class TestCheckDatabaseHealth:
    """Tests for check_database_health function."""

    @pytest.mark.asyncio
    async def test_not_initialized(self) -> None:
        """Should report a missing pool."""
        assert await check_database_health() == "not_initialized"

    @pytest.mark.asyncio
    async def test_healthy(self, mock_pool: MagicMock) -> None:
        """Should report healthy when SELECT 1 succeeds."""
        db_module._pool = mock_pool

        assert await check_database_health() == "healthy"

    @pytest.mark.asyncio
    async def test_unhealthy(self, mock_pool: MagicMock, mock_conn: AsyncMock) -> None:
        """Should report unhealthy when the query fails."""
        mock_conn.fetchval.side_effect = OSError("connection reset")
        db_module._pool = mock_pool

        assert await check_database_health() == "unhealthy"
