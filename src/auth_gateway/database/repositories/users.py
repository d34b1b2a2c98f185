"""PostgreSQL user repository."""

from __future__ import annotations

from typing import TYPE_CHECKING

from auth_gateway.database.connection import get_database_pool
from auth_gateway.database.models import UserRecord


if TYPE_CHECKING:
    from asyncpg import Pool


_SELECT = "SELECT username, password_hash FROM users WHERE username = $1"

_UPSERT = """
    INSERT INTO users (username, password_hash)
    VALUES ($1, $2)
    ON CONFLICT (username) DO UPDATE SET password_hash = EXCLUDED.password_hash
"""


class UserRepository:
    """Credential source backed by the ``users`` table."""

    def __init__(self, pool: Pool | None = None) -> None:
        self._pool = pool

    @property
    def pool(self) -> Pool:
        if self._pool is not None:
            return self._pool
        return get_database_pool()

    async def get(self, username: str) -> UserRecord | None:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(_SELECT, username)
        if row is None:
            return None
        return UserRecord(username=row["username"], password_hash=row["password_hash"])

    async def add(self, username: str, password_hash: str) -> UserRecord:
        async with self.pool.acquire() as conn:
            await conn.execute(_UPSERT, username, password_hash)
        return UserRecord(username=username, password_hash=password_hash)
