"""PostgreSQL API key repository.

Every lookup hits the database so a deactivated key is rejected on the
very next request. Re-seeding on startup leaves the ``active`` flag of an
existing key alone.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from auth_gateway.database.connection import get_database_pool
from auth_gateway.database.models import ApiKeyRecord


if TYPE_CHECKING:
    from asyncpg import Pool


_SELECT = "SELECT key, owner, active FROM api_keys WHERE key = $1"

_UPSERT = """
    INSERT INTO api_keys (key, owner, active)
    VALUES ($1, $2, $3)
    ON CONFLICT (key) DO UPDATE
    SET owner = EXCLUDED.owner
"""

_SET_ACTIVE = "UPDATE api_keys SET active = $2 WHERE key = $1"


class ApiKeyRepository:
    """API keys in the ``api_keys`` table."""

    def __init__(self, pool: Pool | None = None) -> None:
        self._pool = pool

    @property
    def pool(self) -> Pool:
        if self._pool is not None:
            return self._pool
        return get_database_pool()

    async def get(self, key: str) -> ApiKeyRecord | None:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(_SELECT, key)
        if row is None:
            return None
        return ApiKeyRecord(key=row["key"], owner=row["owner"], active=row["active"])

    async def add(self, record: ApiKeyRecord) -> ApiKeyRecord:
        async with self.pool.acquire() as conn:
            await conn.execute(_UPSERT, record.key, record.owner, record.active)
        return record

    async def set_active(self, key: str, active: bool) -> bool:
        async with self.pool.acquire() as conn:
            status = await conn.execute(_SET_ACTIVE, key, active)
        return status.rsplit(" ", 1)[-1] != "0"
