"""PostgreSQL product repository."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any

from auth_gateway.database.connection import get_database_pool
from auth_gateway.database.models import Product


if TYPE_CHECKING:
    from asyncpg import Pool, Record


_COLUMNS = "id, name, category, price"
_UPDATABLE = ("name", "category", "price")

_INSERT = f"""
    INSERT INTO products (id, name, category, price)
    VALUES ($1, $2, $3, $4)
    RETURNING {_COLUMNS}
"""  # noqa: S608

_SELECT_ALL = f"SELECT {_COLUMNS} FROM products ORDER BY position"  # noqa: S608

_UPDATE = f"""
    UPDATE products
    SET name = COALESCE($2, name),
        category = COALESCE($3, category),
        price = COALESCE($4, price)
    WHERE id = $1
    RETURNING {_COLUMNS}
"""  # noqa: S608

_DELETE = "DELETE FROM products WHERE id = $1"


class ProductRepository:
    """Products in the ``products`` table, listed in insertion order."""

    def __init__(self, pool: Pool | None = None) -> None:
        self._pool = pool

    @property
    def pool(self) -> Pool:
        if self._pool is not None:
            return self._pool
        return get_database_pool()

    async def create(self, fields: dict[str, Any]) -> Product:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                _INSERT,
                uuid.uuid4().hex,
                fields["name"],
                fields["category"],
                fields["price"],
            )
        return _row_to_product(row)

    async def list_all(self) -> list[Product]:
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(_SELECT_ALL)
        return [_row_to_product(row) for row in rows]

    async def update(self, product_id: str, fields: dict[str, Any]) -> Product | None:
        values = [fields.get(column) for column in _UPDATABLE]
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(_UPDATE, product_id, *values)
        return _row_to_product(row) if row is not None else None

    async def delete(self, product_id: str) -> bool:
        async with self.pool.acquire() as conn:
            status = await conn.execute(_DELETE, product_id)
        # asyncpg returns the command tag, e.g. "DELETE 1"
        return status.rsplit(" ", 1)[-1] != "0"


def _row_to_product(row: Record) -> Product:
    return Product(
        id=row["id"],
        name=row["name"],
        category=row["category"],
        price=float(row["price"]),
    )
