"""Process-local stores.

Used for the demo deployment and for tests. Reads go straight to the
dictionaries; writes are serialized by a per-store ``asyncio.Lock``.
"""

from __future__ import annotations

import asyncio
import uuid
from typing import Any

from auth_gateway.database.models import ApiKeyRecord, Product, UserRecord


class InMemoryProductStore:
    """Products kept in an insertion-ordered dict."""

    def __init__(self) -> None:
        self._products: dict[str, Product] = {}
        self._lock = asyncio.Lock()

    async def create(self, fields: dict[str, Any]) -> Product:
        product = Product(id=uuid.uuid4().hex, **fields)
        async with self._lock:
            self._products[product.id] = product
        return product

    async def list_all(self) -> list[Product]:
        return list(self._products.values())

    async def update(self, product_id: str, fields: dict[str, Any]) -> Product | None:
        async with self._lock:
            current = self._products.get(product_id)
            if current is None:
                return None
            updated = current.model_copy(update=fields)
            self._products[product_id] = updated
        return updated

    async def delete(self, product_id: str) -> bool:
        async with self._lock:
            return self._products.pop(product_id, None) is not None


class InMemoryUserStore:
    """Users keyed by username."""

    def __init__(self) -> None:
        self._users: dict[str, UserRecord] = {}
        self._lock = asyncio.Lock()

    async def get(self, username: str) -> UserRecord | None:
        return self._users.get(username)

    async def add(self, username: str, password_hash: str) -> UserRecord:
        record = UserRecord(username=username, password_hash=password_hash)
        async with self._lock:
            self._users[username] = record
        return record


class InMemoryApiKeyStore:
    """API key records keyed by the key string."""

    def __init__(self) -> None:
        self._keys: dict[str, ApiKeyRecord] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> ApiKeyRecord | None:
        return self._keys.get(key)

    async def add(self, record: ApiKeyRecord) -> ApiKeyRecord:
        async with self._lock:
            self._keys[record.key] = record
        return record

    async def set_active(self, key: str, active: bool) -> bool:
        async with self._lock:
            record = self._keys.get(key)
            if record is None:
                return False
            self._keys[key] = record.model_copy(update={"active": active})
        return True
