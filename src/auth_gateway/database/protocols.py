"""Store contracts shared by the in-memory and PostgreSQL backings."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable


if TYPE_CHECKING:
    from auth_gateway.database.models import ApiKeyRecord, Product, UserRecord


@runtime_checkable
class ProductStore(Protocol):
    """Keyed product storage."""

    async def create(self, fields: dict[str, Any]) -> Product:
        """Store a new product and return it with its assigned id."""
        ...

    async def list_all(self) -> list[Product]:
        """Return every product in insertion order."""
        ...

    async def update(self, product_id: str, fields: dict[str, Any]) -> Product | None:
        """Apply ``fields`` to a product. Returns None if the id is unknown."""
        ...

    async def delete(self, product_id: str) -> bool:
        """Remove a product. Returns False if the id is unknown."""
        ...


@runtime_checkable
class UserStore(Protocol):
    """Credential source for Basic authentication and bearer login."""

    async def get(self, username: str) -> UserRecord | None: ...

    async def add(self, username: str, password_hash: str) -> UserRecord: ...


@runtime_checkable
class ApiKeyStore(Protocol):
    """Provisioned API keys."""

    async def get(self, key: str) -> ApiKeyRecord | None: ...

    async def add(self, record: ApiKeyRecord) -> ApiKeyRecord: ...

    async def set_active(self, key: str, active: bool) -> bool:
        """Flip a key's active flag. Returns False if the key is unknown."""
        ...
