"""Store selection and seeding.

``open_stores`` builds the three stores for the configured backend and
provisions the users and API keys listed in settings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from auth_gateway.core.config import StorageBackend
from auth_gateway.database.connection import close_database_pool, init_database_pool
from auth_gateway.database.memory import (
    InMemoryApiKeyStore,
    InMemoryProductStore,
    InMemoryUserStore,
)
from auth_gateway.database.models import ApiKeyRecord
from auth_gateway.database.repositories import (
    ApiKeyRepository,
    ProductRepository,
    UserRepository,
)
from auth_gateway.observability.logging import get_logger


if TYPE_CHECKING:
    from auth_gateway.auth.passwords import PasswordHasher
    from auth_gateway.core.config import Settings
    from auth_gateway.database.protocols import ApiKeyStore, ProductStore, UserStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class Stores:
    """The stores one application instance works with."""

    backend: StorageBackend
    products: ProductStore
    users: UserStore
    api_keys: ApiKeyStore


async def open_stores(settings: Settings, hasher: PasswordHasher) -> Stores:
    """Create the stores for ``settings.storage.backend`` and seed them."""
    backend = settings.storage.backend
    if backend is StorageBackend.POSTGRES:
        pool = await init_database_pool(settings)
        stores = Stores(
            backend=backend,
            products=ProductRepository(pool),
            users=UserRepository(pool),
            api_keys=ApiKeyRepository(pool),
        )
    else:
        stores = Stores(
            backend=backend,
            products=InMemoryProductStore(),
            users=InMemoryUserStore(),
            api_keys=InMemoryApiKeyStore(),
        )

    try:
        await seed_stores(stores, settings, hasher)
    except Exception:
        await close_stores(stores)
        raise
    logger.info("Stores ready", backend=backend.value)
    return stores


async def seed_stores(
    stores: Stores,
    settings: Settings,
    hasher: PasswordHasher,
) -> None:
    """Provision configured users and API keys. Safe to run repeatedly."""
    for user in settings.auth.users:
        password_hash = user.password_hash or hasher.hash(user.password or "")
        await stores.users.add(user.username, password_hash)

    for key in settings.auth.api_keys:
        await stores.api_keys.add(
            ApiKeyRecord(key=key.key, owner=key.owner, active=key.active)
        )

    logger.info(
        "Credential stores seeded",
        users=len(settings.auth.users),
        api_keys=len(settings.auth.api_keys),
    )


async def close_stores(stores: Stores | None) -> None:
    """Release whatever ``open_stores`` acquired."""
    if stores is not None and stores.backend is StorageBackend.POSTGRES:
        await close_database_pool()
