"""Application lifespan.

Startup order: logging, stores (with seeding), product service, then the
authentication components. Shutdown runs in reverse. A failure to bring up
storage or authentication aborts startup.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from auth_gateway.auth.passwords import Pbkdf2PasswordHasher
from auth_gateway.auth.providers.factory import initialize_auth, shutdown_auth
from auth_gateway.core.config import Settings, get_settings
from auth_gateway.database.stores import close_stores, open_stores
from auth_gateway.observability.logging import get_logger, setup_logging
from auth_gateway.observability.tracing import shutdown_tracing
from auth_gateway.services.products import ProductService


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from fastapi import FastAPI

logger = get_logger(__name__)


async def _startup(app: FastAPI, settings: Settings) -> None:
    setup_logging(
        log_level=settings.logging.level,
        log_format=settings.logging.format,
        is_development=settings.is_development,
    )
    logger.info(
        "Starting application",
        app_name=settings.app.name,
        environment=settings.APP_ENV,
        storage=settings.storage.backend.value,
    )

    hasher = Pbkdf2PasswordHasher(settings.auth.password_hash_iterations)

    try:
        stores = await open_stores(settings, hasher)
    except Exception:
        logger.exception("Failed to open storage")
        raise
    app.state.stores = stores
    app.state.product_service = ProductService(stores.products)

    # Optional override installed by tests or embedding code
    oauth_client = getattr(app.state, "oauth_client", None)
    try:
        await initialize_auth(settings, stores, hasher, oauth_client)
    except Exception:
        logger.exception("Failed to initialize authentication")
        await close_stores(stores)
        raise

    logger.info("Application startup complete")


async def _shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")

    await shutdown_auth()
    app.state.product_service = None

    await close_stores(getattr(app.state, "stores", None))
    app.state.stores = None

    shutdown_tracing()
    logger.info("Application shutdown complete")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Bring services up before serving and tear them down afterwards."""
    settings: Settings = getattr(app.state, "settings", None) or get_settings()
    await _startup(app, settings)
    try:
        yield
    finally:
        await _shutdown(app)
