"""Shared test fixtures for the Product Auth Gateway tests.

Provides explicit test settings, in-memory stores, a low-cost password
hasher and a running application wired to a fake OAuth provider client.
"""

from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient
from prometheus_client import REGISTRY

from auth_gateway.auth.client.oauth_provider import OAuthProviderClient
from auth_gateway.auth.passwords import Pbkdf2PasswordHasher
from auth_gateway.auth.providers.factory import set_auth_components
from auth_gateway.core.config import Settings, StorageBackend
from auth_gateway.core.config.settings import (
    ApiKeySeedSettings,
    ApiSettings,
    AppSettings,
    AuthSettings,
    JwtSettings,
    LoggingSettings,
    MetricsSettings,
    ObservabilitySettings,
    OAuthSettings,
    StorageSettings,
    TracingSettings,
    UserSeedSettings,
)
from auth_gateway.database.memory import (
    InMemoryApiKeyStore,
    InMemoryProductStore,
    InMemoryUserStore,
)
from auth_gateway.database.stores import Stores
from auth_gateway.factory import create_app


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable, Generator

    from fastapi import FastAPI


TEST_JWT_SECRET = "test-jwt-secret-key-for-unit-tests"  # noqa: S105
TEST_ITERATIONS = 1000

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "password123"  # noqa: S105
API_KEY = "K1"
API_KEY_OWNER = "alice"

GOOGLE_CLIENT_ID = "test-client-id.apps.googleusercontent.com"
GOOGLE_CLIENT_SECRET = "test-client-secret"  # noqa: S105
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"


def build_settings(**overrides: object) -> Settings:
    """Build test settings; keyword arguments replace whole sections."""
    values: dict[str, object] = {
        "APP_ENV": "test",
        "JWT_SECRET_KEY": TEST_JWT_SECRET,
        "GOOGLE_CLIENT_SECRET": GOOGLE_CLIENT_SECRET,
        "app": AppSettings(name="test-app", version="0.0.1-test"),
        "api": ApiSettings(prefix=""),
        "auth": AuthSettings(
            jwt=JwtSettings(access_token_expire_minutes=60),
            oauth=OAuthSettings(
                client_id=GOOGLE_CLIENT_ID,
                token_url=GOOGLE_TOKEN_URL,
                userinfo_url=GOOGLE_USERINFO_URL,
                timeout=1.0,
            ),
            password_hash_iterations=TEST_ITERATIONS,
            users=[UserSeedSettings(username=ADMIN_USERNAME, password=ADMIN_PASSWORD)],
            api_keys=[ApiKeySeedSettings(key=API_KEY, owner=API_KEY_OWNER)],
        ),
        "storage": StorageSettings(backend=StorageBackend.MEMORY),
        "logging": LoggingSettings(level="WARNING", format="text"),
        "observability": ObservabilitySettings(
            tracing=TracingSettings(enabled=False),
            metrics=MetricsSettings(enabled=False),
        ),
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    """Factory for test settings with some sections replaced."""
    return build_settings


@pytest.fixture
def test_settings() -> Settings:
    """Settings for a memory-backed test deployment."""
    return build_settings()


@pytest.fixture
def hasher() -> Pbkdf2PasswordHasher:
    """Password hasher with a low iteration count."""
    return Pbkdf2PasswordHasher(iterations=TEST_ITERATIONS)


@pytest.fixture
def memory_stores() -> Stores:
    """Empty in-memory stores."""
    return Stores(
        backend=StorageBackend.MEMORY,
        products=InMemoryProductStore(),
        users=InMemoryUserStore(),
        api_keys=InMemoryApiKeyStore(),
    )


@pytest.fixture
def oauth_client() -> AsyncMock:
    """Fake OAuth provider client standing in for Google."""
    client = AsyncMock(spec=OAuthProviderClient)
    client.name = "google"
    return client


@pytest.fixture
def app(test_settings: Settings, oauth_client: AsyncMock) -> FastAPI:
    """Application using the test settings and the fake provider client."""
    application = create_app(test_settings)
    application.state.oauth_client = oauth_client
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """HTTP client against a started application."""
    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac,
    ):
        yield ac


@pytest.fixture(autouse=True)
def reset_auth_components() -> Generator[None]:
    """Clear the process-wide authentication registry around each test."""
    set_auth_components(None)
    yield
    set_auth_components(None)


@pytest.fixture(autouse=True)
def reset_prometheus_registry() -> Generator[None]:
    """Unregister collectors created during a test.

    Prevents 'Duplicated timeseries' errors when several tests build an
    application with metrics enabled.
    """
    collectors_before = set(REGISTRY._names_to_collectors.keys())

    yield

    collectors_after = set(REGISTRY._names_to_collectors.keys())
    for name in collectors_after - collectors_before:
        collector = REGISTRY._names_to_collectors.get(name)
        if collector is not None:
            with contextlib.suppress(KeyError):
                REGISTRY.unregister(collector)
