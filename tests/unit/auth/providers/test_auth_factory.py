"""Unit tests for authentication wiring."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock

import pytest

from auth_gateway.auth.client.oauth_provider import GoogleOAuthClient
from auth_gateway.auth.issuer import BearerTokenIssuer, OAuthCodeExchanger
from auth_gateway.auth.providers.api_key import ApiKeyVerifier
from auth_gateway.auth.providers.basic import BasicVerifier
from auth_gateway.auth.providers.delegated_oauth import DelegatedOAuthVerifier
from auth_gateway.auth.providers.exceptions import ConfigurationError
from auth_gateway.auth.providers.factory import (
    _DEV_JWT_SECRET,
    create_auth_components,
    get_auth_components,
    get_verifier,
    initialize_auth,
    shutdown_auth,
)
from auth_gateway.auth.providers.local_jwt import BearerTokenVerifier
from auth_gateway.auth.providers.models import AuthScheme
from auth_gateway.core.config.settings import AuthSettings, JwtSettings, OAuthSettings


if TYPE_CHECKING:
    from collections.abc import Callable

    from auth_gateway.auth.passwords import Pbkdf2PasswordHasher
    from auth_gateway.core.config import Settings
    from auth_gateway.database.stores import Stores


pytestmark = pytest.mark.unit


class TestCreateAuthComponents:
    """Tests for create_auth_components."""

    def test_one_verifier_per_scheme(
        self,
        test_settings: Settings,
        memory_stores: Stores,
        hasher: Pbkdf2PasswordHasher,
        oauth_client: AsyncMock,
    ) -> None:
        """Should build the verifier matching each scheme."""
        components = create_auth_components(
            test_settings, memory_stores, hasher, oauth_client
        )

        assert set(components.verifiers) == set(AuthScheme)
        assert isinstance(components.verifiers[AuthScheme.BASIC], BasicVerifier)
        assert isinstance(components.verifiers[AuthScheme.APIKEY], ApiKeyVerifier)
        assert isinstance(components.verifiers[AuthScheme.BEARER], BearerTokenVerifier)
        assert isinstance(
            components.verifiers[AuthScheme.OAUTH], DelegatedOAuthVerifier
        )
        for scheme, verifier in components.verifiers.items():
            assert verifier.scheme is scheme

    def test_issuer_shares_basic_verifier(
        self,
        test_settings: Settings,
        memory_stores: Stores,
        hasher: Pbkdf2PasswordHasher,
        oauth_client: AsyncMock,
    ) -> None:
        """Should check login passwords against the Basic credential source."""
        components = create_auth_components(
            test_settings, memory_stores, hasher, oauth_client
        )

        assert isinstance(components.bearer_issuer, BearerTokenIssuer)
        assert components.bearer_issuer.basic_verifier is components.verifiers[
            AuthScheme.BASIC
        ]
        assert isinstance(components.code_exchanger, OAuthCodeExchanger)
        assert components.code_exchanger.client is oauth_client

    def test_expiry_from_settings(
        self,
        settings_factory: Callable[..., Settings],
        memory_stores: Stores,
        hasher: Pbkdf2PasswordHasher,
        oauth_client: AsyncMock,
    ) -> None:
        """Should take the token lifetime from settings."""
        settings = settings_factory(
            auth=AuthSettings(jwt=JwtSettings(access_token_expire_minutes=15))
        )

        components = create_auth_components(settings, memory_stores, hasher, oauth_client)

        assert components.bearer_issuer.expires_in.total_seconds() == 900

    def test_defaults_to_google_client(
        self,
        test_settings: Settings,
        memory_stores: Stores,
        hasher: Pbkdf2PasswordHasher,
    ) -> None:
        """Should build a Google client when no override is given."""
        components = create_auth_components(test_settings, memory_stores, hasher)

        client = components.code_exchanger.client
        assert isinstance(client, GoogleOAuthClient)
        assert client.client_secret == test_settings.GOOGLE_CLIENT_SECRET

    def test_unsupported_provider(
        self,
        settings_factory: Callable[..., Settings],
        memory_stores: Stores,
        hasher: Pbkdf2PasswordHasher,
    ) -> None:
        """Should refuse an OAuth provider it has no client for."""
        settings = settings_factory(
            auth=AuthSettings(oauth=OAuthSettings(provider="github"))
        )

        with pytest.raises(ConfigurationError, match="github"):
            create_auth_components(settings, memory_stores, hasher)

    def test_dev_secret_outside_production(
        self,
        settings_factory: Callable[..., Settings],
        memory_stores: Stores,
        hasher: Pbkdf2PasswordHasher,
        oauth_client: AsyncMock,
    ) -> None:
        """Should fall back to the development secret outside production."""
        settings = settings_factory(APP_ENV="development", JWT_SECRET_KEY="")

        components = create_auth_components(settings, memory_stores, hasher, oauth_client)

        assert components.bearer_issuer.secret_key == _DEV_JWT_SECRET

    def test_production_requires_secret(
        self,
        settings_factory: Callable[..., Settings],
        memory_stores: Stores,
        hasher: Pbkdf2PasswordHasher,
        oauth_client: AsyncMock,
    ) -> None:
        """Should refuse to start in production without a secret."""
        settings = settings_factory(APP_ENV="production", JWT_SECRET_KEY="")

        with pytest.raises(ConfigurationError, match="JWT_SECRET_KEY"):
            create_auth_components(settings, memory_stores, hasher, oauth_client)


class TestRegistry:
    """Tests for the process-wide component registry."""

    def test_not_initialized(self) -> None:
        """Should raise before initialize_auth() ran."""
        with pytest.raises(RuntimeError, match="not initialized"):
            get_auth_components()

    @pytest.mark.asyncio
    async def test_initialize_and_shutdown(
        self,
        test_settings: Settings,
        memory_stores: Stores,
        hasher: Pbkdf2PasswordHasher,
        oauth_client: AsyncMock,
    ) -> None:
        """Should register components and clear them on shutdown."""
        components = await initialize_auth(
            test_settings, memory_stores, hasher, oauth_client
        )

        assert get_auth_components() is components
        assert get_verifier(AuthScheme.OAUTH) is components.verifiers[AuthScheme.OAUTH]
        oauth_client.initialize.assert_awaited_once()

        await shutdown_auth()

        oauth_client.shutdown.assert_awaited_once()
        with pytest.raises(RuntimeError):
            get_auth_components()

    @pytest.mark.asyncio
    async def test_shutdown_without_init(self) -> None:
        """Should be a no-op when nothing is registered."""
        await shutdown_auth()
