"""Unit tests for the delegated OAuth2 verifier."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from auth_gateway.auth.credentials import ApiKeyCredential, BearerCredential
from auth_gateway.auth.providers.delegated_oauth import DelegatedOAuthVerifier
from auth_gateway.auth.providers.exceptions import (
    MissingCredentialsError,
    ProviderRejectedError,
    ProviderUnavailableError,
)
from auth_gateway.auth.providers.models import AuthScheme, DelegatedTokenInfo


pytestmark = pytest.mark.unit


class TestDelegatedOAuthVerifier:
    """Tests for DelegatedOAuthVerifier."""

    @pytest.fixture
    def verifier(self, oauth_client: AsyncMock) -> DelegatedOAuthVerifier:
        return DelegatedOAuthVerifier(oauth_client)

    @pytest.mark.asyncio
    async def test_confirmed_token(
        self,
        verifier: DelegatedOAuthVerifier,
        oauth_client: AsyncMock,
    ) -> None:
        """Should authenticate as the provider's user id."""
        oauth_client.fetch_userinfo.return_value = DelegatedTokenInfo(
            id="1234567890",
            email="user@example.com",
            name="Test User",
        )

        principal = await verifier.verify(BearerCredential(token="ya29.token"))

        oauth_client.fetch_userinfo.assert_awaited_once_with("ya29.token")
        assert principal.scheme is AuthScheme.OAUTH
        assert principal.subject == "1234567890"
        assert principal.claims["email"] == "user@example.com"

    @pytest.mark.asyncio
    async def test_provider_is_asked_every_time(
        self,
        verifier: DelegatedOAuthVerifier,
        oauth_client: AsyncMock,
    ) -> None:
        """Should not remember a token between calls."""
        oauth_client.fetch_userinfo.return_value = DelegatedTokenInfo(id="1")

        await verifier.verify(BearerCredential(token="ya29.token"))
        await verifier.verify(BearerCredential(token="ya29.token"))

        assert oauth_client.fetch_userinfo.await_count == 2

    @pytest.mark.asyncio
    async def test_rejected_token(
        self,
        verifier: DelegatedOAuthVerifier,
        oauth_client: AsyncMock,
    ) -> None:
        """Should propagate a provider rejection."""
        oauth_client.fetch_userinfo.side_effect = ProviderRejectedError()

        with pytest.raises(ProviderRejectedError):
            await verifier.verify(BearerCredential(token="bad"))

    @pytest.mark.asyncio
    async def test_provider_unavailable(
        self,
        verifier: DelegatedOAuthVerifier,
        oauth_client: AsyncMock,
    ) -> None:
        """Should fail closed when the provider cannot be reached."""
        oauth_client.fetch_userinfo.side_effect = ProviderUnavailableError()

        with pytest.raises(ProviderUnavailableError):
            await verifier.verify(BearerCredential(token="ya29.token"))

    @pytest.mark.asyncio
    async def test_profile_without_identifier(
        self,
        verifier: DelegatedOAuthVerifier,
        oauth_client: AsyncMock,
    ) -> None:
        """Should reject a profile with no usable subject."""
        oauth_client.fetch_userinfo.return_value = DelegatedTokenInfo(name="Nobody")

        with pytest.raises(ProviderRejectedError):
            await verifier.verify(BearerCredential(token="ya29.token"))

    @pytest.mark.asyncio
    async def test_other_credential_variant(
        self,
        verifier: DelegatedOAuthVerifier,
        oauth_client: AsyncMock,
    ) -> None:
        """Should refuse an API key without calling the provider."""
        with pytest.raises(MissingCredentialsError):
            await verifier.verify(ApiKeyCredential(key="K1"))

        oauth_client.fetch_userinfo.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lifecycle_delegates_to_client(
        self,
        verifier: DelegatedOAuthVerifier,
        oauth_client: AsyncMock,
    ) -> None:
        """Should open and close the provider client."""
        await verifier.initialize()
        await verifier.shutdown()

        oauth_client.initialize.assert_awaited_once()
        oauth_client.shutdown.assert_awaited_once()
