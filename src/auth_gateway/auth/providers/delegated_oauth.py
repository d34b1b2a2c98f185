"""Delegated OAuth2 verifier.

The provider is asked about the token on every call; nothing about a
token's validity is remembered between requests. Any failure to reach the
provider leaves the request unauthenticated.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from auth_gateway.auth.credentials import BearerCredential
from auth_gateway.auth.providers.exceptions import (
    MissingCredentialsError,
    ProviderRejectedError,
)
from auth_gateway.auth.providers.models import AuthScheme, Principal
from auth_gateway.observability.logging import get_logger


if TYPE_CHECKING:
    from auth_gateway.auth.client.oauth_provider import OAuthProviderClient
    from auth_gateway.auth.credentials import RawCredential

logger = get_logger(__name__)


class DelegatedOAuthVerifier:
    """Confirms provider-issued access tokens through the provider itself."""

    def __init__(self, client: OAuthProviderClient) -> None:
        self.client = client

    @property
    def scheme(self) -> AuthScheme:
        return AuthScheme.OAUTH

    async def verify(self, credential: RawCredential) -> Principal:
        if not isinstance(credential, BearerCredential):
            raise MissingCredentialsError

        # ProviderRejectedError / ProviderUnavailableError propagate as-is
        info = await self.client.fetch_userinfo(credential.token)

        subject = info.subject
        if not subject:
            msg = "Provider profile has no user identifier"
            raise ProviderRejectedError(msg)

        return Principal(
            scheme=AuthScheme.OAUTH,
            subject=subject,
            claims=info.model_dump(exclude_none=True),
        )

    async def initialize(self) -> None:
        await self.client.initialize()
        logger.info("DelegatedOAuthVerifier initialized", provider=self.client.name)

    async def shutdown(self) -> None:
        await self.client.shutdown()
        logger.debug("DelegatedOAuthVerifier shutdown")
