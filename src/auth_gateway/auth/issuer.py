"""Token issuance.

Two unauthenticated flows hand clients a credential they later present on
protected routes:

- ``BearerTokenIssuer`` checks a username/password against the same user
  store as Basic authentication and mints a signed token with a fixed
  validity window.
- ``OAuthCodeExchanger`` trades an authorization code for a provider access
  token through the provider's token endpoint.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from jose import jwt

from auth_gateway.auth.providers.exceptions import MissingCodeError
from auth_gateway.auth.providers.local_jwt import ACCESS_TOKEN_TYPE
from auth_gateway.auth.providers.models import IssuedToken
from auth_gateway.observability.logging import get_logger


if TYPE_CHECKING:
    from auth_gateway.auth.client.oauth_provider import OAuthProviderClient
    from auth_gateway.auth.providers.basic import BasicVerifier
    from auth_gateway.auth.providers.models import OAuthTokenGrant

logger = get_logger(__name__)


class BearerTokenIssuer:
    """Mints self-issued bearer tokens after a password check."""

    def __init__(
        self,
        basic_verifier: BasicVerifier,
        *,
        secret_key: str,
        algorithm: str = "HS256",
        expires_in: timedelta = timedelta(hours=1),
        issuer: str | None = None,
    ) -> None:
        self.basic_verifier = basic_verifier
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_in = expires_in
        self.issuer = issuer

    async def issue(self, username: str, password: str) -> IssuedToken:
        """Return a signed token for a valid username/password pair.

        Raises:
            InvalidCredentialsError: If the pair matches no user.
        """
        await self.basic_verifier.check_password(username, password)

        token = self.mint(username)
        logger.info("Bearer token issued", subject=username)
        return IssuedToken(token=token, expires_in=int(self.expires_in.total_seconds()))

    def mint(self, subject: str) -> str:
        """Sign a token for ``subject`` without any credential check."""
        now = datetime.now(UTC)
        claims: dict[str, object] = {
            "sub": subject,
            "iat": now,
            "exp": now + self.expires_in,
            "type": ACCESS_TOKEN_TYPE,
        }
        if self.issuer:
            claims["iss"] = self.issuer
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)


class OAuthCodeExchanger:
    """Exchanges authorization codes for provider access tokens."""

    def __init__(self, client: OAuthProviderClient) -> None:
        self.client = client

    async def exchange(self, code: str | None) -> OAuthTokenGrant:
        """Exchange ``code`` with the provider.

        Raises:
            MissingCodeError: If ``code`` is empty. No request is made.
            ExchangeFailedError: If the provider call fails in any way.
        """
        if not code or not code.strip():
            raise MissingCodeError

        grant = await self.client.exchange_code(code.strip())
        logger.info("OAuth code exchanged", provider=self.client.name)
        return grant
