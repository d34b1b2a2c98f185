"""HTTP client for the delegated OAuth2 identity provider.

Two calls are made against the provider:
- userinfo, to confirm a caller's access token on every protected request;
- token, to exchange an authorization code obtained by a popup/desktop
  client for an access token.

Both use one pooled ``httpx.AsyncClient`` with an explicit timeout. Nothing
is retried and nothing is cached.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

import httpx
from pydantic import ValidationError

from auth_gateway.auth.providers.exceptions import (
    ExchangeFailedError,
    ProviderRejectedError,
    ProviderUnavailableError,
)
from auth_gateway.auth.providers.models import DelegatedTokenInfo, OAuthTokenGrant
from auth_gateway.observability.logging import get_logger
from auth_gateway.observability.metrics import record_provider_request
from auth_gateway.observability.tracing import add_span_attributes


if TYPE_CHECKING:
    from auth_gateway.core.config.settings import OAuthSettings

logger = get_logger(__name__)

USERINFO = "userinfo"
EXCHANGE = "exchange"


@runtime_checkable
class OAuthProviderClient(Protocol):
    """Capability the delegated verifier and the code exchanger depend on."""

    @property
    def name(self) -> str: ...

    async def fetch_userinfo(self, access_token: str) -> DelegatedTokenInfo:
        """Return the profile behind ``access_token``.

        Raises:
            ProviderRejectedError: The provider declined the token.
            ProviderUnavailableError: The provider could not be consulted.
        """
        ...

    async def exchange_code(self, code: str) -> OAuthTokenGrant:
        """Exchange an authorization code for an access token.

        Raises:
            ExchangeFailedError: On any failure of the token call.
        """
        ...

    async def initialize(self) -> None: ...

    async def shutdown(self) -> None: ...


class GoogleOAuthClient:
    """Google OAuth2 endpoints over httpx.

    Attributes:
        client_id: OAuth client id used for code exchange.
        client_secret: OAuth client secret used for code exchange.
        token_url: Provider token endpoint.
        userinfo_url: Provider userinfo endpoint.
        redirect_uri: Redirect mode sent with the exchange (``postmessage``).
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        *,
        client_id: str | None,
        client_secret: str | None,
        token_url: str,
        userinfo_url: str,
        redirect_uri: str = "postmessage",
        timeout: float = 5.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.token_url = token_url
        self.userinfo_url = userinfo_url
        self.redirect_uri = redirect_uri
        self.timeout = timeout
        self._http_client = http_client

    @classmethod
    def from_settings(
        cls,
        oauth: OAuthSettings,
        client_secret: str | None,
    ) -> GoogleOAuthClient:
        return cls(
            client_id=oauth.client_id,
            client_secret=client_secret,
            token_url=oauth.token_url,
            userinfo_url=oauth.userinfo_url,
            redirect_uri=oauth.redirect_uri,
            timeout=oauth.timeout,
        )

    @property
    def name(self) -> str:
        return "google"

    async def initialize(self) -> None:
        """Open the pooled HTTP client."""
        if self._http_client is not None:
            return

        self._http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
        )
        logger.info("GoogleOAuthClient initialized", timeout=self.timeout)

    async def shutdown(self) -> None:
        """Close the HTTP client and release connections."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
            logger.debug("GoogleOAuthClient shutdown")

    @property
    def http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            msg = "GoogleOAuthClient used before initialize()"
            raise RuntimeError(msg)
        return self._http_client

    async def fetch_userinfo(self, access_token: str) -> DelegatedTokenInfo:
        add_span_attributes(**{"oauth.operation": USERINFO})
        try:
            response = await self.http_client.get(
                self.userinfo_url,
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.TimeoutException as e:
            self._unavailable("Identity provider timeout", timeout=self.timeout)
            raise ProviderUnavailableError from e
        except httpx.RequestError as e:
            self._unavailable("Identity provider unreachable", error=type(e).__name__)
            raise ProviderUnavailableError from e

        add_span_attributes(**{"http.status_code": response.status_code})
        status = response.status_code

        if status == httpx.codes.TOO_MANY_REQUESTS or status >= 500:
            self._unavailable("Identity provider error", status_code=status)
            raise ProviderUnavailableError
        if status >= 400:
            record_provider_request(USERINFO, "rejected")
            raise ProviderRejectedError

        try:
            info = DelegatedTokenInfo.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            # json.JSONDecodeError is a ValueError
            self._unavailable("Identity provider returned an unreadable profile")
            raise ProviderUnavailableError from e

        record_provider_request(USERINFO, "ok")
        return info

    async def exchange_code(self, code: str) -> OAuthTokenGrant:
        add_span_attributes(**{"oauth.operation": EXCHANGE})
        if not self.client_id or not self.client_secret:
            logger.error("OAuth client credentials are not configured")
            record_provider_request(EXCHANGE, "failed")
            raise ExchangeFailedError

        try:
            response = await self.http_client.post(
                self.token_url,
                data={
                    "code": code,
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "redirect_uri": self.redirect_uri,
                    "grant_type": "authorization_code",
                },
            )
            add_span_attributes(**{"http.status_code": response.status_code})
            response.raise_for_status()
            grant = OAuthTokenGrant.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            logger.error(
                "Code exchange rejected by provider",
                status_code=e.response.status_code,
            )
            record_provider_request(EXCHANGE, "failed")
            raise ExchangeFailedError from e
        except httpx.RequestError as e:
            logger.error("Code exchange request failed", error=type(e).__name__)
            record_provider_request(EXCHANGE, "failed")
            raise ExchangeFailedError from e
        except (ValueError, ValidationError) as e:
            logger.error("Code exchange returned an unreadable grant")
            record_provider_request(EXCHANGE, "failed")
            raise ExchangeFailedError from e

        record_provider_request(EXCHANGE, "ok")
        return grant

    def _unavailable(self, message: str, **fields: object) -> None:
        logger.error(message, url=self.userinfo_url, **fields)
        record_provider_request(USERINFO, "unavailable")
