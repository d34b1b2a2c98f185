"""Authentication taxonomy, models and the verifier contract.

Concrete verifiers live in the sibling modules (``basic``, ``api_key``,
``local_jwt``, ``delegated_oauth``) and are wired together by ``factory``.

Usage:
    from auth_gateway.auth.providers import AuthScheme, Principal
    from auth_gateway.auth.providers.factory import get_verifier

    principal = await get_verifier(AuthScheme.BASIC).verify(credential)
"""

from auth_gateway.auth.providers.exceptions import (
    AuthError,
    AuthProviderError,
    ConfigurationError,
    ExchangeFailedError,
    InvalidCredentialsError,
    MalformedTokenError,
    MissingCodeError,
    MissingCredentialsError,
    ProviderRejectedError,
    ProviderUnavailableError,
    TokenExpiredError,
    TokenIssueError,
)
from auth_gateway.auth.providers.models import (
    AuthScheme,
    BearerTokenClaims,
    DelegatedTokenInfo,
    IssuedToken,
    OAuthTokenGrant,
    Principal,
)
from auth_gateway.auth.providers.protocol import Verifier


__all__ = [
    "AuthError",
    "AuthProviderError",
    "AuthScheme",
    "BearerTokenClaims",
    "ConfigurationError",
    "DelegatedTokenInfo",
    "ExchangeFailedError",
    "InvalidCredentialsError",
    "IssuedToken",
    "MalformedTokenError",
    "MissingCodeError",
    "MissingCredentialsError",
    "OAuthTokenGrant",
    "Principal",
    "ProviderRejectedError",
    "ProviderUnavailableError",
    "TokenExpiredError",
    "TokenIssueError",
    "Verifier",
]
