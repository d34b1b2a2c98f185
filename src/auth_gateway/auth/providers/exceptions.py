"""Authentication and token issuance exceptions.

Verifiers raise ``AuthError`` subclasses; the route guard turns them into
HTTP responses. Each error carries a stable ``kind`` used as the log field
and metric label, and a ``message`` that is safe to return to the client.
"""

from __future__ import annotations

from typing import ClassVar


class AuthProviderError(Exception):
    """Base exception for authentication components."""


class AuthError(AuthProviderError):
    """A request could not be authenticated."""

    kind: ClassVar[str] = "auth_error"
    default_message: ClassVar[str] = "Authentication failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingCredentialsError(AuthError):
    """No usable credential material was presented."""

    kind = "missing_credentials"
    default_message = "Missing credentials"


class InvalidCredentialsError(AuthError):
    """Credential presented but it matches no known principal."""

    kind = "invalid_credentials"
    default_message = "Invalid credentials"


class MalformedTokenError(AuthError):
    """Token signature or structure check failed."""

    kind = "malformed_token"
    default_message = "Invalid token"


class TokenExpiredError(AuthError):
    """Token is well formed and signed but past its expiry."""

    kind = "token_expired"
    default_message = "Token has expired"


class ProviderRejectedError(AuthError):
    """The external identity provider declined the token."""

    kind = "provider_rejected"
    default_message = "Invalid or expired access token"


class ProviderUnavailableError(AuthError):
    """The external identity provider could not be consulted.

    Raised on network failures, timeouts, throttling and 5xx responses.
    The request is treated as unauthenticated.
    """

    kind = "provider_unavailable"
    default_message = "Invalid or expired access token"


class TokenIssueError(AuthProviderError):
    """A token could not be issued."""

    kind: ClassVar[str] = "token_issue_error"
    default_message: ClassVar[str] = "Token could not be issued"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingCodeError(TokenIssueError):
    """Code exchange was requested without an authorization code."""

    kind = "missing_code"
    default_message = "Authorization code required"


class ExchangeFailedError(TokenIssueError):
    """The provider token endpoint failed to exchange the code."""

    kind = "exchange_failed"
    default_message = "OAuth code exchange failed"


class ConfigurationError(AuthProviderError):
    """Raised when an authentication component is misconfigured."""
