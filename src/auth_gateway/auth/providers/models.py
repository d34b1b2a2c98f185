"""Authentication models.

Value objects shared by the verifiers, the token issuer and the route
guard. All of them are immutable once built.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AuthScheme(StrEnum):
    """Credential schemes a route group can be bound to."""

    BASIC = "basic"
    APIKEY = "apikey"
    BEARER = "bearer"
    OAUTH = "oauth"


class Principal(BaseModel):
    """The verified identity a request acts as.

    Attributes:
        scheme: Scheme that authenticated the request.
        subject: Username, key owner, token subject or provider user id.
        claims: Scheme-specific extras (token timestamps, provider profile).
        issued_at: Token issuance time, for token schemes.
        expires_at: Token expiry time, for token schemes.
    """

    model_config = ConfigDict(frozen=True)

    scheme: AuthScheme = Field(..., description="Scheme that authenticated the request")
    subject: str = Field(..., description="Identity the request acts as")
    claims: dict[str, Any] = Field(
        default_factory=dict,
        description="Scheme-specific claims",
    )
    issued_at: datetime | None = Field(default=None, description="Token issuance time")
    expires_at: datetime | None = Field(default=None, description="Token expiry time")


class BearerTokenClaims(BaseModel):
    """Payload embedded in a self-issued bearer token."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    sub: str = Field(..., min_length=1)
    iat: int
    exp: int
    type: str = "access"
    iss: str | None = None


class DelegatedTokenInfo(BaseModel):
    """User profile returned by the OAuth provider's userinfo endpoint.

    Google's v2 endpoint returns ``id``; OIDC userinfo returns ``sub``.
    Unknown fields are kept so they can be exposed as claims.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str | None = None
    sub: str | None = None
    email: str | None = None
    name: str | None = None
    picture: str | None = None

    @property
    def subject(self) -> str | None:
        """Stable user identifier, preferring ``id`` then ``sub`` then ``email``."""
        return self.id or self.sub or self.email


class IssuedToken(BaseModel):
    """A freshly minted self-issued bearer token."""

    model_config = ConfigDict(frozen=True)

    token: str
    expires_in: int


class OAuthTokenGrant(BaseModel):
    """Access token obtained from the provider by exchanging a code."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    access_token: str = Field(..., min_length=1)
    expires_in: int = 0
