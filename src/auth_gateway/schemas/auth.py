"""Authentication request and response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Username/password login."""

    username: str = Field(..., description="Username", examples=["admin"])
    password: str = Field(..., description="Password", examples=["password123"])


class TokenResponse(BaseModel):
    """Self-issued bearer token."""

    token: str = Field(..., description="Signed bearer token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Validity window in seconds")


class OAuthCodeRequest(BaseModel):
    """Authorization code obtained by a popup or desktop client."""

    code: str | None = Field(default=None, description="Authorization code")


class OAuthTokenResponse(BaseModel):
    """Provider access token obtained by exchanging a code."""

    access_token: str = Field(..., description="Provider access token")
    expires_in: int = Field(..., description="Validity window in seconds")


class PrincipalResponse(BaseModel):
    """The identity the current request is authenticated as."""

    scheme: str = Field(..., description="Scheme that authenticated the request")
    subject: str = Field(..., description="Authenticated subject")
    claims: dict[str, Any] = Field(default_factory=dict)
    issued_at: datetime | None = None
    expires_at: datetime | None = None
