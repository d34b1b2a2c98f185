"""Credential extraction from request headers.

Extraction is purely syntactic: it never consults a store and never raises
on malformed input. A caller gets back either one of the credential
variants below or an ``ExtractionFailure`` describing what was wrong.
"""

from __future__ import annotations

import base64
import binascii
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from auth_gateway.auth.providers.models import AuthScheme


if TYPE_CHECKING:
    from collections.abc import Mapping


BASIC_PREFIX = "Basic "
BEARER_PREFIX = "Bearer "
DEFAULT_API_KEY_HEADER = "x-api-key"


class BasicCredential(BaseModel):
    """Decoded ``username:password`` pair."""

    model_config = ConfigDict(frozen=True)

    username: str
    password: str = Field(repr=False)


class ApiKeyCredential(BaseModel):
    """Raw API key string."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(repr=False)

    @property
    def prefix(self) -> str:
        """First characters of the key, safe to log."""
        return self.key[:4]


class BearerCredential(BaseModel):
    """Raw bearer token, self-issued or from the OAuth provider."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(repr=False)


RawCredential = BasicCredential | ApiKeyCredential | BearerCredential


class ExtractionFailure(BaseModel):
    """Why no credential could be extracted for a scheme."""

    model_config = ConfigDict(frozen=True)

    scheme: AuthScheme
    reason: str


def get_header(headers: Mapping[str, str], name: str) -> str | None:
    """Case-insensitive header lookup over any string mapping."""
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def extract_credential(
    headers: Mapping[str, str],
    scheme: AuthScheme,
    *,
    api_key_header: str = DEFAULT_API_KEY_HEADER,
) -> RawCredential | ExtractionFailure:
    """Pull the credential for ``scheme`` out of request headers.

    Args:
        headers: Request headers.
        scheme: Scheme the route group is bound to.
        api_key_header: Header carrying the API key.

    Returns:
        The credential variant for ``scheme``, or an ``ExtractionFailure``.
    """
    if scheme is AuthScheme.BASIC:
        return _extract_basic(get_header(headers, "authorization"))
    if scheme is AuthScheme.APIKEY:
        return _extract_api_key(get_header(headers, api_key_header))
    return _extract_bearer(get_header(headers, "authorization"), scheme)


def _extract_basic(value: str | None) -> BasicCredential | ExtractionFailure:
    if value is None:
        return ExtractionFailure(scheme=AuthScheme.BASIC, reason="header_absent")
    if not value.startswith(BASIC_PREFIX):
        return ExtractionFailure(scheme=AuthScheme.BASIC, reason="wrong_prefix")

    try:
        decoded = base64.b64decode(value[len(BASIC_PREFIX) :].strip(), validate=True)
        pair = decoded.decode("utf-8")
    except (binascii.Error, ValueError):
        # UnicodeDecodeError is a ValueError
        return ExtractionFailure(scheme=AuthScheme.BASIC, reason="undecodable")

    username, sep, password = pair.partition(":")
    if not sep:
        return ExtractionFailure(scheme=AuthScheme.BASIC, reason="missing_separator")
    return BasicCredential(username=username, password=password)


def _extract_api_key(value: str | None) -> ApiKeyCredential | ExtractionFailure:
    if value is None or not value.strip():
        return ExtractionFailure(scheme=AuthScheme.APIKEY, reason="header_absent")
    return ApiKeyCredential(key=value.strip())


def _extract_bearer(
    value: str | None,
    scheme: AuthScheme,
) -> BearerCredential | ExtractionFailure:
    if value is None:
        return ExtractionFailure(scheme=scheme, reason="header_absent")
    if not value.startswith(BEARER_PREFIX):
        return ExtractionFailure(scheme=scheme, reason="wrong_prefix")

    token = value[len(BEARER_PREFIX) :].strip()
    if not token or any(ch.isspace() for ch in token):
        return ExtractionFailure(scheme=scheme, reason="malformed_token")
    return BearerCredential(token=token)


__all__ = [
    "BASIC_PREFIX",
    "BEARER_PREFIX",
    "ApiKeyCredential",
    "BasicCredential",
    "BearerCredential",
    "ExtractionFailure",
    "RawCredential",
    "extract_credential",
    "get_header",
]
