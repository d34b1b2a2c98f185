"""API key verifier."""

from __future__ import annotations

from typing import TYPE_CHECKING

from auth_gateway.auth.credentials import ApiKeyCredential
from auth_gateway.auth.providers.exceptions import (
    InvalidCredentialsError,
    MissingCredentialsError,
)
from auth_gateway.auth.providers.models import AuthScheme, Principal
from auth_gateway.observability.logging import get_logger


if TYPE_CHECKING:
    from auth_gateway.auth.credentials import RawCredential
    from auth_gateway.database.protocols import ApiKeyStore

logger = get_logger(__name__)


class ApiKeyVerifier:
    """Accepts keys that exist in the store and are active.

    The store is consulted on every call. An inactive key is rejected
    exactly like an unknown one.
    """

    def __init__(self, api_keys: ApiKeyStore) -> None:
        self.api_keys = api_keys

    @property
    def scheme(self) -> AuthScheme:
        return AuthScheme.APIKEY

    async def verify(self, credential: RawCredential) -> Principal:
        if not isinstance(credential, ApiKeyCredential):
            raise MissingCredentialsError

        record = await self.api_keys.get(credential.key)
        if record is None or not record.active:
            raise InvalidCredentialsError("Invalid API Key")

        return Principal(
            scheme=AuthScheme.APIKEY,
            subject=record.owner,
            claims={"key_prefix": credential.prefix},
        )

    async def initialize(self) -> None:
        logger.info("ApiKeyVerifier initialized")

    async def shutdown(self) -> None:
        logger.debug("ApiKeyVerifier shutdown")
