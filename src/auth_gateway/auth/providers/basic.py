"""HTTP Basic verifier.

Looks the username up in the user store and checks the password with the
injected hasher. Hashing runs in a worker thread so PBKDF2 does not stall
the event loop.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from auth_gateway.auth.credentials import BasicCredential
from auth_gateway.auth.providers.exceptions import (
    InvalidCredentialsError,
    MissingCredentialsError,
)
from auth_gateway.auth.providers.models import AuthScheme, Principal
from auth_gateway.observability.logging import get_logger


if TYPE_CHECKING:
    from auth_gateway.auth.credentials import RawCredential
    from auth_gateway.auth.passwords import Pbkdf2PasswordHasher
    from auth_gateway.database.protocols import UserStore

logger = get_logger(__name__)


class BasicVerifier:
    """Verifies ``username:password`` pairs against the user store."""

    def __init__(self, users: UserStore, hasher: Pbkdf2PasswordHasher) -> None:
        self.users = users
        self.hasher = hasher

    @property
    def scheme(self) -> AuthScheme:
        return AuthScheme.BASIC

    async def verify(self, credential: RawCredential) -> Principal:
        if not isinstance(credential, BasicCredential):
            raise MissingCredentialsError

        await self.check_password(credential.username, credential.password)
        return Principal(scheme=AuthScheme.BASIC, subject=credential.username)

    async def check_password(self, username: str, password: str) -> None:
        """Raise ``InvalidCredentialsError`` unless the pair matches a user.

        Shared with the bearer-token login so both trust the same source.
        """
        record = await self.users.get(username)
        if record is None:
            await asyncio.to_thread(self.hasher.burn, password)
            raise InvalidCredentialsError

        matches = await asyncio.to_thread(
            self.hasher.verify, password, record.password_hash
        )
        if not matches:
            raise InvalidCredentialsError

    async def initialize(self) -> None:
        logger.info("BasicVerifier initialized", iterations=self.hasher.iterations)

    async def shutdown(self) -> None:
        logger.debug("BasicVerifier shutdown")
