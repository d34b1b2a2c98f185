"""Verifier protocol.

Every authentication scheme is implemented by a verifier that turns its own
credential variant into a ``Principal`` or raises an ``AuthError``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from auth_gateway.auth.credentials import RawCredential
    from auth_gateway.auth.providers.models import AuthScheme, Principal


@runtime_checkable
class Verifier(Protocol):
    """Protocol for per-scheme credential verifiers.

    Example implementation:
        class StaticVerifier:
            @property
            def scheme(self) -> AuthScheme:
                return AuthScheme.APIKEY

            async def verify(self, credential: RawCredential) -> Principal:
                ...

            async def initialize(self) -> None: ...

            async def shutdown(self) -> None: ...
    """

    @property
    def scheme(self) -> AuthScheme:
        """Scheme this verifier handles, used for logging and metrics."""
        ...

    async def verify(self, credential: RawCredential) -> Principal:
        """Verify a credential and return the principal it identifies.

        Args:
            credential: Credential produced by the extractor for this scheme.
                A credential of another variant is treated as missing.

        Returns:
            Principal recording this verifier's scheme.

        Raises:
            MissingCredentialsError: If the credential is of the wrong variant.
            InvalidCredentialsError: If it matches no known principal.
            MalformedTokenError: If a token fails signature or structure checks.
            TokenExpiredError: If a token is past its expiry.
            ProviderRejectedError: If the external provider declines the token.
            ProviderUnavailableError: If the external provider cannot be reached.
        """
        ...

    async def initialize(self) -> None:
        """Acquire resources (HTTP clients and the like) at startup."""
        ...

    async def shutdown(self) -> None:
        """Release resources acquired by ``initialize``."""
        ...
