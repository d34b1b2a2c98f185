"""Route guards binding one verifier to a route group.

Usage:
    router = APIRouter(dependencies=[Depends(Authenticate(AuthScheme.APIKEY))])

The guard extracts the credential for its scheme, runs the registered
verifier and stores the resulting ``Principal`` on ``request.state``. Any
failure short-circuits the request before a handler runs. There is no
fallback to another scheme.
"""

from typing import Final

from fastapi import Request, status

from auth_gateway.auth.credentials import ExtractionFailure, extract_credential
from auth_gateway.auth.providers.exceptions import (
    AuthError,
    InvalidCredentialsError,
    MalformedTokenError,
    MissingCredentialsError,
    ProviderRejectedError,
    ProviderUnavailableError,
    TokenExpiredError,
)
from auth_gateway.auth.providers.factory import get_verifier
from auth_gateway.auth.providers.models import AuthScheme, Principal
from auth_gateway.core.config import Settings
from auth_gateway.core.exceptions import (
    AppException,
    ForbiddenException,
    ServiceUnavailableException,
    UnauthorizedException,
)
from auth_gateway.observability.logging import bind_context, get_logger
from auth_gateway.observability.metrics import record_auth_failure, record_auth_success


logger = get_logger(__name__)

# Status returned for each (scheme, failure kind). API-key rejections are
# 403; every other credential failure is 401.
FAILURE_STATUS: Final[dict[AuthScheme, dict[str, int]]] = {
    AuthScheme.BASIC: {
        MissingCredentialsError.kind: status.HTTP_401_UNAUTHORIZED,
        InvalidCredentialsError.kind: status.HTTP_401_UNAUTHORIZED,
    },
    AuthScheme.APIKEY: {
        MissingCredentialsError.kind: status.HTTP_401_UNAUTHORIZED,
        InvalidCredentialsError.kind: status.HTTP_403_FORBIDDEN,
    },
    AuthScheme.BEARER: {
        MissingCredentialsError.kind: status.HTTP_401_UNAUTHORIZED,
        InvalidCredentialsError.kind: status.HTTP_401_UNAUTHORIZED,
        MalformedTokenError.kind: status.HTTP_401_UNAUTHORIZED,
        TokenExpiredError.kind: status.HTTP_401_UNAUTHORIZED,
    },
    AuthScheme.OAUTH: {
        MissingCredentialsError.kind: status.HTTP_401_UNAUTHORIZED,
        ProviderRejectedError.kind: status.HTTP_401_UNAUTHORIZED,
        ProviderUnavailableError.kind: status.HTTP_401_UNAUTHORIZED,
    },
}

MISSING_MESSAGES: Final[dict[AuthScheme, str]] = {
    AuthScheme.BASIC: "Missing Basic Auth Header",
    AuthScheme.APIKEY: "API Key missing",
    AuthScheme.BEARER: "Missing bearer token",
    AuthScheme.OAUTH: "Missing bearer token",
}


def failure_status(scheme: AuthScheme, error: AuthError) -> int:
    """Look up the HTTP status for a failure, defaulting to 401."""
    return FAILURE_STATUS[scheme].get(error.kind, status.HTTP_401_UNAUTHORIZED)


def challenge_for(scheme: AuthScheme, settings: Settings) -> str:
    """``WWW-Authenticate`` value sent with failures for ``scheme``."""
    if scheme is AuthScheme.BASIC:
        return f'Basic realm="{settings.auth.basic.realm}"'
    if scheme is AuthScheme.APIKEY:
        return f'ApiKey header="{settings.auth.api_key.header}"'
    return "Bearer"


class Authenticate:
    """Dependency that authenticates a request with one fixed scheme."""

    def __init__(self, scheme: AuthScheme) -> None:
        self.scheme = scheme

    async def __call__(self, request: Request) -> Principal:
        settings: Settings = request.app.state.settings

        credential = extract_credential(
            request.headers,
            self.scheme,
            api_key_header=settings.auth.api_key.header,
        )
        if isinstance(credential, ExtractionFailure):
            error = MissingCredentialsError(MISSING_MESSAGES[self.scheme])
            raise self._reject(error, settings, reason=credential.reason)

        try:
            verifier = get_verifier(self.scheme)
        except RuntimeError:
            logger.error("Authentication not initialized", scheme=self.scheme.value)
            raise ServiceUnavailableException("Authentication unavailable") from None

        try:
            principal = await verifier.verify(credential)
        except AuthError as e:
            raise self._reject(e, settings) from None

        request.state.principal = principal
        bind_context(auth_scheme=principal.scheme.value, subject=principal.subject)
        record_auth_success(self.scheme.value)
        logger.debug(
            "Authentication succeeded",
            scheme=self.scheme.value,
            subject=principal.subject,
        )
        return principal

    def _reject(
        self,
        error: AuthError,
        settings: Settings,
        reason: str | None = None,
    ) -> AppException:
        record_auth_failure(self.scheme.value, error.kind)
        log = logger.error if isinstance(error, ProviderUnavailableError) else logger.warning
        log(
            "Authentication failed",
            scheme=self.scheme.value,
            kind=error.kind,
            reason=reason,
        )

        challenge = challenge_for(self.scheme, settings)
        if failure_status(self.scheme, error) == status.HTTP_403_FORBIDDEN:
            return ForbiddenException(error.message, challenge=challenge)
        return UnauthorizedException(error.message, challenge=challenge)


def get_principal(request: Request) -> Principal:
    """Return the principal attached by the route group's guard.

    Raises:
        RuntimeError: If called on a route without a guard.
    """
    principal: Principal | None = getattr(request.state, "principal", None)
    if principal is None:
        msg = "No principal attached; route is not guarded by Authenticate"
        raise RuntimeError(msg)
    return principal
