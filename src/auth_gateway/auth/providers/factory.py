"""Authentication wiring.

Builds one verifier per scheme plus the two token issuers from settings,
and keeps them in a process-wide registry that the route guards and the
issuance endpoints read from.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING

from auth_gateway.auth.client.oauth_provider import GoogleOAuthClient
from auth_gateway.auth.issuer import BearerTokenIssuer, OAuthCodeExchanger
from auth_gateway.auth.providers.api_key import ApiKeyVerifier
from auth_gateway.auth.providers.basic import BasicVerifier
from auth_gateway.auth.providers.delegated_oauth import DelegatedOAuthVerifier
from auth_gateway.auth.providers.exceptions import ConfigurationError
from auth_gateway.auth.providers.local_jwt import BearerTokenVerifier
from auth_gateway.auth.providers.models import AuthScheme
from auth_gateway.observability.logging import get_logger


if TYPE_CHECKING:
    from auth_gateway.auth.client.oauth_provider import OAuthProviderClient
    from auth_gateway.auth.passwords import Pbkdf2PasswordHasher
    from auth_gateway.auth.providers.protocol import Verifier
    from auth_gateway.core.config import Settings
    from auth_gateway.database.stores import Stores

logger = get_logger(__name__)

# Fixed development secret - safe for local dev, blocked in production
_DEV_JWT_SECRET = "insecure-dev-key-do-not-use-in-production"  # noqa: S105


def _get_jwt_secret(settings: Settings) -> str:
    """Return the JWT secret, refusing to fall back in production.

    Raises:
        ConfigurationError: If the secret is not set in production.
    """
    if settings.JWT_SECRET_KEY:
        return settings.JWT_SECRET_KEY

    if settings.is_production:
        msg = "JWT_SECRET_KEY must be set in production"
        raise ConfigurationError(msg)

    logger.warning("Using insecure development JWT secret - do not use in production")
    return _DEV_JWT_SECRET


@dataclass(frozen=True)
class AuthComponents:
    """Verifiers keyed by scheme and the two issuance flows."""

    verifiers: dict[AuthScheme, Verifier]
    bearer_issuer: BearerTokenIssuer
    code_exchanger: OAuthCodeExchanger


_state: dict[str, AuthComponents | None] = {"components": None}


def create_auth_components(
    settings: Settings,
    stores: Stores,
    hasher: Pbkdf2PasswordHasher,
    oauth_client: OAuthProviderClient | None = None,
) -> AuthComponents:
    """Build verifiers and issuers for ``settings``.

    Args:
        settings: Application settings.
        stores: Stores holding users and API keys.
        hasher: Password hasher shared by Basic auth and login.
        oauth_client: Provider client override; Google is used by default.

    Raises:
        ConfigurationError: If required settings are missing.
    """
    secret_key = _get_jwt_secret(settings)
    jwt_settings = settings.auth.jwt

    if oauth_client is None:
        if settings.auth.oauth.provider != "google":
            msg = f"Unsupported OAuth provider: {settings.auth.oauth.provider}"
            raise ConfigurationError(msg)
        oauth_client = GoogleOAuthClient.from_settings(
            settings.auth.oauth, settings.GOOGLE_CLIENT_SECRET
        )

    basic = BasicVerifier(stores.users, hasher)
    verifiers: dict[AuthScheme, Verifier] = {
        AuthScheme.BASIC: basic,
        AuthScheme.APIKEY: ApiKeyVerifier(stores.api_keys),
        AuthScheme.BEARER: BearerTokenVerifier(
            secret_key=secret_key,
            algorithm=jwt_settings.algorithm,
            issuer=jwt_settings.issuer,
        ),
        AuthScheme.OAUTH: DelegatedOAuthVerifier(oauth_client),
    }

    return AuthComponents(
        verifiers=verifiers,
        bearer_issuer=BearerTokenIssuer(
            basic,
            secret_key=secret_key,
            algorithm=jwt_settings.algorithm,
            expires_in=timedelta(seconds=settings.access_token_expire_seconds),
            issuer=jwt_settings.issuer,
        ),
        code_exchanger=OAuthCodeExchanger(oauth_client),
    )


def get_auth_components() -> AuthComponents:
    """Return the registered components.

    Raises:
        RuntimeError: If authentication has not been initialized.
    """
    components = _state["components"]
    if components is None:
        msg = "Authentication not initialized. Call initialize_auth() during startup."
        raise RuntimeError(msg)
    return components


def get_verifier(scheme: AuthScheme) -> Verifier:
    """Return the registered verifier for ``scheme``."""
    return get_auth_components().verifiers[scheme]


def set_auth_components(components: AuthComponents | None) -> None:
    """Register (or clear) the process-wide components."""
    _state["components"] = components


async def initialize_auth(
    settings: Settings,
    stores: Stores,
    hasher: Pbkdf2PasswordHasher,
    oauth_client: OAuthProviderClient | None = None,
) -> AuthComponents:
    """Create, initialize and register the authentication components."""
    components = create_auth_components(settings, stores, hasher, oauth_client)
    for verifier in components.verifiers.values():
        await verifier.initialize()
    set_auth_components(components)
    logger.info(
        "Authentication initialized",
        schemes=[scheme.value for scheme in components.verifiers],
    )
    return components


async def shutdown_auth() -> None:
    """Shut down every verifier and clear the registry."""
    components = _state["components"]
    if components is None:
        return
    for verifier in reversed(components.verifiers.values()):
        await verifier.shutdown()
    _state["components"] = None
    logger.info("Authentication shutdown complete")
