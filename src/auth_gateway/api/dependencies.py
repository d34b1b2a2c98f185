"""FastAPI dependencies for settings and service access.

Services are built during the application lifespan and stored on
``app.state``; a missing one means startup did not complete.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Request

from auth_gateway.auth.providers.factory import get_auth_components
from auth_gateway.core.exceptions import ServiceUnavailableException


if TYPE_CHECKING:
    from auth_gateway.auth.issuer import BearerTokenIssuer, OAuthCodeExchanger
    from auth_gateway.core.config import Settings
    from auth_gateway.services.products import ProductService


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings


async def get_product_service(request: Request) -> ProductService:
    """Get the product service from app state.

    Raises:
        ServiceUnavailableException: 503 if the service is not initialized.
    """
    service: ProductService | None = getattr(request.app.state, "product_service", None)
    if service is None:
        raise ServiceUnavailableException("Product service not available")
    return service


async def get_bearer_issuer() -> BearerTokenIssuer:
    """Get the bearer token issuer.

    Raises:
        ServiceUnavailableException: 503 if authentication is not initialized.
    """
    try:
        return get_auth_components().bearer_issuer
    except RuntimeError:
        raise ServiceUnavailableException("Token issuance not available") from None


async def get_code_exchanger() -> OAuthCodeExchanger:
    """Get the OAuth code exchanger.

    Raises:
        ServiceUnavailableException: 503 if authentication is not initialized.
    """
    try:
        return get_auth_components().code_exchanger
    except RuntimeError:
        raise ServiceUnavailableException("Token issuance not available") from None
