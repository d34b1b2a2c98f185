"""API router aggregating all endpoint routers.

Each credential scheme gets its own product route group, guarded by that
scheme's verifier only.
"""

from __future__ import annotations

from fastapi import APIRouter

from auth_gateway.api.endpoints import health, jwt, oauth, root
from auth_gateway.api.endpoints.products import create_product_router
from auth_gateway.auth.providers.models import AuthScheme


SCHEME_ROUTES: dict[AuthScheme, tuple[str, str]] = {
    AuthScheme.BASIC: ("/basicAuth", "basic auth"),
    AuthScheme.APIKEY: ("/apiKey", "api key"),
    AuthScheme.BEARER: ("/jwt", "jwt"),
    AuthScheme.OAUTH: ("/oAuth", "oauth"),
}

router = APIRouter()

router.include_router(root.router)
router.include_router(health.router)

# Token issuance (unauthenticated)
router.include_router(jwt.router)
router.include_router(oauth.router)

for _scheme, (_prefix, _tag) in SCHEME_ROUTES.items():
    router.include_router(create_product_router(_scheme, _prefix, _tag))
