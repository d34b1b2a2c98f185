"""Application factory.

``create_app`` wires configuration, exception handlers, middleware, routers
and observability into a FastAPI instance. Services are started by the
lifespan, not here.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import ORJSONResponse

from auth_gateway.api.endpoints.root import docs_enabled
from auth_gateway.api.router import SCHEME_ROUTES, router
from auth_gateway.core.config import Settings, get_settings
from auth_gateway.core.events import lifespan
from auth_gateway.core.exceptions import setup_exception_handlers
from auth_gateway.core.middleware import (
    LoggingMiddleware,
    RequestIDMiddleware,
    SecurityHeadersMiddleware,
    TimingMiddleware,
)
from auth_gateway.observability.metrics import setup_metrics
from auth_gateway.observability.tracing import setup_tracing


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure a FastAPI application instance.

    Args:
        settings: Optional settings override. If not provided, uses get_settings().
    """
    if settings is None:
        settings = get_settings()

    docs = docs_enabled(settings)
    app = FastAPI(
        title=settings.app.name,
        version=settings.app.version,
        description="Product catalog API with Basic, API key, JWT and "
        "Google OAuth2 authentication",
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        docs_url="/docs" if docs else None,
        redoc_url="/redoc" if docs else None,
        openapi_url="/openapi.json" if docs else None,
        debug=settings.app.debug,
    )

    app.state.settings = settings

    setup_exception_handlers(app)
    _setup_middleware(app, settings)
    app.include_router(router, prefix=settings.api.prefix)

    setup_tracing(app, settings)
    setup_metrics(app, settings)

    return app


def _setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Install middleware. The last one added runs first on a request.

    Request order: security headers, request id, timing, logging.
    """
    prefix = settings.api.prefix
    app.add_middleware(
        LoggingMiddleware,
        exclude_paths={f"{prefix}/health", f"{prefix}/ready", f"{prefix}/metrics"},
    )
    app.add_middleware(TimingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        SecurityHeadersMiddleware,
        no_store_prefixes=tuple(
            f"{prefix}{route_prefix}/" for route_prefix, _ in SCHEME_ROUTES.values()
        ),
    )
