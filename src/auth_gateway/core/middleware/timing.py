"""Processing-time header and slow request reporting.

Authentication runs inside the measured span, so a slow OAuth provider shows
up here with the scheme of the route group that waited on it.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from auth_gateway.observability.logging import get_logger


if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp

logger = get_logger(__name__)

PROCESS_TIME_HEADER = "X-Process-Time"


class TimingMiddleware(BaseHTTPMiddleware):
    """Stamp ``X-Process-Time`` (milliseconds) on every response.

    Requests taking longer than ``slow_after`` seconds are logged at WARNING
    together with the authenticated scheme, when there is one.
    """

    def __init__(self, app: ASGIApp, slow_after: float = 1.0) -> None:
        super().__init__(app)
        self.slow_after = slow_after

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        response.headers[PROCESS_TIME_HEADER] = f"{elapsed * 1000:.2f}ms"
        if elapsed >= self.slow_after:
            principal = getattr(request.state, "principal", None)
            logger.warning(
                "Slow request",
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(elapsed * 1000, 2),
                scheme=principal.scheme.value if principal is not None else None,
            )
        return response
