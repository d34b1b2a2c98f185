"""HTTP middleware stack."""

from auth_gateway.core.middleware.logging import LoggingMiddleware
from auth_gateway.core.middleware.request_id import RequestIDMiddleware
from auth_gateway.core.middleware.security_headers import SecurityHeadersMiddleware
from auth_gateway.core.middleware.timing import TimingMiddleware


__all__ = [
    "LoggingMiddleware",
    "RequestIDMiddleware",
    "SecurityHeadersMiddleware",
    "TimingMiddleware",
]
