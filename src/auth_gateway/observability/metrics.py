"""Prometheus metrics.

HTTP request metrics come from prometheus-fastapi-instrumentator. The
authentication counters below are process-wide and incremented by the route
guard and the OAuth provider client.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from prometheus_client import Counter
from prometheus_fastapi_instrumentator import Instrumentator, metrics

from auth_gateway.observability.logging import get_logger


if TYPE_CHECKING:
    from fastapi import FastAPI

    from auth_gateway.core.config import Settings

logger = get_logger(__name__)

METRIC_NAMESPACE = "auth_gateway"

AUTH_ATTEMPTS = Counter(
    "auth_attempts_total",
    "Authentication attempts by scheme and outcome",
    ["scheme", "outcome"],
    namespace=METRIC_NAMESPACE,
)

AUTH_FAILURES = Counter(
    "auth_failures_total",
    "Authentication failures by scheme and failure kind",
    ["scheme", "kind"],
    namespace=METRIC_NAMESPACE,
)

PROVIDER_REQUESTS = Counter(
    "provider_requests_total",
    "Outbound calls to the delegated OAuth provider",
    ["operation", "outcome"],
    namespace=METRIC_NAMESPACE,
)


def record_auth_success(scheme: str) -> None:
    """Count a successful authentication."""
    AUTH_ATTEMPTS.labels(scheme=scheme, outcome="success").inc()


def record_auth_failure(scheme: str, kind: str) -> None:
    """Count a failed authentication and its failure kind."""
    AUTH_ATTEMPTS.labels(scheme=scheme, outcome="failure").inc()
    AUTH_FAILURES.labels(scheme=scheme, kind=kind).inc()


def record_provider_request(operation: str, outcome: str) -> None:
    """Count an outbound provider call.

    ``outcome`` is one of ``ok``, ``rejected``, ``unavailable`` or ``failed``.
    """
    PROVIDER_REQUESTS.labels(operation=operation, outcome=outcome).inc()


def setup_metrics(app: FastAPI, settings: Settings) -> Instrumentator:
    """Instrument the app and expose ``/metrics``.

    Returns an unattached Instrumentator when metrics are disabled.
    """
    if not settings.observability.metrics.enabled:
        logger.info("Metrics collection disabled")
        return Instrumentator()

    prefix = settings.api.prefix
    instrumentator = Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=[
            f"{prefix}/health",
            f"{prefix}/ready",
            f"{prefix}/metrics",
            "/openapi.json",
            "/docs",
            "/redoc",
        ],
        inprogress_name="http_requests_inprogress",
        inprogress_labels=True,
    )
    instrumentator.add(
        metrics.default(
            metric_namespace=METRIC_NAMESPACE,
            metric_subsystem="http",
            should_only_respect_2xx_for_highr=False,
        )
    )
    instrumentator.instrument(app)

    endpoint = f"{prefix}/metrics"
    instrumentator.expose(app, endpoint=endpoint, tags=["Monitoring"])
    logger.info("Prometheus metrics configured", endpoint=endpoint)

    return instrumentator


__all__ = [
    "AUTH_ATTEMPTS",
    "AUTH_FAILURES",
    "PROVIDER_REQUESTS",
    "record_auth_failure",
    "record_auth_success",
    "record_provider_request",
    "setup_metrics",
]
