"""OpenTelemetry tracing.

Inbound requests are traced through the FastAPI instrumentation and calls
to the OAuth provider through the httpx instrumentation, so a provider
timeout shows up as a child span of the request it failed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from auth_gateway.observability.logging import get_logger


if TYPE_CHECKING:
    from fastapi import FastAPI

    from auth_gateway.core.config import Settings

logger = get_logger(__name__)

_EXCLUDED_URLS = "health,ready,metrics,docs,redoc,openapi.json"


def setup_tracing(app: FastAPI, settings: Settings) -> None:
    """Install a tracer provider and instrument FastAPI and httpx."""
    tracing = settings.observability.tracing
    if not tracing.enabled:
        logger.info("Tracing disabled")
        return

    resource = Resource.create(
        {
            "service.name": settings.app.name.lower().replace(" ", "-"),
            "service.version": settings.app.version,
            "deployment.environment": settings.APP_ENV,
        }
    )
    provider = TracerProvider(resource=resource)

    if tracing.otlp_endpoint:
        exporter = OTLPSpanExporter(endpoint=tracing.otlp_endpoint, insecure=True)
        provider.add_span_processor(BatchSpanProcessor(exporter))
        logger.info("OTLP trace exporter configured", endpoint=tracing.otlp_endpoint)
    elif settings.is_development:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        logger.info("Console trace exporter configured")

    trace.set_tracer_provider(provider)

    FastAPIInstrumentor.instrument_app(app, excluded_urls=_EXCLUDED_URLS)
    HTTPXClientInstrumentor().instrument()
    logger.info("OpenTelemetry tracing configured")


def shutdown_tracing() -> None:
    """Flush pending spans and stop the tracer provider."""
    provider = trace.get_tracer_provider()
    if isinstance(provider, TracerProvider):
        provider.shutdown()
        logger.info("Tracing shutdown complete")


def add_span_attributes(**attributes: str | int | float | bool) -> None:
    """Annotate the active span, if one is recording."""
    span = trace.get_current_span()
    if span.is_recording():
        for key, value in attributes.items():
            span.set_attribute(key, value)


__all__ = [
    "add_span_attributes",
    "setup_tracing",
    "shutdown_tracing",
]
