"""Observability: loguru logging, Prometheus metrics and OpenTelemetry tracing."""
