"""Liveness and readiness probes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from auth_gateway.api.dependencies import get_app_settings
from auth_gateway.core.config import Settings, StorageBackend
from auth_gateway.database.connection import check_database_health
from auth_gateway.schemas.health import HealthResponse, ReadinessResponse


router = APIRouter(tags=["health"])

SettingsDep = Annotated[Settings, Depends(get_app_settings)]


@router.get("/health", response_model=HealthResponse, summary="Liveness probe")
async def health_check(settings: SettingsDep) -> HealthResponse:
    """Report that the process is up. No dependency is checked."""
    return HealthResponse(
        status="healthy",
        version=settings.app.version,
        environment=settings.APP_ENV,
    )


@router.get("/ready", response_model=ReadinessResponse, summary="Readiness probe")
async def readiness_check(request: Request, settings: SettingsDep) -> ReadinessResponse:
    """Report whether storage and authentication are ready for traffic."""
    backend = settings.storage.backend
    dependencies = {"storage": backend.value}

    if backend is StorageBackend.POSTGRES:
        dependencies["database"] = await check_database_health()

    ready = getattr(request.app.state, "product_service", None) is not None
    dependencies["auth"] = "healthy" if ready else "not_initialized"

    all_healthy = ready and dependencies.get("database", "healthy") == "healthy"
    return ReadinessResponse(
        status="ready" if all_healthy else "degraded",
        version=settings.app.version,
        environment=settings.APP_ENV,
        dependencies=dependencies,
    )
