"""Root endpoint."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from auth_gateway.api.dependencies import get_app_settings
from auth_gateway.core.config import Settings
from auth_gateway.schemas.root import RootResponse


router = APIRouter(tags=["root"])


@router.get("/", response_model=RootResponse, summary="Service information")
async def root(settings: Annotated[Settings, Depends(get_app_settings)]) -> RootResponse:
    prefix = settings.api.prefix
    return RootResponse(
        service=settings.app.name,
        version=settings.app.version,
        status="operational",
        docs=f"{prefix}/docs" if docs_enabled(settings) else "disabled",
        health=f"{prefix}/health",
    )


def docs_enabled(settings: Settings) -> bool:
    """Interactive docs are never served in production."""
    return settings.api.docs_enabled and not settings.is_production
