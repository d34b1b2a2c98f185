"""Root endpoint response schema."""

from __future__ import annotations

from pydantic import BaseModel, Field


class RootResponse(BaseModel):
    """Basic service information."""

    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    status: str = Field(..., description="Operational status", examples=["operational"])
    docs: str = Field(..., description="Documentation URL or 'disabled'")
    health: str = Field(..., description="Health check URL")
