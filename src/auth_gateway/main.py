"""Application entry point.

Usage:
    # Development with auto-reload
    uvicorn auth_gateway.main:app --reload

    # Installed console script
    auth-gateway
"""

from __future__ import annotations

import uvicorn

from auth_gateway.core.config import get_settings
from auth_gateway.factory import create_app


app = create_app()


def run() -> None:
    """Serve ``app`` with uvicorn using the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        "auth_gateway.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.is_development,
        log_level=settings.logging.level.lower(),
    )


if __name__ == "__main__":
    run()
