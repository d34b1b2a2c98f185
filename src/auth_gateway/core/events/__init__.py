"""Application lifecycle events."""

from auth_gateway.core.events.lifespan import lifespan


__all__ = ["lifespan"]
