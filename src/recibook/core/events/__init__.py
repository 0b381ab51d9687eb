"""Application lifecycle events."""

from recibook.core.events.lifespan import attach_services, lifespan


__all__ = ["attach_services", "lifespan"]
