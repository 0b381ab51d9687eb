"""FastAPI dependencies for service access.

Repositories and services are built during application startup and stored
in ``app.state``. These dependencies hand them to route handlers, and resolve
the caller identity from the gateway headers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi import Request

from recibook.auth.identity import CallerIdentity, HeaderIdentityProvider
from recibook.core.config import get_settings
from recibook.core.exceptions import ServiceUnavailableException


if TYPE_CHECKING:
    from recibook.database.repositories import (
        RecipeRepository,
        SocialGraphRepository,
        UserProfileRepository,
    )
    from recibook.database.store.protocol import DocumentStore
    from recibook.services.feed.service import FeedService
    from recibook.services.storage.service import ImageUploadService


def _from_state(request: Request, name: str, label: str) -> Any:
    service = getattr(request.app.state, name, None)
    if service is None:
        raise ServiceUnavailableException(f"{label} not available")
    return service


async def get_document_store(request: Request) -> DocumentStore | None:
    """Get the document store, or ``None`` before startup completed."""
    return getattr(request.app.state, "store", None)


async def get_recipe_repository(request: Request) -> RecipeRepository:
    """Get the recipe repository from app state.

    Raises:
        ServiceUnavailableException: 503 if the store was never opened.
    """
    return _from_state(request, "recipe_repository", "Recipe repository")


async def get_social_repository(request: Request) -> SocialGraphRepository:
    """Get the social graph repository from app state."""
    return _from_state(request, "social_repository", "Social graph repository")


async def get_user_repository(request: Request) -> UserProfileRepository:
    """Get the user profile repository from app state."""
    return _from_state(request, "user_repository", "User profile repository")


async def get_feed_service(request: Request) -> FeedService:
    """Get the feed service from app state."""
    return _from_state(request, "feed_service", "Feed service")


async def get_image_service(request: Request) -> ImageUploadService:
    """Get the image upload service from app state.

    Raises:
        ServiceUnavailableException: 503 if no storage bucket is configured.
    """
    return _from_state(request, "image_service", "Image upload service")


def _identity_provider(request: Request) -> HeaderIdentityProvider:
    provider: HeaderIdentityProvider | None = getattr(
        request.app.state, "identity_provider", None
    )
    if provider is None:
        settings = get_settings()
        provider = HeaderIdentityProvider(
            user_id_header=settings.api.user_id_header,
            user_name_header=settings.api.user_name_header,
        )
    return provider


async def get_current_user(request: Request) -> CallerIdentity:
    """Resolve the caller identity.

    Raises:
        AuthError: Rendered as 401 when the identity headers are missing.
    """
    return _identity_provider(request).identify(request)


__all__ = [
    "get_current_user",
    "get_document_store",
    "get_feed_service",
    "get_image_service",
    "get_recipe_repository",
    "get_social_repository",
    "get_user_repository",
]
