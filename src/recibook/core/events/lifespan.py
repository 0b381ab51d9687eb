"""Application lifespan event handlers.

This module defines the lifespan context manager that handles:
- Application startup: open the document store, build repositories and services
- Application shutdown: release store, storage and HTTP clients
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from recibook.auth.identity import HeaderIdentityProvider
from recibook.core.config import Settings, get_settings
from recibook.database.connection import close_document_store, open_document_store
from recibook.database.repositories import (
    RecipeRepository,
    SocialGraphRepository,
    UserProfileRepository,
)
from recibook.observability.logging import get_logger, setup_logging
from recibook.services.feed.service import FeedService
from recibook.services.storage.service import ImageUploadService


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from fastapi import FastAPI

    from recibook.database.store.protocol import DocumentStore

logger = get_logger(__name__)


def attach_services(app: FastAPI, store: DocumentStore, settings: Settings) -> None:
    """Build repositories and the feed service over ``store`` into app state."""
    recipes = RecipeRepository(store)
    social = SocialGraphRepository(store)

    app.state.store = store
    app.state.recipe_repository = recipes
    app.state.social_repository = social
    app.state.user_repository = UserProfileRepository(store, recipes)
    app.state.feed_service = FeedService(
        recipes, social, batch_size=settings.feed.batch_size
    )
    app.state.identity_provider = HeaderIdentityProvider(
        user_id_header=settings.api.user_id_header,
        user_name_header=settings.api.user_name_header,
    )


async def _startup(app: FastAPI, settings: Settings) -> None:
    """Initialize all application services during startup."""
    setup_logging(
        log_level=settings.logging.level,
        log_format=settings.logging.format,
        is_development=settings.is_development,
    )

    logger.info(
        "Starting application",
        app_name=settings.app.name,
        environment=settings.APP_ENV,
        store_backend=settings.store.backend,
    )

    # The store is critical - don't continue without it
    try:
        store = await open_document_store(settings)
    except Exception:
        logger.exception("Failed to open document store")
        raise

    attach_services(app, store, settings)

    # Image uploads are optional - the rest of the API works without a bucket
    await _init_image_service(app, settings)

    logger.info("Application startup complete")


async def _init_image_service(app: FastAPI, settings: Settings) -> None:
    """Initialize the image upload service when a bucket is configured."""
    app.state.image_service = None

    if not settings.storage.bucket:
        logger.warning("No storage bucket configured - image uploads unavailable")
        return

    from recibook.services.storage.gcs import GCSObjectStorage

    service = ImageUploadService(
        GCSObjectStorage(
            settings.storage.bucket,
            project=settings.storage.project,
            public_base_url=settings.storage.public_base_url,
        ),
        prefix=settings.storage.prefix,
        fetch_timeout=settings.storage.fetch_timeout,
    )
    try:
        await service.initialize()
    except Exception:
        logger.exception("Failed to initialize ImageUploadService - uploads unavailable")
        return

    app.state.image_service = service
    logger.info("ImageUploadService ready", bucket=settings.storage.bucket)


async def _shutdown(app: FastAPI) -> None:
    """Shutdown all application services."""
    logger.info("Shutting down application")

    image_service: ImageUploadService | None = getattr(app.state, "image_service", None)
    if image_service is not None:
        await image_service.shutdown()

    await close_document_store(getattr(app.state, "store", None))

    logger.info("Application shutdown complete")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan events.

    Resources initialized here live in ``app.state`` for the lifetime of the
    application and are read by the dependencies in ``recibook.api``.
    """
    settings = get_settings()
    await _startup(app, settings)
    try:
        yield
    finally:
        await _shutdown(app)
