"""Shared test fixtures for the Recibook data service tests.

Repositories and services are wired over the in-memory document store so
behavior can be asserted end to end without Firestore or PostgreSQL.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from recibook.core.config import get_settings
from recibook.database.repositories import (
    RecipeRepository,
    SocialGraphRepository,
    UserProfileRepository,
)
from recibook.schemas import RecipeCreate
from recibook.services.feed import FeedService
from tests.fixtures.memory_store import InMemoryDocumentStore


if TYPE_CHECKING:
    from collections.abc import Callable, Generator


os.environ.setdefault("APP_ENV", "test")


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None]:
    """Make every test read settings fresh from the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def memory_store() -> InMemoryDocumentStore:
    """Empty in-memory store with the Firestore ``in`` filter cap."""
    return InMemoryDocumentStore()


@pytest.fixture
def recipe_repository(memory_store: InMemoryDocumentStore) -> RecipeRepository:
    return RecipeRepository(memory_store)


@pytest.fixture
def social_repository(memory_store: InMemoryDocumentStore) -> SocialGraphRepository:
    return SocialGraphRepository(memory_store)


@pytest.fixture
def user_repository(
    memory_store: InMemoryDocumentStore,
    recipe_repository: RecipeRepository,
) -> UserProfileRepository:
    return UserProfileRepository(memory_store, recipe_repository)


@pytest.fixture
def feed_service(
    recipe_repository: RecipeRepository,
    social_repository: SocialGraphRepository,
) -> FeedService:
    return FeedService(recipe_repository, social_repository)


@pytest.fixture
def make_recipe() -> Callable[..., RecipeCreate]:
    """Factory for valid recipe payloads."""

    def _make(title: str = "Tomato Soup", **overrides: object) -> RecipeCreate:
        fields: dict[str, object] = {
            "title": title,
            "ingredients": ["4 tomatoes", "1 onion"],
            "instructions": ["Chop", "Simmer for 20 minutes"],
        }
        fields.update(overrides)
        return RecipeCreate(**fields)

    return _make
