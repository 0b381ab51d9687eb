"""Recipe repository.

Data access for the ``recipes`` collection. Every list operation returns
recipes newest first (``createdAt`` descending), the ordering all callers
rely on.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import ValidationError

from recibook.database.repositories.exceptions import RecipeCreateError, RecipeLoadError
from recibook.database.store.exceptions import PersistenceError
from recibook.database.store.protocol import (
    SERVER_TIMESTAMP,
    FieldFilter,
    OrderBy,
)
from recibook.observability.logging import get_logger
from recibook.schemas.recipe import Recipe


if TYPE_CHECKING:
    from collections.abc import Sequence

    from recibook.database.store.protocol import DocumentSnapshot, DocumentStore
    from recibook.schemas.recipe import RecipeCreate

logger = get_logger(__name__)

RECIPES_COLLECTION = "recipes"

NEWEST_FIRST = OrderBy("createdAt", descending=True)


def _to_recipes(snapshots: Sequence[DocumentSnapshot]) -> list[Recipe]:
    return [Recipe.model_validate(snap.to_dict()) for snap in snapshots]


def matches_term(recipe: Recipe, term: str) -> bool:
    """Case-insensitive substring match on title, ingredients, category, description."""
    needle = term.casefold()
    if needle in recipe.title.casefold():
        return True
    if any(needle in ingredient.casefold() for ingredient in recipe.ingredients):
        return True
    if recipe.category and needle in recipe.category.casefold():
        return True
    return bool(recipe.description and needle in recipe.description.casefold())


class RecipeRepository:
    """Repository for recipe documents."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    @property
    def in_filter_limit(self) -> int:
        """Largest author batch ``list_recipes_by_authors`` accepts."""
        return self._store.in_filter_limit

    async def create_recipe(
        self,
        data: RecipeCreate,
        user_id: str,
        author_name: str,
    ) -> str:
        """Persist a recipe authored by ``user_id`` and return its new id.

        Timestamps are assigned by the store, not the caller's clock.

        Raises:
            RecipeCreateError: If the write fails.
        """
        document = {
            **data.model_dump(by_alias=True),
            "authorId": user_id,
            "authorName": author_name,
            "createdAt": SERVER_TIMESTAMP,
            "updatedAt": SERVER_TIMESTAMP,
        }
        try:
            recipe_id = await self._store.add(RECIPES_COLLECTION, document)
        except PersistenceError as e:
            logger.exception("Error adding recipe", user_id=user_id)
            msg = "Failed to create recipe"
            raise RecipeCreateError(msg) from e

        logger.info("Recipe created", recipe_id=recipe_id, user_id=user_id)
        return recipe_id

    async def get_recipe(self, recipe_id: str) -> Recipe | None:
        """Fetch a single recipe, or None when it does not exist."""
        try:
            snap = await self._store.get(RECIPES_COLLECTION, recipe_id)
            return Recipe.model_validate(snap.to_dict()) if snap else None
        except (PersistenceError, ValidationError) as e:
            logger.exception("Error getting recipe", recipe_id=recipe_id)
            msg = "Failed to load recipe"
            raise RecipeLoadError(msg) from e

    async def _list(
        self,
        filters: Sequence[FieldFilter],
        error_message: str,
    ) -> list[Recipe]:
        try:
            snapshots = await self._store.query(
                RECIPES_COLLECTION, filters=filters, order_by=NEWEST_FIRST
            )
            return _to_recipes(snapshots)
        except (PersistenceError, ValidationError) as e:
            logger.exception(error_message, filters=[f.field for f in filters])
            raise RecipeLoadError(error_message) from e

    async def list_public_recipes(self) -> list[Recipe]:
        """All recipes, newest first. Unpaginated."""
        return await self._list((), "Failed to load recipes")

    async def list_user_recipes(self, user_id: str) -> list[Recipe]:
        """Recipes authored by ``user_id``, newest first."""
        return await self._list(
            (FieldFilter("authorId", "==", user_id),),
            "Failed to load user recipes",
        )

    async def list_recipes_by_category(self, category: str) -> list[Recipe]:
        """Recipes whose stored category equals ``category.lower()``.

        Stored categories are not normalized, so a recipe saved as "Dessert"
        is not returned for "dessert" or "Dessert".
        """
        return await self._list(
            (FieldFilter("category", "==", category.lower()),),
            "Failed to load recipes by category",
        )

    async def list_recipes_by_authors(self, author_ids: Sequence[str]) -> list[Recipe]:
        """Recipes by any of ``author_ids``, newest first.

        ``author_ids`` must not exceed ``in_filter_limit``; callers with more
        authors partition them first.
        """
        if not author_ids:
            return []
        return await self._list(
            (FieldFilter("authorId", "in", list(author_ids)),),
            "Failed to load recipes by authors",
        )

    async def search_recipes(self, term: str) -> list[Recipe]:
        """Full scan of public recipes filtered by ``matches_term``.

        Matches keep the newest-first order of ``list_public_recipes``;
        there is no relevance ranking.
        """
        try:
            recipes = await self.list_public_recipes()
        except RecipeLoadError as e:
            msg = "Failed to search recipes"
            raise RecipeLoadError(msg) from e

        results = [recipe for recipe in recipes if matches_term(recipe, term)]
        logger.debug(
            "Recipe search complete",
            term=term,
            scanned=len(recipes),
            matched=len(results),
        )
        return results
