"""Personalized feed composition.

The feed is every recipe written by the users the caller follows, newest
first. Followed ids are queried in batches because the store caps ``in``
filters, then the batches are merged back into one ordering.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from recibook.database.repositories.exceptions import RepositoryError
from recibook.observability.logging import get_logger
from recibook.services.feed.batching import fan_out_merge
from recibook.services.feed.exceptions import FeedLoadError


if TYPE_CHECKING:
    from recibook.database.repositories.recipes import RecipeRepository
    from recibook.database.repositories.social import SocialGraphRepository
    from recibook.schemas.recipe import Recipe

logger = get_logger(__name__)

DEFAULT_BATCH_SIZE = 10


class FeedService:
    """Builds a user's feed from the follow graph and recipe queries."""

    def __init__(
        self,
        recipes: RecipeRepository,
        social: SocialGraphRepository,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        self._recipes = recipes
        self._social = social
        # Never ask the store for more values than it accepts
        self._batch_size = max(1, min(batch_size, recipes.in_filter_limit))

    @property
    def batch_size(self) -> int:
        return self._batch_size

    async def get_feed_recipes(self, current_user_id: str) -> list[Recipe]:
        """Recipes by followed users, newest first.

        Raises:
            FeedLoadError: If the follow graph or any batch query fails.
        """
        try:
            following = await self._social.get_following_ids(current_user_id)
            if not following:
                return []

            feed = await fan_out_merge(
                sorted(following),
                batch_size=self._batch_size,
                fetch=self._recipes.list_recipes_by_authors,
                sort_key=lambda recipe: recipe.created_at_seconds,
            )
        except RepositoryError as e:
            logger.warning(
                "Feed load failed", user_id=current_user_id, error=str(e)
            )
            msg = "Failed to load feed"
            raise FeedLoadError(msg) from e

        logger.debug(
            "Feed composed",
            user_id=current_user_id,
            following=len(following),
            recipes=len(feed),
        )
        return feed
