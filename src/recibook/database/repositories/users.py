"""User profile repository.

Profiles are keyed by the auth provider's uid and created lazily on first
login. Search falls back to recipe author names for users whose profile
document was never written.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import ValidationError

from recibook.database.repositories.exceptions import ProfileError, RecipeLoadError
from recibook.database.store.exceptions import PersistenceError
from recibook.observability.logging import get_logger
from recibook.schemas.user import UserProfile


if TYPE_CHECKING:
    from recibook.database.repositories.recipes import RecipeRepository
    from recibook.database.store.protocol import DocumentStore

logger = get_logger(__name__)

USERS_COLLECTION = "users"


class UserProfileRepository:
    """Repository for user profile documents."""

    def __init__(self, store: DocumentStore, recipes: RecipeRepository) -> None:
        self._store = store
        self._recipes = recipes

    async def get_user_profile(self, uid: str) -> UserProfile | None:
        """Fetch a profile by user id.

        Args:
            uid: The user id, which is also the profile document id.

        Returns:
            The profile, or None when the user has never signed in.

        Raises:
            ProfileError: If the profile cannot be read or is malformed.
        """
        try:
            snap = await self._store.get(USERS_COLLECTION, uid)
            if snap is None:
                return None
            return UserProfile.model_validate({"uid": uid, **snap.data})
        except (PersistenceError, ValidationError) as e:
            logger.exception("Error loading user profile", uid=uid)
            msg = "Failed to load user profile"
            raise ProfileError(msg) from e

    async def ensure_user_profile(
        self,
        uid: str,
        display_name: str | None = None,
        email: str | None = None,
        photo_url: str | None = None,
    ) -> UserProfile:
        """Return the profile for ``uid``, creating it first if absent.

        An existing profile is returned unchanged.
        """
        existing = await self.get_user_profile(uid)
        if existing is not None:
            return existing

        profile = UserProfile(
            uid=uid,
            display_name=display_name or "",
            email=email or "",
            photo_url=photo_url or "",
        )
        try:
            await self._store.set(
                USERS_COLLECTION, uid, profile.model_dump(by_alias=True)
            )
        except PersistenceError as e:
            logger.exception("Error creating user profile", uid=uid)
            msg = "Failed to create user profile"
            raise ProfileError(msg) from e

        logger.info("User profile created", uid=uid)
        return profile

    async def search_users(self, term: str) -> list[UserProfile]:
        """Profiles whose display name contains ``term`` (case-insensitive).

        When no profile matches, recipe authors are searched instead.
        """
        needle = term.casefold()
        try:
            snapshots = await self._store.query(USERS_COLLECTION)
            profiles = [
                UserProfile.model_validate({"uid": snap.id, **snap.data})
                for snap in snapshots
            ]
        except (PersistenceError, ValidationError) as e:
            logger.exception("Error searching users")
            msg = "Failed to search users"
            raise ProfileError(msg) from e

        results = [p for p in profiles if needle in p.display_name.casefold()]
        if results:
            return results
        return await self.find_users_by_author_name(term)

    async def find_users_by_author_name(self, term: str) -> list[UserProfile]:
        """Infer users from recipes whose ``authorName`` contains ``term``.

        One profile per author id; the last recipe seen supplies the name.
        """
        needle = term.casefold()
        try:
            recipes = await self._recipes.list_public_recipes()
        except RecipeLoadError as e:
            msg = "Failed to search users"
            raise ProfileError(msg) from e

        authors: dict[str, UserProfile] = {}
        for recipe in recipes:
            if needle in recipe.author_name.casefold():
                authors[recipe.author_id] = UserProfile(
                    uid=recipe.author_id,
                    display_name=recipe.author_name,
                )
        return list(authors.values())
