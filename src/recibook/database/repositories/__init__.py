"""Database repositories."""

from recibook.database.repositories.exceptions import (
    ProfileError,
    RecipeCreateError,
    RecipeLoadError,
    RepositoryError,
    SocialGraphError,
)
from recibook.database.repositories.recipes import RecipeRepository
from recibook.database.repositories.social import SocialGraphRepository
from recibook.database.repositories.users import UserProfileRepository


__all__ = [
    "ProfileError",
    "RecipeCreateError",
    "RecipeLoadError",
    "RecipeRepository",
    "RepositoryError",
    "SocialGraphError",
    "SocialGraphRepository",
    "UserProfileRepository",
]
