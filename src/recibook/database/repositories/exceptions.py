"""Repository exceptions.

Each repository catches ``PersistenceError`` from the store and re-raises
one of these, chained to the original. The message is what the caller
shows the user.
"""

from __future__ import annotations


class RepositoryError(Exception):
    """Base exception for repository failures."""


class RecipeCreateError(RepositoryError):
    """Raised when a recipe could not be persisted."""


class RecipeLoadError(RepositoryError):
    """Raised when recipes could not be read."""


class SocialGraphError(RepositoryError):
    """Raised when the follow graph could not be read or written."""


class ProfileError(RepositoryError):
    """Raised when user profiles could not be read or written."""
