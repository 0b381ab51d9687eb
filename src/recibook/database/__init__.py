"""Data access layer.

This module provides:
- The document store lifecycle (Firestore or PostgreSQL backend)
- Repository classes for recipes, follows and user profiles
- Health check utilities
"""

from recibook.database.connection import (
    build_document_store,
    check_store_health,
    close_document_store,
    open_document_store,
)
from recibook.database.repositories import (
    RecipeRepository,
    SocialGraphRepository,
    UserProfileRepository,
)


__all__ = [
    "RecipeRepository",
    "SocialGraphRepository",
    "UserProfileRepository",
    "build_document_store",
    "check_store_health",
    "close_document_store",
    "open_document_store",
]
