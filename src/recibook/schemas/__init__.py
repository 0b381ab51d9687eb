"""Pydantic schemas for stored documents and API payloads."""

from recibook.schemas.base import APIRequest, APIResponse, StoredDocument
from recibook.schemas.image import ImageFromUriRequest, ImageUploadResponse
from recibook.schemas.recipe import (
    DEFAULT_CATEGORY,
    CreateRecipeResponse,
    Recipe,
    RecipeCreate,
)
from recibook.schemas.social import (
    FollowEdge,
    FollowingResponse,
    FollowStatusResponse,
    follow_edge_id,
)
from recibook.schemas.user import UserProfile, UserProfileUpsert


__all__ = [
    "DEFAULT_CATEGORY",
    "APIRequest",
    "APIResponse",
    "CreateRecipeResponse",
    "FollowEdge",
    "FollowStatusResponse",
    "FollowingResponse",
    "ImageFromUriRequest",
    "ImageUploadResponse",
    "Recipe",
    "RecipeCreate",
    "StoredDocument",
    "UserProfile",
    "UserProfileUpsert",
    "follow_edge_id",
]
