"""Recipe schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from recibook.schemas.base import APIRequest, APIResponse, StoredDocument


DEFAULT_CATEGORY = "other"


class RecipeCreate(APIRequest):
    """Recipe fields supplied by the caller.

    Validation happens here, when the caller builds the payload; the
    repository persists whatever it is given.
    """

    title: str = Field(..., min_length=1, examples=["Tomato Soup"])
    description: str | None = None
    ingredients: list[str] = Field(..., min_length=1, examples=[["4 tomatoes"]])
    instructions: list[str] = Field(..., min_length=1, examples=[["Simmer"]])
    category: str = DEFAULT_CATEGORY
    image_url: str | None = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            msg = "title must not be blank"
            raise ValueError(msg)
        return v


class Recipe(StoredDocument):
    """A stored recipe as read back from the ``recipes`` collection."""

    id: str
    title: str
    description: str | None = None
    ingredients: list[str] = []
    instructions: list[str] = []
    category: str | None = DEFAULT_CATEGORY
    image_url: str | None = None
    author_id: str = ""
    author_name: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def created_at_seconds(self) -> float:
        """Creation time as epoch seconds; 0 when the store has none."""
        if self.created_at is None:
            return 0.0
        return self.created_at.timestamp()


class CreateRecipeResponse(APIResponse):
    """Identifier of a newly created recipe."""

    id: str
