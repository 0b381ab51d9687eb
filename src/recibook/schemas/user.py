"""User profile schemas."""

from __future__ import annotations

from pydantic import Field

from recibook.schemas.base import APIRequest, StoredDocument


class UserProfile(StoredDocument):
    """A document in the ``users`` collection, keyed by auth uid."""

    uid: str
    display_name: str = ""
    email: str = ""
    photo_url: str = Field(default="", alias="photoURL")


class UserProfileUpsert(APIRequest):
    """Profile fields reported by the auth provider at login."""

    display_name: str | None = None
    email: str | None = None
    photo_url: str | None = Field(default=None, alias="photoURL")
