"""Follow graph schemas."""

from __future__ import annotations

from datetime import datetime

from recibook.schemas.base import APIResponse, StoredDocument


def follow_edge_id(follower_id: str, following_id: str) -> str:
    """Composite document id for the edge ``follower -> following``."""
    return f"{follower_id}_{following_id}"


class FollowEdge(StoredDocument):
    """A document in the ``follows`` collection."""

    follower_id: str
    following_id: str
    created_at: datetime | None = None


class FollowStatusResponse(APIResponse):
    """Whether the caller follows a user."""

    following: bool


class FollowingResponse(APIResponse):
    """Users the caller follows, sorted for stable output."""

    user_ids: list[str]
