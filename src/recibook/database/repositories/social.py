"""Follow graph repository.

Edges live in the ``follows`` collection under the composite id
``{followerId}_{followingId}``, so repeated or concurrent follows of the same
pair land on one document.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import ValidationError

from recibook.database.repositories.exceptions import SocialGraphError
from recibook.database.store.exceptions import PersistenceError
from recibook.database.store.protocol import SERVER_TIMESTAMP, FieldFilter
from recibook.observability.logging import get_logger
from recibook.schemas.social import FollowEdge, follow_edge_id


if TYPE_CHECKING:
    from recibook.database.store.protocol import DocumentStore

logger = get_logger(__name__)

FOLLOWS_COLLECTION = "follows"


class SocialGraphRepository:
    """Repository for follow edges."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def follow_user(self, follower_id: str, following_id: str) -> None:
        """Create (or refresh) the edge; following yourself does nothing."""
        if follower_id == following_id:
            return
        edge_id = follow_edge_id(follower_id, following_id)
        try:
            await self._store.set(
                FOLLOWS_COLLECTION,
                edge_id,
                {
                    "followerId": follower_id,
                    "followingId": following_id,
                    "createdAt": SERVER_TIMESTAMP,
                },
            )
        except PersistenceError as e:
            logger.exception("Error following user", edge_id=edge_id)
            msg = "Failed to follow user"
            raise SocialGraphError(msg) from e
        logger.info("User followed", follower_id=follower_id, following_id=following_id)

    async def unfollow_user(self, follower_id: str, following_id: str) -> None:
        """Delete the edge; a missing edge is not an error."""
        if follower_id == following_id:
            return
        edge_id = follow_edge_id(follower_id, following_id)
        try:
            await self._store.delete(FOLLOWS_COLLECTION, edge_id)
        except PersistenceError as e:
            logger.exception("Error unfollowing user", edge_id=edge_id)
            msg = "Failed to unfollow user"
            raise SocialGraphError(msg) from e
        logger.info(
            "User unfollowed", follower_id=follower_id, following_id=following_id
        )

    async def is_following(self, follower_id: str, following_id: str) -> bool:
        """Check whether the edge ``follower_id -> following_id`` exists.

        Args:
            follower_id: The user who would be following.
            following_id: The user who would be followed.

        Returns:
            True if the edge exists. The check is directional.

        Raises:
            SocialGraphError: If the follow status cannot be read.
        """
        try:
            snapshots = await self._store.query(
                FOLLOWS_COLLECTION,
                filters=(
                    FieldFilter("followerId", "==", follower_id),
                    FieldFilter("followingId", "==", following_id),
                ),
                limit=1,
            )
        except PersistenceError as e:
            logger.exception("Error checking follow status")
            msg = "Failed to load follow status"
            raise SocialGraphError(msg) from e
        return bool(snapshots)

    async def get_following_ids(self, follower_id: str) -> set[str]:
        """Ids of every user ``follower_id`` follows. Unordered.

        Raises:
            SocialGraphError: If the edges cannot be read or an edge document
                is malformed.
        """
        try:
            snapshots = await self._store.query(
                FOLLOWS_COLLECTION,
                filters=(FieldFilter("followerId", "==", follower_id),),
            )
            edges = [FollowEdge.model_validate(snap.data) for snap in snapshots]
        except (PersistenceError, ValidationError) as e:
            logger.exception("Error loading following ids", follower_id=follower_id)
            msg = "Failed to load followed users"
            raise SocialGraphError(msg) from e
        return {edge.following_id for edge in edges}
