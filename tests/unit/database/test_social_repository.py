"""Unit tests for SocialGraphRepository.

Tests cover:
- Follow edges keyed by the composite follower_following id
- Idempotent follow and unfollow
- Self-follow as a silent no-op
- Following-set and follow-status reads
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from recibook.database.repositories.exceptions import SocialGraphError
from recibook.schemas import follow_edge_id


if TYPE_CHECKING:
    from recibook.database.repositories import SocialGraphRepository
    from tests.fixtures.memory_store import InMemoryDocumentStore

pytestmark = pytest.mark.unit


class TestFollowEdgeId:
    """Tests for the composite edge id."""

    def test_joins_ids_with_underscore(self) -> None:
        """Should produce follower_following."""
        assert follow_edge_id("alice", "bob") == "alice_bob"

    def test_is_directional(self) -> None:
        """Should differ for the reverse edge."""
        assert follow_edge_id("alice", "bob") != follow_edge_id("bob", "alice")


class TestFollowUser:
    """Tests for follow_user."""

    @pytest.mark.asyncio
    async def test_writes_edge_at_composite_id(
        self,
        social_repository: SocialGraphRepository,
        memory_store: InMemoryDocumentStore,
    ) -> None:
        """Should store the edge under follower_following."""
        await social_repository.follow_user("alice", "bob")

        edge = memory_store.collections["follows"]["alice_bob"]
        assert edge["followerId"] == "alice"
        assert edge["followingId"] == "bob"
        assert edge["createdAt"] is not None

    @pytest.mark.asyncio
    async def test_repeated_follow_keeps_one_edge(
        self,
        social_repository: SocialGraphRepository,
        memory_store: InMemoryDocumentStore,
    ) -> None:
        """Should overwrite rather than duplicate."""
        await social_repository.follow_user("alice", "bob")
        await social_repository.follow_user("alice", "bob")

        assert list(memory_store.collections["follows"]) == ["alice_bob"]

    @pytest.mark.asyncio
    async def test_self_follow_is_noop(
        self,
        social_repository: SocialGraphRepository,
        memory_store: InMemoryDocumentStore,
    ) -> None:
        """Should not write anything when following yourself."""
        await social_repository.follow_user("alice", "alice")

        assert "follows" not in memory_store.collections
        assert await social_repository.is_following("alice", "alice") is False

    @pytest.mark.asyncio
    async def test_raises_on_store_failure(
        self,
        social_repository: SocialGraphRepository,
        memory_store: InMemoryDocumentStore,
    ) -> None:
        """Should wrap store failures in SocialGraphError."""
        memory_store.fail_on.add("set")

        with pytest.raises(SocialGraphError, match="Failed to follow user"):
            await social_repository.follow_user("alice", "bob")


class TestUnfollowUser:
    """Tests for unfollow_user."""

    @pytest.mark.asyncio
    async def test_removes_edge(
        self, social_repository: SocialGraphRepository
    ) -> None:
        """Should delete the edge."""
        await social_repository.follow_user("alice", "bob")

        await social_repository.unfollow_user("alice", "bob")

        assert await social_repository.is_following("alice", "bob") is False

    @pytest.mark.asyncio
    async def test_unfollow_without_edge_is_noop(
        self, social_repository: SocialGraphRepository
    ) -> None:
        """Should succeed when no edge exists."""
        await social_repository.unfollow_user("alice", "bob")

        assert await social_repository.get_following_ids("alice") == set()

    @pytest.mark.asyncio
    async def test_raises_on_store_failure(
        self,
        social_repository: SocialGraphRepository,
        memory_store: InMemoryDocumentStore,
    ) -> None:
        """Should wrap store failures in SocialGraphError."""
        memory_store.fail_on.add("delete")

        with pytest.raises(SocialGraphError, match="Failed to unfollow user"):
            await social_repository.unfollow_user("alice", "bob")


class TestReads:
    """Tests for is_following and get_following_ids."""

    @pytest.mark.asyncio
    async def test_is_following_is_directional(
        self, social_repository: SocialGraphRepository
    ) -> None:
        """Should only report the edge in its own direction."""
        await social_repository.follow_user("alice", "bob")

        assert await social_repository.is_following("alice", "bob") is True
        assert await social_repository.is_following("bob", "alice") is False

    @pytest.mark.asyncio
    async def test_is_following_queries_with_limit_one(
        self,
        social_repository: SocialGraphRepository,
        memory_store: InMemoryDocumentStore,
    ) -> None:
        """Should stop at the first matching edge."""
        await social_repository.is_following("alice", "bob")

        collection, filters, limit = memory_store.queries[-1]
        assert collection == "follows"
        assert {f.field for f in filters} == {"followerId", "followingId"}
        assert limit == 1

    @pytest.mark.asyncio
    async def test_following_ids_collects_targets(
        self, social_repository: SocialGraphRepository
    ) -> None:
        """Should return every followed user exactly once."""
        for target in ("bob", "carol", "bob"):
            await social_repository.follow_user("alice", target)
        await social_repository.follow_user("dave", "erin")

        assert await social_repository.get_following_ids("alice") == {"bob", "carol"}

    @pytest.mark.asyncio
    async def test_following_ids_raise_on_store_failure(
        self,
        social_repository: SocialGraphRepository,
        memory_store: InMemoryDocumentStore,
    ) -> None:
        """Should wrap query failures in SocialGraphError."""
        memory_store.fail_on.add("query")

        with pytest.raises(SocialGraphError):
            await social_repository.get_following_ids("alice")

    @pytest.mark.asyncio
    async def test_following_ids_reject_malformed_edge(
        self,
        social_repository: SocialGraphRepository,
        memory_store: InMemoryDocumentStore,
    ) -> None:
        """Should raise SocialGraphError when an edge lacks its target."""
        await social_repository.follow_user("alice", "bob")
        memory_store.put("follows", "alice_", {"followerId": "alice"})

        with pytest.raises(SocialGraphError, match="Failed to load followed users"):
            await social_repository.get_following_ids("alice")
