"""Unit tests for recipe endpoints.

Tests cover:
- Publishing a recipe as the caller
- Listing, searching and category filtering
- Single recipe lookup
- The personalized feed
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from tests.fixtures.headers import ALICE, BOB, CAROL


if TYPE_CHECKING:
    import httpx

    from tests.fixtures.memory_store import InMemoryDocumentStore


pytestmark = pytest.mark.unit


def _recipe(title: str, **extra: Any) -> dict[str, Any]:
    return {
        "title": title,
        "ingredients": ["2 cups flour"],
        "instructions": ["Mix", "Bake"],
        **extra,
    }


async def _publish(
    client: httpx.AsyncClient, title: str, headers: dict[str, str], **extra: Any
) -> str:
    response = await client.post("/recipes", json=_recipe(title, **extra), headers=headers)
    assert response.status_code == 201
    return response.json()["id"]


class TestCreateRecipe:
    """Tests for POST /recipes."""

    @pytest.mark.asyncio
    async def test_creates_recipe_as_caller(self, client: httpx.AsyncClient) -> None:
        """Should stamp the caller as author."""
        recipe_id = await _publish(client, "Pie", ALICE, category="dessert")

        response = await client.get(f"/recipes/{recipe_id}")

        assert response.status_code == 200
        body = response.json()
        assert body["authorId"] == "alice"
        assert body["authorName"] == "Alice"
        assert body["category"] == "dessert"
        assert body["createdAt"] is not None

    @pytest.mark.asyncio
    async def test_author_defaults_to_anonymous(self, client: httpx.AsyncClient) -> None:
        """Should use Anonymous when no display name header is sent."""
        recipe_id = await _publish(client, "Pie", CAROL)

        response = await client.get(f"/recipes/{recipe_id}")

        assert response.json()["authorName"] == "Anonymous"

    @pytest.mark.asyncio
    async def test_requires_identity(self, client: httpx.AsyncClient) -> None:
        """Should reject anonymous writes with 401."""
        response = await client.post("/recipes", json=_recipe("Pie"))

        assert response.status_code == 401
        assert response.json()["error"] == "UNAUTHORIZED"

    @pytest.mark.asyncio
    async def test_rejects_invalid_body(self, client: httpx.AsyncClient) -> None:
        """Should reject recipes without ingredients."""
        response = await client.post(
            "/recipes", json=_recipe("Pie", ingredients=[]), headers=ALICE
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_store_failure_is_bad_gateway(
        self, client: httpx.AsyncClient, api_store: InMemoryDocumentStore
    ) -> None:
        """Should map a failed write to 502."""
        api_store.fail_on.add("add")

        response = await client.post("/recipes", json=_recipe("Pie"), headers=ALICE)

        assert response.status_code == 502
        assert response.json()["error"] == "RECIPE_CREATE_FAILED"


class TestListRecipes:
    """Tests for the recipe listing endpoints."""

    @pytest.mark.asyncio
    async def test_lists_newest_first(self, client: httpx.AsyncClient) -> None:
        """Should order recipes by creation time, newest first."""
        await _publish(client, "Soup", ALICE)
        await _publish(client, "Cake", BOB)

        response = await client.get("/recipes")

        assert [r["title"] for r in response.json()] == ["Cake", "Soup"]

    @pytest.mark.asyncio
    async def test_lists_user_recipes(self, client: httpx.AsyncClient) -> None:
        """Should only return the given author's recipes."""
        await _publish(client, "Soup", ALICE)
        await _publish(client, "Cake", BOB)

        response = await client.get("/users/bob/recipes")

        assert [r["title"] for r in response.json()] == ["Cake"]

    @pytest.mark.asyncio
    async def test_category_is_lowercased(self, client: httpx.AsyncClient) -> None:
        """Should match the lowercased category exactly."""
        await _publish(client, "Pie", ALICE, category="dessert")
        await _publish(client, "Tart", ALICE, category="Dessert")

        response = await client.get("/recipes/categories/DESSERT")

        assert [r["title"] for r in response.json()] == ["Pie"]

    @pytest.mark.asyncio
    async def test_search_matches_ingredients(self, client: httpx.AsyncClient) -> None:
        """Should match search terms case-insensitively."""
        await _publish(client, "Soup", ALICE, ingredients=["Tomatoes"])
        await _publish(client, "Cake", ALICE)

        response = await client.get("/recipes/search", params={"q": "tomato"})

        assert [r["title"] for r in response.json()] == ["Soup"]

    @pytest.mark.asyncio
    async def test_empty_search_returns_everything(self, client: httpx.AsyncClient) -> None:
        """Should return all recipes for an empty term."""
        await _publish(client, "Soup", ALICE)
        await _publish(client, "Cake", ALICE)

        response = await client.get("/recipes/search")

        assert len(response.json()) == 2


class TestGetRecipe:
    """Tests for GET /recipes/{recipe_id}."""

    @pytest.mark.asyncio
    async def test_missing_recipe_is_not_found(self, client: httpx.AsyncClient) -> None:
        """Should return 404 for an unknown id."""
        response = await client.get("/recipes/nope")

        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"


class TestFeed:
    """Tests for GET /feed."""

    @pytest.mark.asyncio
    async def test_feed_contains_followed_authors(self, client: httpx.AsyncClient) -> None:
        """Should return recipes from followed users only."""
        await _publish(client, "Soup", BOB)
        await _publish(client, "Stew", CAROL)
        await client.put("/users/bob/follow", headers=ALICE)

        response = await client.get("/feed", headers=ALICE)

        assert response.status_code == 200
        assert [r["title"] for r in response.json()] == ["Soup"]

    @pytest.mark.asyncio
    async def test_feed_empty_without_follows(self, client: httpx.AsyncClient) -> None:
        """Should return an empty feed when following nobody."""
        await _publish(client, "Soup", BOB)

        response = await client.get("/feed", headers=ALICE)

        assert response.json() == []

    @pytest.mark.asyncio
    async def test_feed_failure_is_bad_gateway(
        self, client: httpx.AsyncClient, api_store: InMemoryDocumentStore
    ) -> None:
        """Should map a feed failure to 502."""
        await client.put("/users/bob/follow", headers=ALICE)
        api_store.fail_on.add("query")

        response = await client.get("/feed", headers=ALICE)

        assert response.status_code == 502
        assert response.json()["error"] == "FEED_LOAD_FAILED"

    @pytest.mark.asyncio
    async def test_feed_requires_identity(self, client: httpx.AsyncClient) -> None:
        """Should reject anonymous feed requests."""
        response = await client.get("/feed")

        assert response.status_code == 401
