"""Recipe endpoints.

Provides:
- POST /recipes to publish a recipe as the calling user
- GET /recipes and the search, category and author listings, newest first
- GET /recipes/{recipe_id} for a single recipe
- GET /feed for the caller's personalized feed
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from recibook.api.dependencies import (
    get_current_user,
    get_feed_service,
    get_recipe_repository,
)
from recibook.auth.identity import CallerIdentity  # noqa: TC001
from recibook.core.exceptions import NotFoundException
from recibook.database.repositories.recipes import RecipeRepository  # noqa: TC001
from recibook.schemas import CreateRecipeResponse, Recipe, RecipeCreate
from recibook.services.feed.service import FeedService  # noqa: TC001


router = APIRouter(tags=["Recipes"])

RecipesDep = Annotated[RecipeRepository, Depends(get_recipe_repository)]


@router.post(
    "/recipes",
    response_model=CreateRecipeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Publish a recipe",
    responses={
        401: {"description": "Caller identity headers missing"},
        422: {"description": "Request validation error"},
        502: {"description": "Document store write failed"},
    },
)
async def create_recipe(
    body: RecipeCreate,
    user: Annotated[CallerIdentity, Depends(get_current_user)],
    recipes: RecipesDep,
) -> CreateRecipeResponse:
    """Create a recipe authored by the caller.

    The author fields and timestamps are stamped server side; the response
    carries only the new recipe id.
    """
    recipe_id = await recipes.create_recipe(body, user.user_id, user.author_name)
    return CreateRecipeResponse(id=recipe_id)


@router.get(
    "/recipes",
    response_model=list[Recipe],
    summary="List all recipes",
)
async def list_public_recipes(recipes: RecipesDep) -> list[Recipe]:
    """Every recipe, newest first."""
    return await recipes.list_public_recipes()


@router.get(
    "/recipes/search",
    response_model=list[Recipe],
    summary="Search recipes",
)
async def search_recipes(
    recipes: RecipesDep,
    q: Annotated[str, Query(description="Case-insensitive search term")] = "",
) -> list[Recipe]:
    """Recipes whose title, ingredients, category or description contain ``q``."""
    return await recipes.search_recipes(q)


@router.get(
    "/recipes/categories/{category}",
    response_model=list[Recipe],
    summary="List recipes in a category",
)
async def list_recipes_by_category(
    recipes: RecipesDep,
    category: Annotated[str, Path(min_length=1)],
) -> list[Recipe]:
    """Recipes whose stored category equals the lowercased ``category``."""
    return await recipes.list_recipes_by_category(category)


@router.get(
    "/recipes/{recipe_id}",
    response_model=Recipe,
    summary="Get a recipe",
    responses={404: {"description": "Recipe not found"}},
)
async def get_recipe(
    recipes: RecipesDep,
    recipe_id: Annotated[str, Path(min_length=1)],
) -> Recipe:
    recipe = await recipes.get_recipe(recipe_id)
    if recipe is None:
        raise NotFoundException("Recipe", recipe_id)
    return recipe


@router.get(
    "/users/{user_id}/recipes",
    response_model=list[Recipe],
    summary="List a user's recipes",
)
async def list_user_recipes(
    recipes: RecipesDep,
    user_id: Annotated[str, Path(min_length=1)],
) -> list[Recipe]:
    """Recipes authored by ``user_id``, newest first."""
    return await recipes.list_user_recipes(user_id)


@router.get(
    "/feed",
    response_model=list[Recipe],
    summary="Personalized feed",
    responses={
        401: {"description": "Caller identity headers missing"},
        502: {"description": "Feed could not be loaded"},
    },
)
async def get_feed(
    user: Annotated[CallerIdentity, Depends(get_current_user)],
    feed: Annotated[FeedService, Depends(get_feed_service)],
) -> list[Recipe]:
    """Recipes by the users the caller follows, newest first."""
    return await feed.get_feed_recipes(user.user_id)
