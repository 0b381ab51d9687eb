"""User profile endpoints.

Static ``/users/me/...`` and ``/users/search`` routes are declared before
``/users/{user_id}`` so they are not captured by the path parameter.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from recibook.api.dependencies import get_current_user, get_user_repository
from recibook.auth.identity import CallerIdentity  # noqa: TC001
from recibook.core.exceptions import NotFoundException
from recibook.database.repositories.users import UserProfileRepository  # noqa: TC001
from recibook.schemas import UserProfile, UserProfileUpsert


router = APIRouter(tags=["Users"])

UsersDep = Annotated[UserProfileRepository, Depends(get_user_repository)]


@router.put(
    "/users/me/profile",
    response_model=UserProfile,
    summary="Ensure the caller has a profile",
    responses={401: {"description": "Caller identity headers missing"}},
)
async def ensure_profile(
    user: Annotated[CallerIdentity, Depends(get_current_user)],
    users: UsersDep,
    body: UserProfileUpsert | None = None,
) -> UserProfile:
    """Create the caller's profile on first login.

    An existing profile is returned unchanged. When the body omits the display
    name, the gateway's name header is used.
    """
    body = body or UserProfileUpsert()
    return await users.ensure_user_profile(
        user.user_id,
        display_name=body.display_name or user.display_name,
        email=body.email,
        photo_url=body.photo_url,
    )


@router.get(
    "/users/search",
    response_model=list[UserProfile],
    summary="Search users by display name",
)
async def search_users(
    users: UsersDep,
    q: Annotated[str, Query(min_length=1, description="Case-insensitive name fragment")],
) -> list[UserProfile]:
    """Profiles whose display name contains ``q``.

    Falls back to recipe author names when no profile matches.
    """
    return await users.search_users(q)


@router.get(
    "/users/{user_id}",
    response_model=UserProfile,
    summary="Get a user profile",
    responses={404: {"description": "Profile not found"}},
)
async def get_user_profile(
    users: UsersDep,
    user_id: Annotated[str, Path(min_length=1)],
) -> UserProfile:
    profile = await users.get_user_profile(user_id)
    if profile is None:
        raise NotFoundException("User", user_id)
    return profile
