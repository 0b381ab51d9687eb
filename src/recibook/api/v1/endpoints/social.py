"""Follow graph endpoints.

All routes act on behalf of the caller identified by the gateway headers.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from recibook.api.dependencies import get_current_user, get_social_repository
from recibook.auth.identity import CallerIdentity  # noqa: TC001
from recibook.database.repositories.social import SocialGraphRepository  # noqa: TC001
from recibook.schemas import FollowingResponse, FollowStatusResponse


router = APIRouter(
    tags=["Social"],
    responses={
        401: {"description": "Caller identity headers missing"},
        502: {"description": "Follow graph unavailable"},
    },
)

CallerDep = Annotated[CallerIdentity, Depends(get_current_user)]
SocialDep = Annotated[SocialGraphRepository, Depends(get_social_repository)]
TargetUserId = Annotated[str, Path(min_length=1)]


@router.get(
    "/users/me/following",
    response_model=FollowingResponse,
    summary="Users the caller follows",
)
async def get_following(user: CallerDep, social: SocialDep) -> FollowingResponse:
    """List the users the caller follows.

    Returns:
        The followed user ids, sorted so the output is stable.

    Raises:
        SocialGraphError: Rendered as 502 when the follow graph cannot be read.
    """
    following = await social.get_following_ids(user.user_id)
    return FollowingResponse(user_ids=sorted(following))


@router.put(
    "/users/{user_id}/follow",
    response_model=FollowStatusResponse,
    summary="Follow a user",
)
async def follow_user(
    user_id: TargetUserId, user: CallerDep, social: SocialDep
) -> FollowStatusResponse:
    """Follow ``user_id``. Following yourself is silently ignored."""
    await social.follow_user(user.user_id, user_id)
    return FollowStatusResponse(following=user.user_id != user_id)


@router.delete(
    "/users/{user_id}/follow",
    response_model=FollowStatusResponse,
    summary="Unfollow a user",
)
async def unfollow_user(
    user_id: TargetUserId, user: CallerDep, social: SocialDep
) -> FollowStatusResponse:
    """Unfollow ``user_id``. Unfollowing a user you do not follow succeeds.

    Raises:
        SocialGraphError: Rendered as 502 when the edge cannot be deleted.
    """
    await social.unfollow_user(user.user_id, user_id)
    return FollowStatusResponse(following=False)


@router.get(
    "/users/{user_id}/follow",
    response_model=FollowStatusResponse,
    summary="Whether the caller follows a user",
)
async def is_following(
    user_id: TargetUserId, user: CallerDep, social: SocialDep
) -> FollowStatusResponse:
    """Report whether the caller follows ``user_id``.

    Raises:
        SocialGraphError: Rendered as 502 when the follow status cannot be read.
    """
    return FollowStatusResponse(
        following=await social.is_following(user.user_id, user_id)
    )
