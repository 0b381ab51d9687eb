"""API v1 router aggregating all endpoint routers.

All endpoints are mounted under /api/v1 via the ``api.v1_prefix`` setting.
"""

from __future__ import annotations

from fastapi import APIRouter

from recibook.api.v1.endpoints import health, images, recipes, social, users


router = APIRouter()

router.include_router(health.router)
router.include_router(recipes.router)
router.include_router(social.router)
# Must follow social: /users/{user_id} is the catch-all under /users
router.include_router(users.router)
router.include_router(images.router)
