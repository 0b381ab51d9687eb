"""Recipe image upload endpoints.

Provides:
- POST /images storing the raw request body
- POST /images/from-uri fetching an image from a URI first
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from recibook.api.dependencies import get_current_user, get_image_service
from recibook.auth.identity import CallerIdentity  # noqa: TC001
from recibook.core.exceptions import AppException
from recibook.observability.logging import get_logger
from recibook.schemas import ImageFromUriRequest, ImageUploadResponse
from recibook.services.storage.service import ImageUploadService  # noqa: TC001


logger = get_logger(__name__)

router = APIRouter(
    tags=["Images"],
    responses={
        401: {"description": "Caller identity headers missing"},
        502: {"description": "Image could not be fetched or stored"},
        503: {"description": "Object storage not configured"},
    },
)

ImagesDep = Annotated[ImageUploadService, Depends(get_image_service)]


@router.post(
    "/images",
    response_model=ImageUploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload an image from the request body",
    openapi_extra={
        "requestBody": {
            "content": {"image/*": {"schema": {"type": "string", "format": "binary"}}},
            "required": True,
        }
    },
)
async def upload_image(
    request: Request,
    user: Annotated[CallerIdentity, Depends(get_current_user)],
    images: ImagesDep,
) -> ImageUploadResponse:
    """Store the raw body and return its public URL."""
    data = await request.body()
    if not data:
        raise AppException(
            status_code=status.HTTP_400_BAD_REQUEST,
            error="EMPTY_BODY",
            message="Request body must contain the image bytes",
        )

    url = await images.upload_recipe_image(
        data, content_type=request.headers.get("content-type")
    )
    logger.debug("Image uploaded from body", user_id=user.user_id)
    return ImageUploadResponse(url=url)


@router.post(
    "/images/from-uri",
    response_model=ImageUploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload an image from a URI",
)
async def upload_image_from_uri(
    body: ImageFromUriRequest,
    user: Annotated[CallerIdentity, Depends(get_current_user)],
    images: ImagesDep,
) -> ImageUploadResponse:
    """Fetch ``uri`` and store it; the fetched ``Content-Type`` is kept."""
    url = await images.upload_recipe_image(body.uri)
    logger.debug("Image uploaded from URI", user_id=user.user_id, uri=body.uri)
    return ImageUploadResponse(url=url)
