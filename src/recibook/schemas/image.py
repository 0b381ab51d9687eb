"""Image upload schemas."""

from __future__ import annotations

from urllib.parse import urlparse

from pydantic import Field, field_validator

from recibook.schemas.base import APIRequest, APIResponse


class ImageFromUriRequest(APIRequest):
    """Upload an image that lives at a remote URI."""

    uri: str = Field(..., min_length=1, examples=["https://example.com/pie.jpg"])

    @field_validator("uri")
    @classmethod
    def remote_only(cls, v: str) -> str:
        # Local file URIs are for in-process callers, never for HTTP clients
        parsed = urlparse(v)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            msg = "uri must be an absolute http(s) URL"
            raise ValueError(msg)
        return v


class ImageUploadResponse(APIResponse):
    """Public download URL of an uploaded image."""

    url: str
