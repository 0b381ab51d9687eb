"""Google Cloud Storage backend for recipe images.

The storage SDK is synchronous, so blocking calls run in a worker thread.
"""

from __future__ import annotations

import asyncio

import requests
from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import storage

from recibook.observability.logging import get_logger
from recibook.services.storage.exceptions import UploadError


logger = get_logger(__name__)

# What blob uploads raise: API errors, auth/transport errors and raw HTTP errors
UPLOAD_ERRORS = (GoogleAPIError, GoogleAuthError, requests.exceptions.RequestException)


class GCSObjectStorage:
    """Stores objects in a single GCS bucket.

    Objects are expected to be publicly readable (uniform bucket-level access
    or a CDN in front of the bucket), so the returned URL is not signed.
    """

    def __init__(
        self,
        bucket_name: str,
        *,
        project: str | None = None,
        public_base_url: str | None = None,
        client: storage.Client | None = None,
    ) -> None:
        self._bucket_name = bucket_name
        self._project = project
        self._public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self._client = client
        self._owns_client = client is None
        self._bucket: storage.Bucket | None = None

    @property
    def bucket(self) -> storage.Bucket:
        if self._bucket is None:
            msg = "Object storage not initialized. Call initialize() first."
            raise RuntimeError(msg)
        return self._bucket

    async def initialize(self) -> None:
        if self._client is None:
            try:
                self._client = await asyncio.to_thread(
                    storage.Client, project=self._project
                )
            except GoogleAuthError as e:
                msg = f"Failed to create storage client: {e}"
                raise UploadError(msg) from e
        self._bucket = self._client.bucket(self._bucket_name)
        logger.info("GCS object storage initialized", bucket=self._bucket_name)

    async def shutdown(self) -> None:
        if self._owns_client and self._client is not None:
            await asyncio.to_thread(self._client.close)
            self._client = None
        self._bucket = None
        logger.info("GCS object storage shutdown")

    def public_url(self, path: str) -> str:
        if self._public_base_url:
            return f"{self._public_base_url}/{path}"
        return self.bucket.blob(path).public_url

    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        blob = self.bucket.blob(path)
        try:
            await asyncio.to_thread(
                blob.upload_from_string, data, content_type=content_type
            )
        except UPLOAD_ERRORS as e:
            logger.warning(
                "Object upload failed",
                bucket=self._bucket_name,
                path=path,
                error=str(e),
            )
            msg = f"Failed to store object {path}: {e}"
            raise UploadError(msg) from e

        logger.debug("Object stored", path=path, size=len(data))
        return self.public_url(path)
