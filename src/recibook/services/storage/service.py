"""Recipe image upload service.

Accepts an image as a URI, raw bytes or a binary file object, stores it under
the recipe image prefix with a time-ordered random name and returns the
public URL of the stored object.
"""

from __future__ import annotations

import asyncio
import ipaddress
import secrets
import socket
import string
import time
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO, Final
from urllib.parse import ParseResult, unquote, urlparse

import httpx

from recibook.observability.logging import get_logger
from recibook.services.storage.exceptions import UnsafeImageSourceError, UploadError


if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from recibook.services.storage.protocol import ObjectStorage

logger = get_logger(__name__)

DEFAULT_PREFIX: Final[str] = "recipes"
DEFAULT_CONTENT_TYPE: Final[str] = "application/octet-stream"
SUFFIX_LENGTH: Final[int] = 7
MAX_REDIRECTS: Final[int] = 5
_BASE36: Final[str] = string.digits + string.ascii_lowercase

ImageSource = str | bytes | bytearray | BinaryIO


def generate_object_name(now_ms: int | None = None) -> str:
    """Build ``<epoch-millis>_<7 base36 chars>``."""
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(_BASE36) for _ in range(SUFFIX_LENGTH))
    return f"{now_ms}_{suffix}"


class ImageUploadService:
    """Uploads recipe images to object storage."""

    def __init__(
        self,
        storage: ObjectStorage,
        *,
        prefix: str = DEFAULT_PREFIX,
        fetch_timeout: float = 20.0,
        http_client: httpx.AsyncClient | None = None,
        resolve: Callable[[str], Awaitable[list[str]]] | None = None,
    ) -> None:
        self._storage = storage
        self._prefix = prefix.strip("/")
        self._fetch_timeout = fetch_timeout
        self._http = http_client
        self._owns_http_client = http_client is None
        self._resolve = resolve or resolve_host

    async def initialize(self) -> None:
        """Initialize the HTTP client and the storage backend."""
        if self._http is None:
            self._http = httpx.AsyncClient(
                timeout=self._fetch_timeout, follow_redirects=False
            )
        await self._storage.initialize()
        logger.info("ImageUploadService initialized", prefix=self._prefix)

    async def shutdown(self) -> None:
        """Close the HTTP client if we own it and release storage."""
        if self._owns_http_client and self._http is not None:
            await self._http.aclose()
            self._http = None
        await self._storage.shutdown()
        logger.info("ImageUploadService shutdown")

    async def upload_recipe_image(
        self,
        source: ImageSource,
        content_type: str | None = None,
    ) -> str:
        """Store an image and return its public URL.

        Args:
            source: An ``http(s)://`` or ``file://`` URI to fetch, raw bytes,
                or a binary file object.
            content_type: MIME type to store. For fetched URIs the response
                ``Content-Type`` wins.

        Returns:
            The durable public URL of the stored object.

        Raises:
            UploadError: If the source could not be read or the object
                could not be stored.
            UnsafeImageSourceError: If a URI resolves to a loopback,
                private, link-local or reserved address.
        """
        data, detected_type = await self._read_source(source)
        path = f"{self._prefix}/{generate_object_name()}"
        stored_type = detected_type or content_type or DEFAULT_CONTENT_TYPE

        url = await self._storage.upload(path, data, stored_type)
        logger.info(
            "Recipe image uploaded",
            path=path,
            content_type=stored_type,
            size=len(data),
        )
        return url

    async def _read_source(self, source: ImageSource) -> tuple[bytes, str | None]:
        if isinstance(source, str):
            return await self._fetch(source)
        if isinstance(source, bytes | bytearray):
            return bytes(source), None
        try:
            return await asyncio.to_thread(source.read), None
        except OSError as e:
            msg = f"Failed to read image data: {e}"
            raise UploadError(msg) from e

    async def _fetch(self, uri: str) -> tuple[bytes, str | None]:
        parsed = _parse(uri)

        if parsed.scheme == "file":
            try:
                data = await asyncio.to_thread(Path(unquote(parsed.path)).read_bytes)
            except OSError as e:
                msg = f"Failed to read image from {uri}: {e}"
                raise UploadError(msg) from e
            return data, None

        if parsed.scheme not in {"http", "https"}:
            msg = f"Unsupported image URI: {uri}"
            raise UploadError(msg)

        if self._http is None:
            msg = "ImageUploadService not initialized. Call initialize() first."
            raise RuntimeError(msg)

        url = uri
        for _ in range(MAX_REDIRECTS + 1):
            await self._check_destination(url)
            try:
                response = await self._http.get(url)
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                logger.warning("Image fetch failed", uri=url, error=str(e))
                msg = f"Failed to fetch image from {url}: {e}"
                raise UploadError(msg) from e
            if not response.is_redirect:
                break
            url = str(response.url.join(response.headers["location"]))
        else:
            msg = f"Too many redirects fetching image from {uri}"
            raise UploadError(msg)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning("Image fetch failed", uri=url, error=str(e))
            msg = f"Failed to fetch image from {url}: {e}"
            raise UploadError(msg) from e

        content_type = response.headers.get("content-type")
        if content_type:
            content_type = content_type.split(";", 1)[0].strip() or None
        return response.content, content_type

    async def _check_destination(self, url: str) -> None:
        """Refuse schemes other than http(s) and hosts that are not public.

        Every redirect hop is checked again before it is requested.

        Raises:
            UploadError: If the URL is malformed, unsupported or unresolvable.
            UnsafeImageSourceError: If the host resolves to a loopback,
                private, link-local or reserved address.
        """
        parsed = _parse(url)
        if parsed.scheme not in {"http", "https"}:
            msg = f"Unsupported image URI: {url}"
            raise UploadError(msg)

        host = parsed.hostname
        if not host:
            msg = f"Invalid image URI: {url}"
            raise UploadError(msg)

        try:
            addresses = [str(ipaddress.ip_address(host))]
        except ValueError:
            try:
                addresses = await self._resolve(host)
            except OSError as e:
                msg = f"Failed to resolve image host {host}: {e}"
                raise UploadError(msg) from e

        if not addresses or not all(is_public_address(a) for a in addresses):
            logger.warning("Blocked image fetch", host=host, addresses=addresses)
            msg = f"Image URI must point to a public host: {host}"
            raise UnsafeImageSourceError(msg)


def _parse(uri: str) -> ParseResult:
    try:
        parsed = urlparse(uri)
        _ = parsed.port
    except ValueError as e:
        msg = f"Invalid image URI: {uri}"
        raise UploadError(msg) from e
    return parsed


def is_public_address(address: str) -> bool:
    """Whether ``address`` is a globally routable unicast IP."""
    ip = ipaddress.ip_address(address.split("%", 1)[0])
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        ip = ip.ipv4_mapped
    return ip.is_global and not ip.is_multicast


async def resolve_host(host: str) -> list[str]:
    """Every address ``host`` resolves to."""
    loop = asyncio.get_running_loop()
    infos = await loop.getaddrinfo(host, None, type=socket.SOCK_STREAM)
    return [str(info[4][0]) for info in infos]
