"""Object storage protocol.

The upload service depends on this protocol rather than a concrete SDK so
that a bucket can be swapped for a fake in tests.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ObjectStorage(Protocol):
    """Write-only blob store that hands back a public URL."""

    async def initialize(self) -> None:
        """Create clients or resolve buckets."""
        ...

    async def shutdown(self) -> None:
        """Release any held resources."""
        ...

    async def upload(self, path: str, data: bytes, content_type: str) -> str:
        """Store ``data`` at ``path`` and return its durable public URL.

        Raises:
            UploadError: If the object could not be written.
        """
        ...
