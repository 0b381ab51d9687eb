"""Image upload exceptions."""

from __future__ import annotations


class UploadError(Exception):
    """Raised when an image could not be fetched or stored."""


class UnsafeImageSourceError(UploadError):
    """Raised when an image URI points at a non-public network address."""
