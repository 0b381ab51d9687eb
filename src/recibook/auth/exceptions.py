"""Authentication exceptions."""

from __future__ import annotations


class AuthError(Exception):
    """Raised when no caller identity can be established for a request."""
