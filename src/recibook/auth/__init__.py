"""Caller identity for the HTTP facade."""

from recibook.auth.exceptions import AuthError
from recibook.auth.identity import CallerIdentity, HeaderIdentityProvider


__all__ = [
    "AuthError",
    "CallerIdentity",
    "HeaderIdentityProvider",
]
