"""Unit tests for header-based caller identity."""

from __future__ import annotations

import pytest
from pydantic import ValidationError
from starlette.requests import Request

from recibook.auth import AuthError, CallerIdentity, HeaderIdentityProvider


pytestmark = pytest.mark.unit


def _request(headers: dict[str, str]) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
    }
    return Request(scope)


class TestCallerIdentity:
    """Tests for CallerIdentity."""

    def test_author_name_uses_display_name(self) -> None:
        """Should stamp recipes with the display name."""
        identity = CallerIdentity(user_id="alice", display_name="Alice")

        assert identity.author_name == "Alice"

    def test_author_name_defaults_to_anonymous(self) -> None:
        """Should fall back to Anonymous without a display name."""
        assert CallerIdentity(user_id="alice").author_name == "Anonymous"

    def test_requires_user_id(self) -> None:
        """Should reject an empty uid."""
        with pytest.raises(ValidationError):
            CallerIdentity(user_id="")

    def test_is_frozen(self) -> None:
        """Should not allow mutation."""
        identity = CallerIdentity(user_id="alice")

        with pytest.raises(ValidationError):
            identity.user_id = "bob"  # type: ignore[misc]


class TestHeaderIdentityProvider:
    """Tests for HeaderIdentityProvider."""

    def test_identify_reads_headers(self) -> None:
        """Should read uid and display name."""
        provider = HeaderIdentityProvider()

        identity = provider.identify(
            _request({"X-User-ID": "alice", "X-User-Name": " Alice "})
        )

        assert identity == CallerIdentity(user_id="alice", display_name="Alice")

    def test_identify_missing_header_raises(self) -> None:
        """Should raise AuthError without a uid header."""
        provider = HeaderIdentityProvider()

        with pytest.raises(AuthError, match="X-User-ID"):
            provider.identify(_request({}))

    def test_identify_blank_header_raises(self) -> None:
        """Should treat a blank uid as missing."""
        with pytest.raises(AuthError):
            HeaderIdentityProvider().identify(_request({"X-User-ID": "   "}))

    def test_custom_header_names(self) -> None:
        """Should honor configured header names."""
        provider = HeaderIdentityProvider("X-Auth-Uid", "X-Auth-Name")

        identity = provider.identify(
            _request({"X-Auth-Uid": "bob", "X-Auth-Name": "Bob"})
        )

        assert identity.user_id == "bob"
        assert identity.author_name == "Bob"
