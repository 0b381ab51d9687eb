"""Header-based caller identity.

Sign-in happens in the client against the identity provider. This service
sits behind a trusted gateway that forwards the authenticated uid and
display name as request headers.

WARNING: header values are trusted completely. Never expose the service
without an upstream that sets these headers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from recibook.auth.exceptions import AuthError
from recibook.observability.logging import get_logger


if TYPE_CHECKING:
    from starlette.requests import Request

logger = get_logger(__name__)


class CallerIdentity(BaseModel):
    """The authenticated user a request acts on behalf of."""

    user_id: str = Field(..., min_length=1)
    display_name: str = ""

    model_config = {"frozen": True}

    @property
    def author_name(self) -> str:
        """Name stamped on recipes this caller creates."""
        return self.display_name or "Anonymous"


class HeaderIdentityProvider:
    """Reads the caller's uid and display name from configurable headers.

    Attributes:
        user_id_header: Header carrying the uid (required).
        user_name_header: Header carrying the display name (optional).
    """

    def __init__(
        self,
        user_id_header: str = "X-User-ID",
        user_name_header: str = "X-User-Name",
    ) -> None:
        self.user_id_header = user_id_header
        self.user_name_header = user_name_header

    def identify(self, request: Request) -> CallerIdentity:
        """Resolve the caller identity.

        Raises:
            AuthError: If the user id header is missing or blank.
        """
        user_id = request.headers.get(self.user_id_header, "").strip()
        if not user_id:
            msg = f"Missing required header: {self.user_id_header}"
            raise AuthError(msg)

        display_name = request.headers.get(self.user_name_header, "").strip()
        logger.debug("Caller identified via headers", user_id=user_id)
        return CallerIdentity(user_id=user_id, display_name=display_name)
