"""Request context middleware.

Every request gets a request id (propagated from ``X-Request-ID`` when the
gateway sent one) and, when present, the caller's uid. Both are stored on
``request.state`` and bound to the logging context so repository log lines
can be correlated with the request that caused them.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from recibook.observability.logging import bind_context, clear_context


if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Attach request id and caller uid to request state and log context."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        request_id_header: str = "X-Request-ID",
        user_id_header: str = "X-User-ID",
    ) -> None:
        super().__init__(app)
        self.request_id_header = request_id_header
        self.user_id_header = user_id_header

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        clear_context()

        request_id = request.headers.get(self.request_id_header) or uuid.uuid4().hex
        request.state.request_id = request_id
        bind_context(request_id=request_id)

        user_id = request.headers.get(self.user_id_header, "").strip()
        if user_id:
            bind_context(user_id=user_id)

        try:
            response = await call_next(request)
        finally:
            clear_context()

        response.headers[self.request_id_header] = request_id
        return response
