"""Access logging middleware.

Logs one line when a request starts and one when it completes, including the
elapsed time, which is also returned in ``X-Process-Time``. Requests slower
than the threshold are logged as warnings.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from recibook.observability.logging import bind_context, get_logger


if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp

logger = get_logger(__name__)

SLOW_REQUEST_THRESHOLD = 1.0  # seconds


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Structured request/response logging with timing."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        exclude_paths: set[str] | None = None,
        timing_header: str = "X-Process-Time",
        slow_threshold: float = SLOW_REQUEST_THRESHOLD,
    ) -> None:
        super().__init__(app)
        self.exclude_paths = exclude_paths or set()
        self.timing_header = timing_header
        self.slow_threshold = slow_threshold

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        path = request.url.path
        quiet = any(path.endswith(excluded) for excluded in self.exclude_paths)
        start = time.perf_counter()

        if not quiet:
            bind_context(method=request.method, path=path)
            logger.info(
                "Request started",
                query_params=str(request.query_params) if request.query_params else None,
            )

        response = await call_next(request)

        elapsed = time.perf_counter() - start
        elapsed_ms = round(elapsed * 1000, 2)
        response.headers[self.timing_header] = f"{elapsed_ms}ms"

        if elapsed > self.slow_threshold:
            logger.warning(
                "Slow request detected",
                method=request.method,
                path=path,
                process_time_ms=elapsed_ms,
                threshold_ms=self.slow_threshold * 1000,
            )
        elif not quiet:
            logger.info(
                "Request completed",
                status_code=response.status_code,
                process_time_ms=elapsed_ms,
            )

        return response
