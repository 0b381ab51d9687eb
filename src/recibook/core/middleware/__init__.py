"""HTTP middleware components."""

from recibook.core.middleware.access_log import AccessLogMiddleware
from recibook.core.middleware.request_context import RequestContextMiddleware


__all__ = [
    "AccessLogMiddleware",
    "RequestContextMiddleware",
]
