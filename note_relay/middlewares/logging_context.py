"""
Middleware for injecting contextual fields into structured logs.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from note_relay.logging import clear_log_context, set_log_context


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """
    Middleware to inject endpoint and method of HTTP requests into the
    log context, and to clear the context once the request completes.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        set_log_context(
            endpoint=request.url.path,
            method=request.method,
        )

        try:
            return await call_next(request)
        finally:
            clear_log_context()
