"""
Journal Board Backend — Request ID Middleware
===============================================

What:  Gives every request a correlation ID and returns it in X-Request-ID.
Why:   Error bodies carry the same ID, so a user reporting "reorder failed"
       can be matched to the exact log lines of that request.
How:   Reuses a client-supplied X-Request-ID, otherwise generates a short one;
       stores it in a ContextVar (for loggers and exception handlers) and in
       request.state (for handlers outside the middleware's context).
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on the same event loop never see each other's ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def current_request_id(request: Request) -> str:
    """The ID for `request`, whether or not the ContextVar is visible from the caller."""
    return request_id_var.get("") or getattr(request.state, "request_id", "")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Assigns X-Request-ID.

    An ID sent by the web client is kept as-is, so a trace can start at the
    UI action that issued the call.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 8 hex chars are enough to correlate and stay readable in logs
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
