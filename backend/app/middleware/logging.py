"""
Journal Board Backend — Request Logging Middleware
====================================================

What:  One access log line per HTTP request.
Why:   Status and latency per route are the first thing to look at when a
       board "won't save"; 401/404/409 spikes show up as WARNING lines.
How:   Measures the time around call_next and logs method, path, status,
       duration, request ID and client IP.

Log line:
    PUT /api/v1/boards/…/elements/reorder 409 12.4ms [a1b2c3d4] from 10.0.0.7

Level by status:
    5xx → ERROR, 4xx → WARNING, everything else → INFO

Not logged: query strings (they carry capability tokens), request bodies,
uploaded file contents.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("journal_board.access")

# Probed every few seconds by orchestrators; not worth a log line each
_QUIET_PATHS = {"/health", "/health/db"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration of every request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in _QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        rid = request_id_var.get("")

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
