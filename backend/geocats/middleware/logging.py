"""
GeoCats Backend — Request Logging Middleware
==============================================

What:  One access log line per request on the ``geocats.access`` logger.
How:   Measures handler time and picks the level from the status code:
       5xx → ERROR, 4xx → WARNING, otherwise INFO.

Logged: method, path, status, duration, client IP, request id.
Not logged: bodies, form fields, uploads, the Authorization header.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from geocats.middleware.request_id import request_id_var

logger = logging.getLogger("geocats.access")

# Probes and image fetches are high volume and carry no business events
QUIET_PREFIXES = ("/health", "/uploads/")


def client_ip_of(request: Request) -> str:
    return request.client.host if request.client else "unknown"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs status and duration of every non-quiet request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path.startswith(QUIET_PREFIXES):
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        if status >= 500:
            level = logging.ERROR
        elif status >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO

        rid = request_id_var.get("")
        client_ip = client_ip_of(request)
        logger.log(
            level,
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
