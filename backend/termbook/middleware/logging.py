"""
Termbook Backend: Request Logging Middleware
==============================================

What:  One access-log line per HTTP request on the `termbook.access` logger.
When:  Runs inside RequestIDMiddleware, so the request id is already set.

Line format:
    GET /definitions/{definition_id} 404 3.2ms [a1b2c3d4] anon

The path is the matched route template rather than the raw URL, so ids and
search terms stay out of the access log and lines group per endpoint.
`bearer` means the request carried an Authorization header, not that the
token was valid.

Levels:
    5xx → ERROR, 4xx → WARNING, everything else → INFO
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from termbook.middleware.request_id import request_id_var

logger = logging.getLogger("termbook.access")

SKIPPED_PATHS = frozenset({"/health"})


def _level_for_status(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in SKIPPED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        caller = "bearer" if "authorization" in request.headers else "anon"
        route = _route_template(request)
        rid = request_id_var.get("")

        logger.log(
            _level_for_status(response.status_code),
            "%s %s %d %.1fms [%s] %s",
            request.method,
            route,
            response.status_code,
            elapsed_ms,
            rid,
            caller,
            extra={
                "request_id": rid,
                "route": route,
                "status_code": response.status_code,
                "elapsed_ms": round(elapsed_ms, 2),
                "authenticated": caller == "bearer",
            },
        )
        return response
