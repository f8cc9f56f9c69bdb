"""
Notes API: Request Logging Middleware
=====================================

What:  One access-log line per HTTP request.
How:   Times call_next() and logs method, path, status, duration and request
       ID. Failed note and posts calls are logged one level higher than
       their status class alone would give, since they mean the database
       or the upstream source is unhealthy.

Example line:
    2026-10-19T12:00:00 [INFO] notes_api.access: POST /notes 201 4.2ms [a1b2c3d4]

Request bodies are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notes_api.middleware.request_id import request_id_var

logger = logging.getLogger("notes_api.access")

# Liveness probes poll these every few seconds
QUIET_PATHS = frozenset({"/health"})

# Routes whose 5xx answers point at a dependency outage
DEPENDENCY_PATHS = frozenset({"/notes", "/posts", "/db-check"})


def access_log_level(path: str, status: int) -> int:
    """
    5xx → ERROR (CRITICAL on a dependency-backed route)
    4xx → WARNING
    otherwise INFO
    """
    if status >= 500:
        return logging.CRITICAL if path in DEPENDENCY_PATHS else logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        rid = request_id_var.get("")
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        logger.log(
            access_log_level(path, response.status_code),
            "%s %s %d %.1fms [%s]",
            request.method,
            path,
            response.status_code,
            elapsed_ms,
            rid,
        )
        return response
