"""
Notes API - Request Logging Middleware
=======================================

What:  One access line per HTTP request, tagged with the note it touched and
       the store version it left behind.
How:   Times call_next, then reads the routed `note_id` path parameter and
       `app.state.store.version`. The level follows the status class
       (5xx → ERROR, 4xx → WARNING, otherwise INFO).
When:  Runs inside RequestIDMiddleware so the request ID is already set.

Request bodies (note titles and texts) are never logged.
"""

import logging
import time
from typing import Any, Dict

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notes_api.middleware.request_id import request_id_var

logger = logging.getLogger("notes_api.access")

HEALTH_PATH = "/api/health"


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def _store_version(request: Request) -> int:
    store = getattr(request.app.state, "store", None)
    return store.version if store is not None else -1


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log for the notes routes; health checks are skipped."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path == HEALTH_PATH:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        # The router fills path_params on the shared scope during call_next.
        note_id = request.scope.get("path_params", {}).get("note_id", "-")
        fields: Dict[str, Any] = {
            "request_id": request_id_var.get(""),
            "method": request.method,
            "path": request.url.path,
            "note_id": note_id,
            "status": response.status_code,
            "duration_ms": round(elapsed_ms, 2),
            "store_version": _store_version(request),
        }
        logger.log(
            _level_for(response.status_code),
            "%(method)s %(path)s -> %(status)d in %(duration_ms).1fms "
            "note=%(note_id)s v%(store_version)d [%(request_id)s]",
            fields,
            extra=fields,
        )
        return response
