"""
Request/response logging middleware.

Logs every API request with its status and duration. A short
``request_id`` is bound into structlog's contextvars so every log line
emitted while the request runs carries it, and is echoed back to the
client as ``X-Request-ID``.
"""

import logging
import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("listsmith.api")

# Probed constantly by load balancers
_QUIET_PATHS = frozenset({"/health"})


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration; sets X-Request-ID / X-Response-Time."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start_time = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start_time) * 1000, 1)

        if request.url.path not in _QUIET_PATHS:
            logger.info(
                f"{request.method} {request.url.path} "
                f"→ {response.status_code} ({duration_ms}ms)"
            )

        response.headers["X-Response-Time"] = f"{duration_ms}ms"
        response.headers["X-Request-ID"] = request_id

        structlog.contextvars.clear_contextvars()
        return response
