"""
Global exception handlers for the FastAPI application.

Catches:
1. ListSmithError subclasses, mapped to HTTP status codes. The body is
   ``{"error": message, "error_type": name}``.
2. RequestValidationError (malformed JSON or wrong field types), returned
   as 400 ``{"error": "Invalid request body"}``.
3. Unhandled Exception, returned as 500 with a unique ``error_id`` for
   log correlation.
"""

import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from listsmith.core.exceptions import (
    CircuitBreakerOpenError,
    ConfigurationError,
    DescriptionGenerationError,
    InputValidationError,
    ListSmithError,
    UpstreamError,
)

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers on the FastAPI app.

    Called from ``create_app()`` after all middleware and routers
    are registered.
    """

    @app.exception_handler(ListSmithError)
    async def handle_listsmith_error(request: Request, exc: ListSmithError) -> JSONResponse:
        """Map ListSmithError subclasses to HTTP status codes."""
        status_code = _get_status_code(exc)
        error_type = type(exc).__name__
        if status_code < 500:
            logger.warning(f"{error_type}: {exc.message} [{request.url.path}]")
        else:
            logger.error(
                f"{error_type}: {exc.message}",
                exc_info=exc,
                extra={"error_type": error_type, "path": request.url.path},
            )
        return JSONResponse(
            status_code=status_code,
            content={"error": exc.message, "error_type": error_type},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning(f"Invalid request body for {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.exception_handler(Exception)
    async def handle_unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unhandled exceptions: log, return 500 with error_id."""
        error_id = uuid.uuid4().hex[:8]
        logger.exception(
            f"Unhandled exception (error_id={error_id})",
            extra={"error_id": error_id, "path": request.url.path},
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "error_id": error_id,
            },
        )


def _get_status_code(exc: ListSmithError) -> int:
    """Map exception type to HTTP status code."""
    if isinstance(exc, InputValidationError):
        return 400
    if isinstance(exc, (ConfigurationError, DescriptionGenerationError)):
        return 500
    if isinstance(exc, CircuitBreakerOpenError):
        return 503
    if isinstance(exc, UpstreamError):
        return 502
    # Base ListSmithError fallback
    return 500
