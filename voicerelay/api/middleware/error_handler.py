"""
Global error handling middleware for the FastAPI application.

Catches VoiceRelayError subclasses, request validation errors, HTTP errors
and unhandled exceptions, converting them all into the one JSON envelope
``{error, details, success: false}`` the recorder knows how to read.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from voicerelay.core.exceptions import VoiceRelayError
from voicerelay.core.models import ErrorResponse

logger = logging.getLogger(__name__)


def _envelope(status_code: int, error: str, details: str) -> JSONResponse:
    body = ErrorResponse(error=error, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application.

    Registers four handlers:
    1. ``VoiceRelayError``: validation and upstream failures, status from the error.
    2. ``RequestValidationError``: malformed query/body parameters (422).
    3. ``HTTPException``: routing errors such as 404/405.
    4. ``Exception``: catch-all for unexpected server errors (500).

    Args:
        app: The FastAPI application instance to register handlers on.
    """

    @app.exception_handler(VoiceRelayError)
    async def voicerelay_error_handler(_request: Request, exc: VoiceRelayError) -> JSONResponse:
        """Convert domain errors into the JSON error envelope."""
        return _envelope(exc.status_code, exc.error, exc.details)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _envelope(422, "Invalid request", str(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _envelope(exc.status_code, "Request failed", str(exc.detail))

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all handler. Logs the traceback, never leaks it to clients."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return _envelope(500, "Something went wrong", "Internal server error")
