"""Custom exceptions and centralized FastAPI error handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"


class LookupServiceError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class QueryValidationError(LookupServiceError):
    """The `q` parameter is absent or out of bounds. Message is client-safe."""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class DataUnavailableError(LookupServiceError):
    """The student data file could not be read or parsed.

    The client only ever sees the generic message; the real cause travels as
    ``__cause__`` and ends up in the server log.
    """

    def __init__(self):
        super().__init__(GENERIC_ERROR_MESSAGE, status_code=500)


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(LookupServiceError)
    async def handle_lookup_error(_request: Request, exc: LookupServiceError):
        if exc.status_code >= 500:
            logger.error("Request failed: %s (cause: %r)", exc, exc.__cause__)
        return JSONResponse({"error": str(exc)}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return JSONResponse(
            {"error": GENERIC_ERROR_MESSAGE},
            status_code=500,
        )
