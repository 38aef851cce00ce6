"""
Global error handling for the FastAPI application.

Converts TalkItOutError subclasses, request validation errors, and
unhandled exceptions into one JSON envelope: ``{detail, code, timestamp}``.
"""

import logging
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from talkitout.core.exceptions import TalkItOutError

logger = logging.getLogger(__name__)


def _envelope(status_code: int, detail: str, code: str, timestamp: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": detail,
            "code": code,
            "timestamp": timestamp or datetime.now(UTC).isoformat(),
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application.

    Domain errors keep their own status code; validation failures map to 422
    and anything else to 500 without leaking a stack trace.
    """

    @app.exception_handler(TalkItOutError)
    async def talkitout_error_handler(_request: Request, exc: TalkItOutError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.warning("%s: %s", exc.code, exc.detail)
        return _envelope(exc.status_code, exc.detail, exc.code, exc.timestamp)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _envelope(422, str(exc), "VALIDATION_ERROR")

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return _envelope(500, "Internal server error", "INTERNAL_ERROR")
