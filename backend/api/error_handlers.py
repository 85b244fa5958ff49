"""
API exception handlers.

Every error leaves the API in the same shape as PawzrError.to_dict():
{"error": <code>, "message": <text>, "details": {...}}. Unexpected
exceptions are logged with their traceback and answered with a generic
500 so internals never reach the client.
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.exceptions import PawzrError, PersistenceError

from .models import ErrorResponse

logger = logging.getLogger(__name__)


def _error_body(code: str, message: str, details: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    return ErrorResponse(error=code, message=message, details=details or {}).model_dump()


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(PawzrError)
    async def pawzr_error_handler(request: Request, exc: PawzrError) -> JSONResponse:
        if isinstance(exc, PersistenceError):
            logger.error(f"{request.method} {request.url.path}: {exc.details.get('operation')} failed: {exc.reason}")
        elif exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path}: {exc.code}: {exc.message}")

        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(**exc.to_dict()).model_dump(),
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content=_error_body(
                "VALIDATION_ERROR",
                "Invalid request parameters",
                {"errors": jsonable_encoder(exc.errors())},
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body("HTTP_ERROR", str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content=_error_body("INTERNAL_SERVER_ERROR", "Internal server error"),
        )
