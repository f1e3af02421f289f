"""FastAPI exception handlers.

Every failure leaves the API as an ``ErrorResponse`` body with the same code
repeated in the ``X-Error-Code`` header.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .base import AppError
from .context import trace_id_var
from .schemas import ErrorResponse

logger = logging.getLogger(__name__)

INVALID_INPUT = "INVALID_INPUT"
INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


def error_json(status_code: int, body: ErrorResponse) -> JSONResponse:
    """Render ``body`` with the ``X-Error-Code`` header."""
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json"),
        headers={"X-Error-Code": body.error},
    )


def _body(code: str, message: str, details: dict | None = None) -> ErrorResponse:
    return ErrorResponse(
        error=code,
        message=message,
        details=details or {},
        trace_id=trace_id_var.get(),
    )


async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s: %s", exc.code, exc.message, extra={"path": request.url.path})
    else:
        logger.info(
            "Request rejected with %s",
            exc.code,
            extra={"error_code": exc.code, "path": request.url.path},
        )
    return error_json(exc.status_code, exc.to_response())


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Request body, query or header failed pydantic validation."""
    body = _body(
        INVALID_INPUT,
        "Input validation error",
        {"errors": jsonable_encoder(exc.errors())},
    )
    return error_json(422, body)


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Routing-level errors (unknown path, wrong method)."""
    return error_json(exc.status_code, _body(f"HTTP_{exc.status_code}", str(exc.detail)))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception", extra={"path": request.url.path})
    return error_json(500, _body(INTERNAL_SERVER_ERROR, "Internal server error"))


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the handlers above on ``app``."""
    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
