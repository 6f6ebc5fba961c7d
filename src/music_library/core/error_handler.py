"""Exception handlers rendering every failure as a uniform error payload."""
from datetime import datetime, timezone
from http import HTTPStatus
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .exceptions import AppError
from .logging import get_logger

logger = get_logger(__name__)


def error_response(
    request: Request,
    status_code: int,
    message: str,
    validation_errors: Optional[List[str]] = None,
) -> JSONResponse:
    """Build the JSON error body shared by all handlers."""
    return JSONResponse(
        status_code=status_code,
        content={
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "status": status_code,
            "error": HTTPStatus(status_code).phrase,
            "message": message,
            "path": request.url.path,
            "validation_errors": validation_errors,
        },
    )


def _format_validation_error(error: dict) -> str:
    # Drop the leading "body"/"query"/"path" segment
    location = [str(part) for part in error.get("loc", ())[1:]]
    field = ".".join(location) or str(error.get("loc", ("request",))[0])
    message = error.get("msg", "invalid value")
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return f"{field}: {message}"


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.warning(
        "request_failed",
        path=request.url.path,
        status=exc.status_code,
        message=exc.message,
        details=exc.details,
    )
    return error_response(request, exc.status_code, exc.message, exc.validation_errors)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [_format_validation_error(error) for error in exc.errors()]
    logger.info("request_validation_failed", path=request.url.path, errors=errors)
    return error_response(request, 400, "Validation failed", errors)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("integrity_violation", path=request.url.path, error=str(exc.orig))
    return error_response(request, 409, "Request conflicts with an existing resource")


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(request, exc.status_code, str(exc.detail))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_exception", path=request.url.path, error=str(exc), exc_info=exc)
    return error_response(request, 500, "Unexpected error")


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
