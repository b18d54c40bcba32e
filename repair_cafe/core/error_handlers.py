# repair_cafe/core/error_handlers.py
"""
FastAPI exception handlers.

Every failure leaves the API as `{"success": false, "message": ...}` with
the matching HTTP status code. Datastore and unexpected errors are logged
with their stack trace and reported as a generic 500.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from repair_cafe.core.exceptions import RepairCafeError

logger = logging.getLogger(__name__)


def _error_response(
    status_code: int, message: str, error_code: str, **extra
) -> JSONResponse:
    content = {"success": False, "message": message, "error_code": error_code}
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


async def repair_cafe_error_handler(
    request: Request, exc: RepairCafeError
) -> JSONResponse:
    logger.info(
        "%s %s -> %s %s: %s",
        request.method,
        request.url.path,
        exc.status_code,
        exc.error_code,
        exc.message,
    )
    extra = {"details": exc.details} if exc.details else {}
    return _error_response(exc.status_code, exc.message, exc.error_code, **extra)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail), "HTTP_ERROR")


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(loc) for loc in err["loc"]),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    logger.warning("Validation error on %s: %s", request.url.path, errors)
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "Request validation failed",
        "VALIDATION_ERROR",
        validation_errors=errors,
    )


async def database_error_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    logger.error(
        "Database error on %s %s: %s",
        request.method,
        request.url.path,
        type(exc).__name__,
        exc_info=exc,
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Database operation failed",
        "DATABASE_ERROR",
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.critical(
        "Unexpected error on %s %s: %s",
        request.method,
        request.url.path,
        type(exc).__name__,
        exc_info=exc,
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred",
        "INTERNAL_ERROR",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RepairCafeError, repair_cafe_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
