"""
Global exception handlers — render domain errors as a JSON error envelope.

    {"error": {"message": <generic message>, "details": <exception text>}}
"""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from core.exceptions import (
    BusinessRuleViolationError,
    DomainError,
    DuplicateEntityError,
    EntityNotFoundError,
)

logger = structlog.get_logger()

# Most specific first; the first isinstance match wins.
ERROR_MAP: list[tuple[type[Exception], int, str]] = [
    (EntityNotFoundError, status.HTTP_404_NOT_FOUND, "The requested resource was not found."),
    (DuplicateEntityError, status.HTTP_409_CONFLICT, "A resource with the same identifier already exists."),
    (BusinessRuleViolationError, status.HTTP_400_BAD_REQUEST, "Business rule violation."),
    (DomainError, status.HTTP_400_BAD_REQUEST, "Domain rule violation."),
]
FALLBACK_ERROR = (status.HTTP_500_INTERNAL_SERVER_ERROR, "An error occurred while processing your request.")


def resolve_error(exc: Exception) -> tuple[int, str]:
    for exc_type, status_code, message in ERROR_MAP:
        if isinstance(exc, exc_type):
            return status_code, message
    return FALLBACK_ERROR


def error_response(exc: Exception) -> JSONResponse:
    status_code, message = resolve_error(exc)
    return JSONResponse(
        status_code=status_code,
        content={"error": {"message": message, "details": str(exc)}},
    )


async def domain_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.warning("api.domain_error", path=request.url.path, error_type=type(exc).__name__, error=str(exc))
    return error_response(exc)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("api.unhandled_error", path=request.url.path, error_type=type(exc).__name__, exc_info=exc)
    return error_response(exc)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
