"""HTTP exception handlers.

Converts domain exceptions into the standard ``{"error": {"code", "message"}}``
envelope. Each module's exception classes choose their own HTTP status and
error code through the ``http_status_code`` and ``error_code`` class attributes.
"""

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from src.core.domain.exceptions import DomainException
from src.core.interfaces.http.response import ErrorResponse


def error_response(
    status_code: int,
    code: str,
    message: str,
    details: dict | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse.create(code=code, message=message, details=details)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body),
        headers=headers,
    )


async def domain_exception_handler(
    _request: Request, exc: DomainException
) -> JSONResponse:
    """Render a domain exception from its class attributes."""
    status_code = getattr(exc, "http_status_code", status.HTTP_400_BAD_REQUEST)
    error_code = getattr(exc, "error_code", "DOMAIN_ERROR")
    headers = (
        {"WWW-Authenticate": "Bearer"}
        if status_code == status.HTTP_401_UNAUTHORIZED
        else None
    )
    return error_response(status_code, error_code, exc.message, headers=headers)


async def validation_exception_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures as 400 with per-field details."""
    fields = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "VALIDATION_ERROR",
        "Validation failed",
        details={"fields": fields},
    )


async def store_exception_handler(
    _request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """Persistence failures surface as an opaque 500."""
    logger.exception(f"Store failure: {exc.__class__.__name__}")
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "STORE_FAILURE",
        "An internal error occurred",
    )


async def global_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Handle all unhandled exceptions."""
    logger.exception(f"Unhandled exception: {exc}")
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "An internal error occurred",
    )
