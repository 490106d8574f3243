"""
API Error Mapping Module

Maps domain errors, request validation failures and unexpected
exceptions onto HTTP responses with a stable error envelope:

    {"error": {"code": "...", "message": "..."}}

Design Decisions:
- Absent entities map to 404, conflicting state to 409, bad input to 400
- Unclassified errors map to 500 without leaking internal detail
"""

from typing import Dict

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.errors import DomainError, ErrorCode
from app.logging_config import get_logger
from app.models import ErrorBody, ErrorResponse

logger = get_logger(__name__)


ERROR_STATUS: Dict[ErrorCode, int] = {
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.TEAM_EXISTS: status.HTTP_409_CONFLICT,
    ErrorCode.PR_EXISTS: status.HTTP_409_CONFLICT,
    ErrorCode.PR_MERGED: status.HTTP_409_CONFLICT,
    ErrorCode.NOT_ASSIGNED: status.HTTP_409_CONFLICT,
    ErrorCode.NO_CANDIDATE: status.HTTP_409_CONFLICT,
}

BAD_REQUEST_CODE = "BAD_REQUEST"
INTERNAL_ERROR_CODE = "INTERNAL_ERROR"


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    """Build a JSON response carrying the error envelope."""
    body = ErrorResponse(error=ErrorBody(code=code, message=message))
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Handle expected, caller-facing errors."""
    status_code = ERROR_STATUS.get(exc.code, status.HTTP_400_BAD_REQUEST)

    logger.info(
        "Request rejected",
        path=request.url.path,
        method=request.method,
        code=exc.code.value,
        message=exc.message
    )

    return error_response(status_code, exc.code.value, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle malformed request bodies and missing parameters."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query"))
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "invalid request"

    logger.info(
        "Invalid request",
        path=request.url.path,
        method=request.method,
        error=message
    )

    return error_response(status.HTTP_400_BAD_REQUEST, BAD_REQUEST_CODE, message)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_type=type(exc).__name__
    )

    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        INTERNAL_ERROR_CODE,
        "internal server error"
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install all error handlers on the application."""
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
