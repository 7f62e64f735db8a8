"""
API Error Handling

Standardized error handling for the API.
"""

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from api.models.responses import ErrorResponse, ErrorDetail
from core.schemas.errors import ErrorCodes, SplitAuditException


logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                details=self.details,
            ),
        )


# Domain error codes that are the caller's fault
_CLIENT_ERROR_CODES = frozenset({ErrorCodes.INPUT_ERROR, ErrorCodes.CANONICALIZATION_ERROR})


def from_domain_exception(exc: SplitAuditException) -> APIError:
    """Map a domain exception onto an APIError, keeping its code."""
    status_code = 400 if exc.code in _CLIENT_ERROR_CODES else 500
    return APIError(
        code=exc.code,
        message=exc.message,
        status_code=status_code,
        details=exc.details,
    )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def domain_error_handler(request: Request, exc: SplitAuditException) -> JSONResponse:
    """Handle domain exceptions that escaped a route."""
    api_error = from_domain_exception(exc)
    if api_error.status_code >= 500:
        logger.error(f"{exc.code} while handling {request.url.path}: {exc.message}")
    return await api_error_handler(request, api_error)


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
                details={"type": type(exc).__name__},
            ),
        ).model_dump(),
    )
