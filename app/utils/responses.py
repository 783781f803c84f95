"""
Standardized response utilities
"""

from typing import Any, Optional
from fastapi import status
from fastapi.responses import JSONResponse

from app.schemas.common import StandardResponse, ErrorResponse

def success_response(
    message: str,
    data: Any = None,
    status_code: int = 200
) -> JSONResponse:
    """Create standardized success response"""
    response = StandardResponse(
        success=True,
        message=message,
        data=data
    )
    return JSONResponse(
        content=response.model_dump(),
        status_code=status_code
    )

def error_response(
    message: str,
    error_code: Optional[str] = None,
    details: Any = None,
    status_code: int = 400
) -> JSONResponse:
    """Create standardized error response"""
    response = ErrorResponse(
        message=message,
        error_code=error_code,
        details=details
    )
    return JSONResponse(
        content=response.model_dump(),
        status_code=status_code
    )

def rate_limit_error():
    """Create rate limit error"""
    return error_response(
        message="Rate limit exceeded. Please try again later.",
        error_code="rate_limited",
        status_code=status.HTTP_429_TOO_MANY_REQUESTS
    )

def register_exception_handlers(app) -> None:
    """Map repository errors to HTTP responses"""
    from app.core.exceptions import (
        CompanionCountError,
        GuestNotFoundError,
        StoreNotInitializedError,
        StoreQueryError,
    )

    @app.exception_handler(StoreNotInitializedError)
    async def store_not_initialized_handler(request, exc: StoreNotInitializedError):
        return error_response(
            message="RSVP service is not available right now",
            error_code="store_unavailable",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE
        )

    @app.exception_handler(StoreQueryError)
    async def store_query_handler(request, exc: StoreQueryError):
        return error_response(
            message="Could not reach the guest database",
            error_code="store_error",
            details=exc.operation,
            status_code=status.HTTP_502_BAD_GATEWAY
        )

    @app.exception_handler(GuestNotFoundError)
    async def guest_not_found_handler(request, exc: GuestNotFoundError):
        return error_response(
            message="Guest not found",
            error_code="guest_not_found",
            status_code=status.HTTP_404_NOT_FOUND
        )

    @app.exception_handler(CompanionCountError)
    async def companion_count_handler(request, exc: CompanionCountError):
        return error_response(
            message=str(exc),
            error_code="invalid_companion_count",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY
        )
