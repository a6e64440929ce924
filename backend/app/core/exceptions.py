"""
Custom exceptions and error handlers for consistent error responses.

Every rejection leaves the service as ``{"error_code", "message", "details"}``.
"""

from fastapi import Request, status
from starlette.exceptions import HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from typing import Any, Dict, Optional

from backend.app.core.logging_config import get_logger

logger = get_logger("http")


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, error_code: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class AuthenticationRequiredError(AppException):
    """Raised when no principal can be resolved for the request."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(
            message=message,
            error_code="AUTH_REQUIRED",
            status_code=status.HTTP_401_UNAUTHORIZED
        )


class PermissionDeniedError(AppException):
    """Raised when the principal lacks the permission a route requires."""

    def __init__(self, permission: str):
        self.permission = permission
        super().__init__(
            message="Insufficient permissions",
            error_code="FORBIDDEN",
            status_code=status.HTTP_403_FORBIDDEN,
            details={"required": permission}
        )


class InvalidCredentialsError(AppException):
    """Raised for failed logins."""

    def __init__(self):
        super().__init__(
            message="Invalid credentials",
            error_code="INVALID_CREDENTIALS",
            status_code=status.HTTP_401_UNAUTHORIZED
        )


class ResourceNotFoundError(AppException):
    """Raised when requested resource is not found."""

    def __init__(self, resource: str, resource_id: Any = None):
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with ID {resource_id} not found"
        super().__init__(
            message=message,
            error_code="NOT_FOUND",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": resource_id}
        )


class ConflictError(AppException):
    """Raised when a write collides with existing state."""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="CONFLICT",
            status_code=status.HTTP_409_CONFLICT,
            details=details
        )


class NoSharesAllocatedError(AppException):
    """Raised when an assessment is distributed over units holding no shares."""

    def __init__(self):
        super().__init__(
            message="No shares allocated",
            error_code="NO_SHARES_ALLOCATED",
            status_code=status.HTTP_400_BAD_REQUEST
        )


class InvalidAssessmentError(AppException):
    """Raised when an assessment cannot be distributed (non-positive total)."""

    def __init__(self, message: str = "Assessment total must be positive"):
        super().__init__(
            message=message,
            error_code="INVALID_ASSESSMENT",
            status_code=status.HTTP_400_BAD_REQUEST
        )


# Global Exception Handlers

HTTP_ERROR_CODES = {
    400: "ERR_BAD_REQUEST",
    401: "AUTH_REQUIRED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "ERR_METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    500: "ERR_INTERNAL_SERVER",
}


def error_response(
    status_code: int,
    error_code: str,
    message: Any,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """The single error envelope every handler emits."""
    return JSONResponse(
        status_code=status_code,
        content={"error_code": error_code, "message": message, "details": details or {}},
        headers=headers,
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for custom application exceptions."""
    return error_response(exc.status_code, exc.error_code, exc.message, exc.details)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handler for framework HTTP errors (unknown routes, wrong methods)."""
    return error_response(
        exc.status_code,
        HTTP_ERROR_CODES.get(exc.status_code, "ERR_UNKNOWN"),
        exc.detail,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handler for Pydantic validation errors."""
    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "ERR_VALIDATION",
        "Validation error",
        {"errors": jsonable_encoder(exc.errors())},
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.error("%s %s - %s: %s", request.method, request.url.path, type(exc).__name__, exc, exc_info=exc)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "ERR_INTERNAL_SERVER",
        "An internal server error occurred",
    )
