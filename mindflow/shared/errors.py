"""
Error taxonomy and standardized error responses for the Mindflow service.

Two halves live here:

1. Domain exceptions raised by the analysis pipeline. In-flight failures
   (``AnalysisError`` subclasses) are recovered by the request lifecycle
   controller; ``MissingCredentialsError`` is fatal at startup.
2. JSON error envelope helpers used by the API routes, so every failure
   reaches the client in the same shape with its correlation ID.

Usage:
    from mindflow.shared.errors import ErrorCode, error_response, conflict_error

    return conflict_error(
        message="An analysis is already in progress",
        correlation_id=request.state.correlation_id,
    )
"""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel
from fastapi import Request
from fastapi.responses import JSONResponse


# =============================================================================
# DOMAIN EXCEPTIONS
# =============================================================================

class MindflowError(Exception):
    """Base class for all errors raised by the journaling service."""


class MissingCredentialsError(MindflowError):
    """The analysis credential is not configured. Unrecoverable."""


class AnalysisError(MindflowError):
    """An entry analysis attempt failed."""


class InvalidCredentialsError(AnalysisError):
    """The analysis service rejected the configured credential."""


class NetworkFailureError(AnalysisError):
    """The analysis service could not be reached."""


class ServiceUnavailableError(AnalysisError):
    """The analysis service answered with an error."""


class MalformedResponseError(AnalysisError):
    """The analysis service answered, but not with a valid analysis."""


# =============================================================================
# HTTP ERROR ENVELOPE
# =============================================================================

class ErrorCode(str, Enum):
    """Standard error codes used across the API."""

    # Client errors (4xx)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"

    # Server errors (5xx)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


class ErrorDetail(BaseModel):
    """Structured error detail model."""
    code: str
    message: str
    details: Optional[dict[str, Any]] = None
    correlation_id: Optional[str] = None


class ErrorResponse(BaseModel):
    """Standard error response wrapper."""
    error: ErrorDetail


def get_correlation_id(request: Optional[Request] = None) -> Optional[str]:
    """
    Extract correlation ID from request state.

    Args:
        request: FastAPI request object (optional)

    Returns:
        Correlation ID string or None if not available
    """
    if request is None:
        return None
    return getattr(request.state, "correlation_id", None)


def error_response(
    code: ErrorCode,
    message: str,
    status_code: int,
    details: Optional[dict[str, Any]] = None,
    correlation_id: Optional[str] = None,
) -> JSONResponse:
    """
    Create a standardized JSON error response.

    Args:
        code: Error code from ErrorCode enum
        message: Human-readable error message
        status_code: HTTP status code
        details: Optional additional error details
        correlation_id: Request correlation ID for tracing

    Returns:
        JSONResponse with standardized error format
    """
    error_detail = ErrorDetail(
        code=code.value,
        message=message,
        details=details,
        correlation_id=correlation_id,
    )
    return JSONResponse(
        status_code=status_code,
        content={"error": error_detail.model_dump(exclude_none=True)},
    )


def validation_error(
    message: str,
    details: Optional[dict[str, Any]] = None,
    correlation_id: Optional[str] = None,
) -> JSONResponse:
    """Create a 400 validation error response."""
    return error_response(
        code=ErrorCode.VALIDATION_ERROR,
        message=message,
        status_code=400,
        details=details,
        correlation_id=correlation_id,
    )


def not_found_error(
    message: str,
    resource_type: Optional[str] = None,
    correlation_id: Optional[str] = None,
) -> JSONResponse:
    """
    Create a 404 not found error response.

    Args:
        message: Description of what was not found
        resource_type: Type of resource (e.g., "entry", "error")
        correlation_id: Request correlation ID

    Returns:
        JSONResponse with 404 status
    """
    details = {"resource_type": resource_type} if resource_type else None
    return error_response(
        code=ErrorCode.NOT_FOUND,
        message=message,
        status_code=404,
        details=details,
        correlation_id=correlation_id,
    )


def conflict_error(
    message: str,
    correlation_id: Optional[str] = None,
) -> JSONResponse:
    """Create a 409 conflict response (e.g. an analysis is already running)."""
    return error_response(
        code=ErrorCode.CONFLICT,
        message=message,
        status_code=409,
        correlation_id=correlation_id,
    )


def internal_error(
    message: str = "Internal server error",
    details: Optional[dict[str, Any]] = None,
    correlation_id: Optional[str] = None,
) -> JSONResponse:
    """
    Create a 500 internal error response.

    Note: Be careful not to expose sensitive internal details to clients.
    """
    return error_response(
        code=ErrorCode.INTERNAL_ERROR,
        message=message,
        status_code=500,
        details=details,
        correlation_id=correlation_id,
    )


def service_unavailable_error(
    message: str = "Service temporarily unavailable",
    details: Optional[dict[str, Any]] = None,
    correlation_id: Optional[str] = None,
) -> JSONResponse:
    """
    Create a 503 service unavailable error response.

    Args:
        message: User-facing description of the failure
        details: Safe-to-expose details (e.g. the text to retry)
        correlation_id: Request correlation ID

    Returns:
        JSONResponse with 503 status
    """
    return error_response(
        code=ErrorCode.SERVICE_UNAVAILABLE,
        message=message,
        status_code=503,
        details=details,
        correlation_id=correlation_id,
    )
