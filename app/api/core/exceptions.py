import logging
from typing import Dict, List, Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError

from app.api.utils.response_payloads import error_response

logger = logging.getLogger("app")


class DomainError(Exception):
    """
    Base class for business-rule failures raised by the service layer.

    Attributes:
        message: Human-readable description of the failure
        status_code: HTTP status the API layer maps this error to
        error: Machine-readable error code used in the response envelope
    """

    status_code: int = status.HTTP_400_BAD_REQUEST
    error: str = "BAD_REQUEST"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(DomainError):
    """
    An attribute constraint was violated or a status literal is not recognised.

    Attributes:
        errors: Optional field-level messages, e.g. {"name": ["Name is required"]}
    """

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error = "VALIDATION_ERROR"

    def __init__(self, message: str, errors: Optional[Dict[str, List[str]]] = None):
        self.errors = errors or {}
        super().__init__(message)


class AuthorizationError(DomainError):
    """The actor lacks the role or ownership the operation requires."""

    status_code = status.HTTP_403_FORBIDDEN
    error = "FORBIDDEN"


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "NOT_FOUND"


class ConcurrencyConflict(DomainError):
    """A row changed between read and write; the caller should refetch."""

    status_code = status.HTTP_409_CONFLICT
    error = "CONCURRENCY_CONFLICT"


class DataAccessError(DomainError):
    """The underlying store failed. Transient; this layer never retries."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error = "DATA_ACCESS_ERROR"


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handle Pydantic request validation errors and return a standardized JSON response.

    Args:
        request (Request): The incoming HTTP request.
        exc (RequestValidationError): The validation error raised by FastAPI/Pydantic.

    Returns:
        JSONResponse: Standardized error response containing field-level validation messages.
    """
    errors = {}
    for err in exc.errors():
        loc = err["loc"][-1]
        msg = err["msg"]
        if msg.startswith("Value error,"):
            msg = msg.replace("Value error,", "").strip()
        errors.setdefault(str(loc), []).append(msg)

    return error_response(
        status_code=422,
        message="Validation failed",
        error="VALIDATION_ERROR",
        errors=errors,
    )


async def domain_exception_handler(request: Request, exc: DomainError):
    """
    Translate a DomainError raised by a service into the error envelope.

    Args:
        request (Request): The incoming HTTP request.
        exc (DomainError): The business-rule failure.

    Returns:
        JSONResponse: Error response using the exception's status and error code.
    """
    if exc.status_code >= 500:
        logger.error(f"{exc.error} on {request.url.path}: {exc.message}")
    else:
        logger.warning(f"{exc.error} on {request.url.path}: {exc.message}")

    return error_response(
        status_code=exc.status_code,
        message=exc.message,
        error=exc.error,
        errors=getattr(exc, "errors", None),
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    """
    Handle HTTP exceptions (4xx/5xx) and return a standardized JSON response.

    Args:
        request (Request): The incoming HTTP request.
        exc (HTTPException): The HTTP exception raised by FastAPI.

    Returns:
        JSONResponse: Standardized error response with HTTP status code and message.
    """
    logger.error(f"HTTP exception: {exc.detail} ({exc.status_code})")

    response = error_response(
        status_code=exc.status_code,
        error="HTTP_ERROR",
        message=exc.detail,
    )
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def general_exception_handler(request: Request, exc: Exception):
    """
    Handle uncaught exceptions and return a standardized JSON response.

    Args:
        request (Request): The incoming HTTP request.
        exc (Exception): The unhandled exception.

    Returns:
        JSONResponse: Standardized 500 error response.
    """
    logger.exception(f"Unhandled exception: {exc}")

    return error_response(
        status_code=500,
        error="INTERNAL_SERVER_ERROR",
        message="Internal server error",
    )
