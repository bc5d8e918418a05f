"""
Custom exceptions and error handlers for the Gamers Challenge backend
Every failure is rendered as {"error": "<message>"}
"""

import logging
from typing import Any, Dict, Optional

import sentry_sdk
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


class GamersChallengeException(Exception):
    """Base exception for the application"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or "INTERNAL_ERROR"
        self.details = details or {}
        super().__init__(self.message)


class DatabaseException(GamersChallengeException):
    """Database operation exception"""

    def __init__(
        self, message: str = "Database operation failed", details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="DATABASE_ERROR",
            details=details,
        )


class DatabaseNotInitializedError(DatabaseException):
    """Raised when the database handle is requested before a successful connect()"""

    def __init__(self, message: str = "Database not connected. Call connect() first."):
        super().__init__(message=message)


class AuthenticationException(GamersChallengeException):
    """Missing credentials or failed login"""

    def __init__(self, message: str = "Access denied", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="AUTHENTICATION_ERROR",
            details=details,
        )


class AuthorizationException(GamersChallengeException):
    """Credentials were presented but are not valid"""

    def __init__(self, message: str = "Invalid token", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            error_code="AUTHORIZATION_ERROR",
            details=details,
        )


class ValidationException(GamersChallengeException):
    """Malformed input"""

    def __init__(
        self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="VALIDATION_ERROR",
            details=details,
        )


class NotFoundException(GamersChallengeException):
    """Resource not found exception"""

    def __init__(self, resource: str = "Resource", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"{resource} not found",
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="NOT_FOUND",
            details=details,
        )


class ConflictException(GamersChallengeException):
    """Duplicate resource exception"""

    def __init__(
        self, message: str = "Resource already exists", details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="DUPLICATE_ERROR",
            details=details,
        )


class FileUploadException(GamersChallengeException):
    """File upload exception"""

    def __init__(
        self, message: str = "File upload failed", details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="FILE_UPLOAD_ERROR",
            details=details,
        )


class PayloadTooLargeException(GamersChallengeException):
    """Request body or uploaded file exceeds the configured limit"""

    def __init__(self, message: str = "File too large", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            error_code="PAYLOAD_TOO_LARGE",
            details=details,
        )


def create_error_response(status_code: int, message: str) -> JSONResponse:
    """
    Create the error body shared by every handler

    Args:
        status_code: HTTP status code
        message: Client-facing error message

    Returns:
        JSON response of the form {"error": message}
    """
    return JSONResponse(status_code=status_code, content={"error": message})


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


async def app_exception_handler(request: Request, exc: GamersChallengeException) -> JSONResponse:
    """
    Handle application exceptions

    Client errors are returned with their message. Server errors are logged
    with full detail and returned with a generic message.
    """
    extra = {
        "error_code": exc.error_code,
        "status_code": exc.status_code,
        "details": exc.details,
        "path": request.url.path,
        "request_id": _request_id(request),
    }

    if exc.status_code >= 500:
        logger.error(f"Application error: {exc.message}", extra=extra, exc_info=exc)
        if sentry_sdk.get_client().is_active():
            sentry_sdk.capture_exception(exc)
        return create_error_response(exc.status_code, INTERNAL_ERROR_MESSAGE)

    logger.warning(f"Request rejected: {exc.message}", extra=extra)
    return create_error_response(exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle routing errors (unknown path, wrong method)"""
    logger.warning(
        f"HTTP exception: {exc.detail}",
        extra={"status_code": exc.status_code, "path": request.url.path},
    )
    return create_error_response(exc.status_code, str(exc.detail))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request validation errors

    The first failing field is reported as "<field>: <reason>".
    """
    errors = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"] if loc != "body")
        errors.append(f"{field}: {error['msg']}" if field else error["msg"])

    logger.warning("Validation error", extra={"errors": errors, "path": request.url.path})

    message = errors[0] if errors else "Invalid request"
    return create_error_response(status.HTTP_400_BAD_REQUEST, message)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions"""
    logger.error(
        f"Unexpected error: {str(exc)}",
        extra={
            "exception_type": type(exc).__name__,
            "path": request.url.path,
            "request_id": _request_id(request),
        },
        exc_info=exc,
    )

    if sentry_sdk.get_client().is_active():
        sentry_sdk.capture_exception(exc)

    return create_error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


def register_exception_handlers(app):
    """
    Register all exception handlers with the FastAPI app

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(GamersChallengeException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Catch-all handler for unexpected exceptions
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.debug("Exception handlers registered")
