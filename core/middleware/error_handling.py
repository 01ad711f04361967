"""
Error handling middleware with error message sanitization.

Every failure leaves the API in the same envelope:
``{"success": false, "message": ..., "error": ...}``.
"""

import logging
import re
from typing import Any, Callable, Optional

from fastapi import Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.exceptions import JobBoardError, InternalError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal Server Error"

# Patterns for sensitive data that should never reach a client or a log line
SENSITIVE_PATTERNS = [
    re.compile(r'password["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'token["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'api[_-]?key["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'secret["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'authorization["\s:]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'://[^/\s:@]+:[^/\s@]+@'),  # credentials in connection URLs
]


def sanitize_error_message(message: str) -> str:
    """
    Remove sensitive information from error messages.

    Args:
        message: Original error message

    Returns:
        Sanitized error message
    """
    sanitized = message
    for pattern in SENSITIVE_PATTERNS:
        sanitized = pattern.sub('[REDACTED]', sanitized)
    return sanitized


def error_envelope(message: str, error: Optional[str] = None, **extra: Any) -> dict[str, Any]:
    """Build the failure envelope shared by every error response."""
    content: dict[str, Any] = {"message": message, "success": False}
    if error is not None:
        content["error"] = error
    content.update(extra)
    return content


def internal_error_response(exc: Exception, expose_details: bool) -> JSONResponse:
    """500 response forwarding the (sanitized) error text when allowed."""
    detail = exc.message if isinstance(exc, JobBoardError) else str(exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope(
            INTERNAL_ERROR_MESSAGE,
            error=sanitize_error_message(detail) if expose_details else None,
        ),
    )


def job_board_error_response(exc: JobBoardError, expose_details: bool) -> JSONResponse:
    """Convert a domain error into its envelope."""
    if isinstance(exc, InternalError):
        return internal_error_response(exc, expose_details)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(exc.message),
    )


def format_validation_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """
    Format validation errors into a user-friendly structure.

    Input values are left out on purpose; they may contain credentials.
    """
    return [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": sanitize_error_message(error["msg"]),
            "type": error["type"],
        }
        for error in exc.errors()
    ]


class ErrorHandlingMiddleware:
    """
    Outermost safety net converting any escaped exception into an envelope.

    Domain errors are normally handled by the exception handlers installed
    with ``setup_error_handlers``; this catches whatever gets past them.
    """

    def __init__(self, app: Callable, debug: bool = False, expose_details: bool = True):
        """
        Initialize error handling middleware.

        Args:
            app: The ASGI application
            debug: Whether to log full tracebacks for handled database errors
            expose_details: Whether to forward error text to the client
        """
        self.app = app
        self.debug = debug
        self.expose_details = expose_details

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        try:
            await self.app(scope, receive, send)
        except Exception as exc:
            response = self._handle_exception(exc, scope)
            await response(scope, receive, send)

    def _handle_exception(self, exc: Exception, scope: dict) -> Response:
        """
        Map an exception to a JSON response.

        Args:
            exc: The exception to handle
            scope: ASGI scope for context

        Returns:
            JSONResponse with the failure envelope
        """
        request_path = scope.get("path", "unknown")
        request_method = scope.get("method", "unknown")

        if isinstance(exc, JobBoardError):
            logger.warning(
                f"{type(exc).__name__}: {request_method} {request_path} - {exc.message}"
            )
            return job_board_error_response(exc, self.expose_details)

        if isinstance(exc, StarletteHTTPException):
            logger.warning(
                f"HTTP exception: {request_method} {request_path} - "
                f"Status: {exc.status_code}, Message: {exc.detail}"
            )
            return JSONResponse(
                status_code=exc.status_code,
                content=error_envelope(sanitize_error_message(str(exc.detail))),
            )

        if isinstance(exc, OperationalError):
            logger.error(
                f"Database operational error: {request_method} {request_path}",
                exc_info=True,
            )
        elif isinstance(exc, SQLAlchemyError):
            logger.error(
                f"SQLAlchemy error: {request_method} {request_path}",
                exc_info=self.debug,
            )
        else:
            logger.error(
                f"Unhandled exception: {request_method} {request_path} - "
                f"{type(exc).__name__}: {sanitize_error_message(str(exc))}",
                exc_info=True,
            )
        return internal_error_response(exc, self.expose_details)


def setup_error_handlers(app, expose_details: bool = True):
    """
    Set up exception handlers for FastAPI application.

    Args:
        app: FastAPI application instance
        expose_details: Whether 500 responses forward the error text
    """

    @app.exception_handler(JobBoardError)
    async def job_board_exception_handler(request: Request, exc: JobBoardError):
        """Handle domain errors raised by services and dependencies (logged where raised)."""
        return job_board_error_response(exc, expose_details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions."""
        return JSONResponse(
            status_code=exc.status_code,
            content=error_envelope(sanitize_error_message(str(exc.detail))),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors."""
        return JSONResponse(
            status_code=422,
            content=error_envelope(
                "Request validation failed",
                details=format_validation_errors(exc),
            ),
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        """Handle database errors that escaped a service boundary."""
        logger.error(
            f"SQLAlchemy error: {request.method} {request.url.path}",
            exc_info=exc,
        )
        return internal_error_response(exc, expose_details)
