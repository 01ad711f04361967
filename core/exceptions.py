"""
Domain exceptions raised by services and converted to response envelopes
by the error handlers in core.middleware.error_handling.
"""

from fastapi import status


class JobBoardError(Exception):
    """Base exception for errors with a client-facing status and message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(JobBoardError):
    """Raised when required input is missing or cannot be coerced."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Something is missing."


class NotFoundError(JobBoardError):
    """Raised when a lookup matches no records."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found."


class AuthenticationRequiredError(JobBoardError):
    """Raised when a route needs an actor and none was authenticated."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "User not authenticated"


class InternalError(JobBoardError):
    """
    Raised for unexpected storage or runtime failures.

    The message carries the underlying error text; the client-facing
    message is always the generic default.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class InvalidReferenceError(InternalError):
    """
    Raised when a reference identifier is malformed.

    Surfaced as a generic internal failure, the same way a storage-layer
    cast error would be.
    """

    def __init__(self, field: str, value: object):
        self.field = field
        self.value = value
        super().__init__(f"Invalid reference for {field}: {value!r}")
