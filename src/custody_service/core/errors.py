"""
Application Errors

Operational errors raised by the services. The API layer maps each class to
its HTTP status and the standard response envelope.
"""

from uuid import UUID


class AppError(Exception):
    """Base class for expected, operational failures"""

    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequestError(AppError):
    status_code = 400
    default_message = "Invalid request"


class UnauthorizedError(AppError):
    status_code = 401
    default_message = "Authentication required"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Access denied"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Resource already exists"


class InternalError(AppError):
    status_code = 500
    default_message = "Internal server error"


def ensure_valid_id(value: str) -> str:
    """Reject identifiers that cannot be a stored UUID

    Raises:
        BadRequestError: If value is not a UUID string
    """
    try:
        return str(UUID(str(value)))
    except ValueError:
        raise BadRequestError("Invalid ID format provided")
