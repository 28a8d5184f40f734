"""
Application error types.

Services raise these; the handler registered in create_app() turns them
into the standard JSON error envelope with the matching status code.
"""
from typing import Any, Optional


class AppError(Exception):
    """Base class for errors that map directly to an HTTP response."""

    status_code = 500
    error_code = "INTERNAL_ERROR"
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        payload = {
            'success': False,
            'error': self.message,
            'error_code': self.error_code,
        }
        if self.details is not None:
            payload['details'] = self.details
        return payload


class BadRequestError(AppError):
    status_code = 400
    error_code = "BAD_REQUEST"
    default_message = "Bad request"


class ValidationError(AppError):
    status_code = 400
    error_code = "VALIDATION_ERROR"
    default_message = "Validation failed"


class UnauthorizedError(AppError):
    status_code = 401
    error_code = "UNAUTHORIZED"
    default_message = "Authentication required"


class ForbiddenError(AppError):
    status_code = 403
    error_code = "FORBIDDEN"
    default_message = "Access forbidden"


class NotFoundError(AppError):
    status_code = 404
    error_code = "NOT_FOUND"
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = 409
    error_code = "CONFLICT"
    default_message = "Resource conflict"
