"""
Application error taxonomy

Every error maps to one HTTP status and a ``{"message": ...}`` body. A
resource that exists but belongs to someone else is reported exactly like a
missing one (same status, same message) so callers cannot probe for other
users' ids.
"""


class AppError(Exception):
    """Base application error with an HTTP status code"""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(AppError):
    status_code = 400
    default_message = "Invalid request data"


class ConflictError(AppError):
    status_code = 400
    default_message = "Resource already exists"


class UnauthenticatedError(AppError):
    status_code = 401
    default_message = "Authentication required"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Resource not found"


class AuthorizationError(NotFoundError):
    """Caller does not own the resource; rendered as a not-found"""
