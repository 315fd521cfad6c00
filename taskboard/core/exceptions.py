"""Error taxonomy for the Taskboard API.

Every error carries the HTTP status it maps to and a message that is safe to
return to the client. Anything not derived from ``TaskboardError`` is treated
as an internal fault by the application's exception handlers.
"""


class TaskboardError(Exception):
    """Base exception for Taskboard errors."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TaskboardError):
    status_code = 400
    default_message = "Invalid request"


class ConflictError(TaskboardError):
    status_code = 400
    default_message = "User already exists"


class AuthenticationError(TaskboardError):
    status_code = 401
    default_message = "Access token required"


class InvalidCredentialsError(TaskboardError):
    status_code = 401
    default_message = "Invalid credentials"


class InvalidTokenError(TaskboardError):
    status_code = 403
    default_message = "Invalid token"


class NotFoundError(TaskboardError):
    status_code = 404
    default_message = "Not found"


class RateLimitError(TaskboardError):
    status_code = 429
    default_message = "Too many requests from this IP, please try again later"


class InternalError(TaskboardError):
    pass


class UnexpectedError(TaskboardError):
    default_message = "Something went wrong!"
