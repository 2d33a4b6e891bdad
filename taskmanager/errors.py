class AppError(Exception):
    """Base for failures that map onto an HTTP status and a `{message}` body."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class ConflictError(AppError):
    status_code = 400
    default_message = "User already exists"


class InvalidCredentialsError(AppError):
    # same text for unknown email and wrong password
    status_code = 400
    default_message = "Invalid credentials"


class MissingTokenError(AppError):
    status_code = 401
    default_message = "Access token required"


class InvalidTokenError(AppError):
    status_code = 401
    default_message = "Invalid token"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Task not found"


class InternalError(AppError):
    status_code = 500
    default_message = "Server error"
