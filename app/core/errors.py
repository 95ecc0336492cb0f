"""Application error taxonomy. Each error maps 1:1 to an HTTP status in app.main."""


class AppError(Exception):
    """Base class for errors raised deliberately by the service layer."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InputValidationError(AppError):
    """Malformed or out-of-range input."""

    status_code = 400


class ConflictError(AppError):
    """Unique constraint would be violated (e.g. duplicate email)."""

    status_code = 400


class InvalidCredentialsError(AppError):
    """Email or password wrong. Deliberately does not say which."""

    status_code = 401

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message)


class AccountInactiveError(AppError):
    status_code = 401

    def __init__(
        self, message: str = "Account is inactive. Please contact an administrator."
    ) -> None:
        super().__init__(message)


class UnauthenticatedError(AppError):
    """Missing, invalid, or expired bearer token."""

    status_code = 401

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class ForbiddenError(AppError):
    status_code = 403

    def __init__(self, message: str = "Access denied. Insufficient permissions.") -> None:
        super().__init__(message)


class NotFoundError(AppError):
    status_code = 404
