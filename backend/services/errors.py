"""Failures raised by the account services.

Each error carries a ``kind`` that the HTTP layer maps to a status code,
so services never deal in HTTP concepts.
"""


class AccountError(Exception):
    """Base class for every expected account-service failure."""

    kind = "error"
    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ValidationFailedError(AccountError):
    kind = "validation"
    default_message = "Invalid input"


class ConflictError(AccountError):
    kind = "conflict"
    default_message = "Email already exists"


class NotFoundError(AccountError):
    kind = "not_found"
    default_message = "User not found"


class UnauthorizedError(AccountError):
    kind = "unauthorized"
    default_message = "Unauthorized"


class InvalidCredentialsError(UnauthorizedError):
    default_message = "Password is incorrect"


class InvalidTokenError(UnauthorizedError):
    default_message = "Token is invalid"


class InvalidOtpError(UnauthorizedError):
    default_message = "Invalid code"


class ForbiddenError(UnauthorizedError):
    """Authenticated, but the role or ownership check failed."""

    default_message = "Unauthorized to access this resource"


class ExpiredError(AccountError):
    kind = "expired"
    default_message = "Expired"


class TokenExpiredError(ExpiredError):
    default_message = "Token is expired"


class OtpExpiredError(ExpiredError):
    default_message = "Code expired"


class ServerMisconfigurationError(AccountError):
    kind = "server_misconfiguration"
    default_message = "Server misconfiguration"


class DependencyFailureError(AccountError):
    kind = "dependency_failure"
    default_message = "Service temporarily unavailable. Please try again later."
