"""Model package exports for database initialization."""

from models.user import Role, User
from models.otp import OtpCode

__all__ = [
    "Role",
    "User",
    "OtpCode",
]
