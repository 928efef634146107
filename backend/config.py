import os

# JWT Configuration
# In production, set SECRET_KEY environment variable to a secure random value
ENV = os.getenv("ENV", "development").lower()

_DEFAULT_SECRET_KEY = "dev-secret-key-change-in-production-abc123xyz789"
SECRET_KEY = os.getenv("SECRET_KEY", _DEFAULT_SECRET_KEY)  # Default for development only
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "7"))
REFRESH_TOKEN_EXPIRE_DAYS = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7"))
RESET_TOKEN_EXPIRE_MINUTES = int(os.getenv("RESET_TOKEN_EXPIRE_MINUTES", "5"))

# One-time passcodes
OTP_EXPIRE_MINUTES = int(os.getenv("OTP_EXPIRE_MINUTES", "5"))
OTP_LENGTH = 6

# Password hashing
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))
_MIN_PRODUCTION_BCRYPT_ROUNDS = 12

# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./accounts.db")

# Upper bound for any single store or mail round-trip
REQUEST_TIMEOUT_SECONDS = int(os.getenv("REQUEST_TIMEOUT_SECONDS", "100"))

# Refresh token cookie
COOKIE_NAME = "refresh_token"
COOKIE_DOMAIN = os.getenv("COOKIE_DOMAIN") or None
COOKIE_SECURE = os.getenv("COOKIE_SECURE", "true").lower() != "false"

RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() != "false"

# Email Configuration (SendGrid)
SENDGRID_API_KEY = os.getenv("SENDGRID_API_KEY")
SENDGRID_FROM_EMAIL = os.getenv("SENDGRID_FROM_EMAIL")
APP_NAME = os.getenv("APP_NAME", "Accounts")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def validate_config() -> None:
    """
    Validate required configuration.

    This is intentionally strict only in production so that local development
    and tests can run with minimal environment setup.
    """
    if ENV != "production":
        return

    errors: list[str] = []

    if not SECRET_KEY or SECRET_KEY == _DEFAULT_SECRET_KEY:
        errors.append("SECRET_KEY must be set to a secure value in production")

    if not SENDGRID_API_KEY:
        errors.append("SENDGRID_API_KEY must be set in production")

    if not SENDGRID_FROM_EMAIL:
        errors.append("SENDGRID_FROM_EMAIL must be set in production")

    if BCRYPT_ROUNDS < _MIN_PRODUCTION_BCRYPT_ROUNDS:
        errors.append(
            f"BCRYPT_ROUNDS must be at least {_MIN_PRODUCTION_BCRYPT_ROUNDS} in production"
        )

    if not COOKIE_SECURE:
        errors.append("COOKIE_SECURE cannot be disabled in production")

    if errors:
        raise RuntimeError("Invalid configuration:\n- " + "\n- ".join(errors))
