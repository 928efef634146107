"""Password hashing."""

import bcrypt

from config import BCRYPT_ROUNDS

# bcrypt ignores input past 72 bytes, and newer releases refuse it outright
_BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a password with a fresh salt. Returns the 60 character bcrypt string."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """
    Check a candidate password against a stored hash.

    A mismatch is an ordinary outcome, so this returns False rather than
    raising, including when the stored hash is malformed.
    """
    try:
        return bcrypt.checkpw(_password_bytes(password), hashed_password.encode("utf-8"))
    except (ValueError, AttributeError):
        return False
