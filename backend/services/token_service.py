"""Signed session and reset tokens.

Three token kinds share one secret and algorithm:

- ``access``: full identity claims, lives minutes, authorizes API calls.
- ``refresh``: subject id only, lives days, used solely to mint new pairs.
- ``reset``: email only, lives minutes, authorizes one password change.

Every token carries a ``type`` claim and ``validate`` always checks it, so a
reset token can never stand in for a session token or the other way round.
"""

import enum
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from models.user import Role, User
from services.errors import InvalidTokenError, TokenExpiredError


class TokenType(str, enum.Enum):
    ACCESS = "access"
    REFRESH = "refresh"
    RESET = "reset"


class TokenService:
    """Issues and validates tokens. Holds no state beyond the signing settings."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(minutes=7),
        refresh_ttl: timedelta = timedelta(days=7),
        reset_ttl: timedelta = timedelta(minutes=5),
    ):
        if not secret_key:
            raise ValueError("secret_key is required")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.reset_ttl = reset_ttl

    def _encode(self, claims: dict, token_type: TokenType, ttl: timedelta) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            **claims,
            "type": token_type.value,
            "iat": now,
            "exp": now + ttl,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def issue_session_pair(self, user: User) -> tuple[str, str]:
        """Create an access token and a refresh token for a user."""
        access_token = self._encode(
            {
                "sub": user.user_id,
                "email": user.email,
                "username": user.username,
                "role": Role(user.role).value,
                "token_ver": user.token_version,
            },
            TokenType.ACCESS,
            self.access_ttl,
        )
        refresh_token = self._encode(
            {"sub": user.user_id, "token_ver": user.token_version},
            TokenType.REFRESH,
            self.refresh_ttl,
        )
        return access_token, refresh_token

    def issue_reset_token(self, email: str) -> str:
        """Create a reset token carrying only the email claim."""
        return self._encode({"email": email}, TokenType.RESET, self.reset_ttl)

    def validate(self, token: str, expected_type: TokenType) -> dict:
        """
        Verify signature, expiry and kind, and return the decoded claims.

        Raises:
            TokenExpiredError: the token is past its expiry.
            InvalidTokenError: bad signature, malformed, or the wrong kind.
        """
        if not token:
            raise InvalidTokenError("No token provided")

        try:
            claims = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except JWTError:
            raise InvalidTokenError()

        if claims.get("type") != expected_type.value:
            raise InvalidTokenError("Invalid token type")

        required = ("email", "iat") if expected_type is TokenType.RESET else ("sub",)
        if not all(claims.get(name) for name in required):
            raise InvalidTokenError()

        return claims

    @staticmethod
    def issued_at(claims: dict) -> datetime:
        """The ``iat`` claim as a naive UTC datetime, comparable with stored timestamps."""
        return datetime.fromtimestamp(claims["iat"], timezone.utc).replace(tzinfo=None)

    def refresh(
        self,
        refresh_token: str,
        load_user: Callable[[str], Optional[User]],
    ) -> tuple[User, str, str]:
        """
        Rotate a session: validate a refresh token and issue a new pair.

        The new pair is bound to the user's current record, so username,
        email or role changes since the last login are picked up.
        """
        claims = self.validate(refresh_token, TokenType.REFRESH)

        user = load_user(claims["sub"])
        if user is None:
            raise InvalidTokenError("User not found")
        if claims.get("token_ver") != user.token_version:
            raise InvalidTokenError("Session has been invalidated. Please log in again")

        access_token, new_refresh_token = self.issue_session_pair(user)
        return user, access_token, new_refresh_token
