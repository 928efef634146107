"""Account lifecycle: signup, login, session refresh and password reset."""

import logging
from datetime import datetime

from models.user import User
from schemas.auth import SignupRequest
from services.auth import hash_password, verify_password
from services.email_service import EmailService
from services.errors import (
    ConflictError,
    DependencyFailureError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    ServerMisconfigurationError,
    ValidationFailedError,
)
from services.otp_store import OtpStore
from services.token_service import TokenService
from services.user_repository import UserRepository


logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10


class AccountService:
    """Orchestrates the repository, token service, OTP store and mailer."""

    def __init__(
        self,
        users: UserRepository,
        otps: OtpStore,
        tokens: TokenService,
        email_service: EmailService,
    ):
        self.users = users
        self.otps = otps
        self.tokens = tokens
        self.email_service = email_service

    def signup(self, payload: SignupRequest) -> User:
        if self.users.email_exists(payload.email):
            raise ConflictError()

        user = User(
            username=payload.username,
            email=payload.email,
            hashed_password=hash_password(payload.password),
            role=payload.role,
        )
        user = self.users.create(user)
        logger.info("Created account %s", user.user_id)
        return user

    def login(self, email: str, password: str) -> tuple[User, str, str]:
        """
        Authenticate and open a session.

        Returns the user with a fresh access/refresh pair. No tokens are
        issued unless the password verifies.
        """
        user = self.users.get_by_email(email)
        if user is None:
            raise NotFoundError("Email is not found")

        if not verify_password(password, user.hashed_password):
            logger.warning("Failed login for account %s", user.user_id)
            raise InvalidCredentialsError()

        access_token, refresh_token = self.tokens.issue_session_pair(user)
        logger.info("Login for account %s", user.user_id)
        return user, access_token, refresh_token

    def refresh(self, refresh_token: str) -> tuple[User, str, str]:
        user, access_token, new_refresh_token = self.tokens.refresh(
            refresh_token, self.users.get_by_user_id
        )
        self.users.save(user)
        logger.info("Refreshed session for account %s", user.user_id)
        return user, access_token, new_refresh_token

    def forgot_password(self, email: str) -> None:
        """Issue a passcode for ``email`` and mail it."""
        if not self.users.email_exists(email):
            raise NotFoundError("Email doesn't exist")

        missing = self.email_service.missing_settings()
        if missing:
            logger.error("Cannot send reset code, missing: %s", ", ".join(missing))
            raise ServerMisconfigurationError(
                f"Server misconfiguration: {' and '.join(missing)} not set"
            )

        code = self.otps.issue(email)
        if not self.email_service.send_otp(to_email=email, code=code):
            raise DependencyFailureError("Unable to send OTP. Please try again later")

    def verify_otp(self, email: str, code: str) -> str:
        """Consume a passcode and return a reset token scoped to ``email``."""
        self.otps.verify(email, code)
        return self.tokens.issue_reset_token(email)

    def reset_password(self, email: str, new_password: str, token_issued_at: datetime) -> None:
        """
        Store a new password.

        The caller must already have matched a valid reset token to ``email``;
        ``token_issued_at`` is that token's issue time. A reset token is good
        for one change only: once the password changes after it was issued,
        it is rejected. Bumping ``token_version`` ends every session opened
        with the old password.
        """
        user = self.users.get_by_email(email)
        if user is None:
            raise NotFoundError()
        user_id = user.user_id

        changed = self.users.change_password(email, hash_password(new_password), token_issued_at)
        if changed != 1:
            logger.warning("Rejected a reused reset token for account %s", user_id)
            raise InvalidTokenError("Reset token has already been used")
        logger.info("Password reset for account %s", user_id)

    def get_all(self, page: int, page_size: int) -> tuple[list[User], int, int, int]:
        """Return (users, total, page, page_size) with out-of-range paging replaced by defaults."""
        if page < 1:
            page = DEFAULT_PAGE
        if page_size < 1:
            page_size = DEFAULT_PAGE_SIZE

        users, total = self.users.list_page(offset=(page - 1) * page_size, limit=page_size)
        return users, total, page, page_size

    def get_user(self, user_id: str) -> User:
        user = self.users.get_by_user_id(user_id)
        if user is None:
            raise NotFoundError()
        return user

    def get_by_email(self, email: str) -> User:
        user = self.users.get_by_email(email)
        if user is None:
            raise NotFoundError()
        return user

    def update_user(self, email: str, username: str) -> User:
        if not email:
            raise ValidationFailedError("Email is required")

        user = self.get_by_email(email)
        user.username = username
        return self.users.save(user)

    def delete_user(self, user_id: str) -> None:
        if self.users.delete_by_user_id(user_id) != 1:
            raise NotFoundError("No matched account found for deletion")
        logger.info("Deleted account %s", user_id)
