"""FastAPI dependency providers for services and token checks."""

from typing import Optional

from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from database import get_db
from models.user import Role, User
from services.account_service import AccountService
from services.email_service import EmailService
from services.errors import ForbiddenError, InvalidTokenError
from services.otp_store import OtpStore
from services.token_service import TokenService, TokenType
from services.user_repository import UserRepository


bearer_scheme = HTTPBearer(auto_error=False)


def get_token_service(request: Request) -> TokenService:
    """The application's single TokenService, built in ``create_app``."""
    return request.app.state.token_service


def get_email_service() -> EmailService:
    return EmailService()


def get_account_service(
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
    email_service: EmailService = Depends(get_email_service),
) -> AccountService:
    return AccountService(
        users=UserRepository(db),
        otps=OtpStore(db),
        tokens=tokens,
        email_service=email_service,
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer access token to a live user."""
    if credentials is None:
        raise InvalidTokenError("No authorization header provided")

    claims = tokens.validate(credentials.credentials, TokenType.ACCESS)

    user = UserRepository(db).get_by_user_id(claims["sub"])
    if user is None or claims.get("token_ver") != user.token_version:
        raise InvalidTokenError("Session has been invalidated. Please log in again")
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != Role.ADMIN:
        raise ForbiddenError()
    return current_user


def get_reset_claims(
    token: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_token_service),
) -> dict:
    """Validate the reset token from the ``token`` header and return its claims."""
    if not token:
        raise InvalidTokenError("No reset token header provided")
    return tokens.validate(token, TokenType.RESET)


def ensure_self_or_admin(current_user: User, user_id: str) -> None:
    """Only the account owner or an ADMIN may act on ``user_id``."""
    if current_user.user_id != user_id and current_user.role != Role.ADMIN:
        raise ForbiddenError()
