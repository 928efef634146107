"""Signup, login, session refresh and password reset endpoints."""

from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Request, Response, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from config import COOKIE_DOMAIN, COOKIE_NAME, COOKIE_SECURE, RATE_LIMIT_ENABLED
from dependencies import get_account_service, get_reset_claims
from schemas.auth import (
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RefreshResponse,
    ResetPasswordRequest,
    SignupRequest,
    VerifyOtpRequest,
    VerifyOtpResponse,
)
from schemas.user import UserResponse
from services.account_service import AccountService
from services.errors import ForbiddenError, InvalidTokenError
from services.token_service import TokenService


limiter = Limiter(key_func=get_remote_address, enabled=RATE_LIMIT_ENABLED)
router = APIRouter()


def set_refresh_cookie(response: Response, refresh_token: str, max_age: int) -> None:
    """Deliver the refresh token as an HttpOnly cookie; it never appears in a body."""
    response.set_cookie(
        key=COOKIE_NAME,
        value=refresh_token,
        max_age=max_age,
        path="/",
        domain=COOKIE_DOMAIN,
        secure=COOKIE_SECURE,
        httponly=True,
        samesite="lax",
    )


def _refresh_max_age(account: AccountService) -> int:
    return int(account.tokens.refresh_ttl.total_seconds())


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def signup(
    payload: SignupRequest,
    account: AccountService = Depends(get_account_service),
):
    """Create an account. Fails with 409 if the email is already registered."""
    return account.signup(payload)


@router.post("/login", response_model=LoginResponse)
@limiter.limit("10/minute")
def login(
    request: Request,
    response: Response,
    payload: LoginRequest,
    account: AccountService = Depends(get_account_service),
):
    """
    Authenticate with email and password.

    The access token is returned in the body for bearer use; the refresh
    token is set as the ``refresh_token`` cookie.
    """
    user, access_token, refresh_token = account.login(payload.email, payload.password)
    set_refresh_cookie(response, refresh_token, _refresh_max_age(account))

    return LoginResponse(
        message="login successful",
        token=access_token,
        user=UserResponse.model_validate(user),
    )


@router.post("/refresh", response_model=RefreshResponse)
def refresh(
    response: Response,
    refresh_token: Optional[str] = Cookie(None),
    account: AccountService = Depends(get_account_service),
):
    """Rotate the session using the refresh token cookie."""
    if not refresh_token:
        raise InvalidTokenError("No refresh token")

    _, access_token, new_refresh_token = account.refresh(refresh_token)
    set_refresh_cookie(response, new_refresh_token, _refresh_max_age(account))

    return RefreshResponse(message="Tokens are refreshed", access_token=access_token)


@router.post("/forgotpassword", response_model=ForgotPasswordResponse)
@limiter.limit("5/minute")
def forgot_password(
    request: Request,
    payload: ForgotPasswordRequest,
    account: AccountService = Depends(get_account_service),
):
    """Email a 6 digit reset code to a registered address."""
    account.forgot_password(payload.email)
    return ForgotPasswordResponse(
        message="Password reset email sent successfully",
        email=payload.email,
    )


@router.post("/verify_otp", response_model=VerifyOtpResponse)
@limiter.limit("10/minute")
def verify_otp(
    request: Request,
    payload: VerifyOtpRequest,
    account: AccountService = Depends(get_account_service),
):
    """Exchange a valid reset code for a short-lived reset token."""
    reset_token = account.verify_otp(payload.email, payload.otp)
    return VerifyOtpResponse(message="OTP verified successfully", reset_token=reset_token)


@router.post("/password/reset", response_model=MessageResponse)
def reset_password(
    payload: ResetPasswordRequest,
    reset_claims: dict = Depends(get_reset_claims),
    account: AccountService = Depends(get_account_service),
):
    """
    Set a new password.

    Requires a reset token in the ``token`` header whose email matches the
    body. Each reset token changes the password at most once.
    """
    if payload.email != reset_claims["email"]:
        raise ForbiddenError()

    account.reset_password(
        payload.email,
        payload.new_password,
        token_issued_at=TokenService.issued_at(reset_claims),
    )
    return MessageResponse(message="Password updated successfully")
