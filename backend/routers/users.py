"""User management endpoints. Every route requires a bearer access token."""

from fastapi import APIRouter, Depends, Query, Response

from config import COOKIE_DOMAIN, COOKIE_NAME, COOKIE_SECURE
from dependencies import (
    ensure_self_or_admin,
    get_account_service,
    get_current_user,
    require_admin,
)
from models.user import Role, User
from schemas.auth import MessageResponse
from schemas.user import UpdateUserRequest, UserListResponse, UserResponse
from services.account_service import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, AccountService
from services.errors import ForbiddenError


router = APIRouter()


@router.get("/getuser/{user_id}", response_model=UserResponse)
def get_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    account: AccountService = Depends(get_account_service),
):
    """Fetch one account. Users may read their own record; admins any record."""
    ensure_self_or_admin(current_user, user_id)
    return account.get_user(user_id)


@router.get("/getall", response_model=UserListResponse)
def get_all(
    page: int = Query(DEFAULT_PAGE),
    page_size: int = Query(DEFAULT_PAGE_SIZE, alias="recordPerPage"),
    admin: User = Depends(require_admin),
    account: AccountService = Depends(get_account_service),
):
    """List accounts, oldest first. Admin only.

    Values below 1 for ``page`` or ``recordPerPage`` fall back to 1 and 10.
    """
    users, total, page, page_size = account.get_all(page, page_size)
    return UserListResponse(
        total_count=total,
        page=page,
        page_size=page_size,
        users=[UserResponse.model_validate(u) for u in users],
    )


@router.patch("/update_user", response_model=UserResponse)
def update_user(
    payload: UpdateUserRequest,
    current_user: User = Depends(get_current_user),
    account: AccountService = Depends(get_account_service),
):
    """Change the username of the account identified by ``email``."""
    if current_user.role != Role.ADMIN and payload.email != current_user.email:
        raise ForbiddenError()
    return account.update_user(payload.email, payload.username)


@router.post("/delete/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    account: AccountService = Depends(get_account_service),
):
    ensure_self_or_admin(current_user, user_id)
    account.delete_user(user_id)
    return MessageResponse(message="account has been successfully deleted")


@router.post("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    current_user: User = Depends(get_current_user),
):
    """
    Clear the refresh token cookie.

    Tokens are stateless: anything already issued stays valid until it
    expires. Resetting the password is what revokes outstanding sessions.
    """
    response.delete_cookie(
        key=COOKIE_NAME,
        path="/",
        domain=COOKIE_DOMAIN,
        secure=COOKIE_SECURE,
        httponly=True,
    )
    return MessageResponse(message="logged out successfully")
