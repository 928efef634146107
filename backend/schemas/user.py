"""Pydantic schemas for user records."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from models.user import Role


class UserResponse(BaseModel):
    """Public view of a user; never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    username: str
    email: EmailStr
    role: Role
    created_at: datetime
    updated_at: datetime


class UserListResponse(BaseModel):
    """Response for /user/getall."""

    total_count: int
    page: int
    page_size: int
    users: list[UserResponse]


class UpdateUserRequest(BaseModel):
    email: EmailStr
    username: str = Field(min_length=1, max_length=24)
