"""Pydantic schemas for signup, login and the password reset flow."""

from pydantic import BaseModel, EmailStr, Field

from models.user import Role
from schemas.user import UserResponse

# bcrypt only reads the first 72 bytes of a password
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 72


class SignupRequest(BaseModel):
    """Payload for creating an account."""

    username: str = Field(min_length=1, max_length=24)
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)
    role: Role


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class LoginResponse(BaseModel):
    message: str
    token: str
    user: UserResponse


class RefreshResponse(BaseModel):
    message: str
    access_token: str


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ForgotPasswordResponse(BaseModel):
    message: str
    email: EmailStr


class VerifyOtpRequest(BaseModel):
    email: EmailStr
    otp: str = Field(pattern=r"^\d{6}$")


class VerifyOtpResponse(BaseModel):
    message: str
    reset_token: str


class ResetPasswordRequest(BaseModel):
    """New password for the email named in the reset token."""

    email: EmailStr
    new_password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)


class MessageResponse(BaseModel):
    message: str
