# Schemas package

from .user import (
    UserResponse,
    UserListResponse,
    UpdateUserRequest,
)

from .auth import (
    SignupRequest,
    LoginRequest,
    LoginResponse,
    RefreshResponse,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    VerifyOtpRequest,
    VerifyOtpResponse,
    ResetPasswordRequest,
    MessageResponse,
)
