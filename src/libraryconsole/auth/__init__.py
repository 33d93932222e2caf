"""Authentication schemas and the local session store."""

from .schemas import (
    AuthSession,
    ForgotPasswordRequest,
    LoginRequest,
    ResetPasswordRequest,
    SignupRequest,
    UserProfile,
)
from .session import SessionStore

__all__ = [
    "AuthSession",
    "ForgotPasswordRequest",
    "LoginRequest",
    "ResetPasswordRequest",
    "SignupRequest",
    "UserProfile",
    "SessionStore",
]
