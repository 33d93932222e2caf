"""Pydantic schemas for authentication."""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6


def _valid_email(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Email is required")
    if not EMAIL_PATTERN.match(v):
        raise ValueError("Please enter a valid email address")
    return v


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return _valid_email(v)


class SignupRequest(BaseModel):
    """New administrator account."""

    name: str = Field(..., min_length=2)
    email: str
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    confirm_password: str

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return _valid_email(v)

    @model_validator(mode="after")
    def passwords_match(self) -> "SignupRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self

    def to_payload(self) -> dict:
        return {"name": self.name, "email": self.email, "password": self.password}


class ForgotPasswordRequest(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return _valid_email(v)


class ResetPasswordRequest(BaseModel):
    """Reset token from the e-mail plus the new password."""

    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)

    def to_payload(self) -> dict:
        return {"token": self.token, "newPassword": self.new_password}


class UserProfile(BaseModel):
    """The logged-in administrator."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = Field(None, alias="_id")
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None


class AuthSession(BaseModel):
    """A login result: bearer token and profile."""

    token: str = Field(..., min_length=1)
    user: UserProfile = Field(default_factory=UserProfile)
