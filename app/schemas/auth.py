"""Request/response schemas for auth endpoints."""

import re
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.user import UserRole, UserStatus
from app.schemas.common import CamelModel

EMAIL_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128
FULL_NAME_MIN_LEN = 2
FULL_NAME_MAX_LEN = 100

PASSWORD_SPECIAL_CHARS = "@$!%*?&#"
_PASSWORD_RULE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&#])")
_FULL_NAME_RULE = re.compile(r"^[a-zA-Z\s'-]+$")


def normalize_email(value: str) -> str:
    """Lower-case and trim; the stored form used for uniqueness and lookup."""
    normalized = value.strip().lower()
    if len(normalized) > EMAIL_MAX_LEN:
        raise ValueError(f"Email must be less than {EMAIL_MAX_LEN} characters")
    return normalized


def validate_password_strength(value: str) -> str:
    """Require 8-128 chars with lower, upper, digit and one of @$!%*?&#."""
    if not PASSWORD_MIN_LEN <= len(value) <= PASSWORD_MAX_LEN:
        raise ValueError(
            f"Password must be between {PASSWORD_MIN_LEN} and {PASSWORD_MAX_LEN} characters"
        )
    if not _PASSWORD_RULE.match(value):
        raise ValueError(
            "Password must contain at least one uppercase letter, one lowercase letter, "
            f"one number, and one special character ({PASSWORD_SPECIAL_CHARS})"
        )
    return value


def validate_full_name(value: str) -> str:
    name = value.strip()
    if not FULL_NAME_MIN_LEN <= len(name) <= FULL_NAME_MAX_LEN:
        raise ValueError(
            f"Full name must be between {FULL_NAME_MIN_LEN} and {FULL_NAME_MAX_LEN} characters"
        )
    if not _FULL_NAME_RULE.match(name):
        raise ValueError(
            "Full name can only contain letters, spaces, hyphens, and apostrophes"
        )
    return name


class TokenClaims(BaseModel):
    """Identity decoded from a verified access token."""

    subject_id: int
    role: UserRole
    token_version: int = 0


class UserPublic(CamelModel):
    """User as returned by the API. There is deliberately no password field."""

    id: int
    email: str
    full_name: str
    role: UserRole
    status: UserStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SignupRequest(CamelModel):
    """Body for POST /auth/signup."""

    email: EmailStr = Field(..., description="Login email; stored lower-cased")
    password: str = Field(..., description="8-128 chars, mixed case, digit and symbol")
    full_name: str = Field(..., description="Display name")

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return validate_password_strength(v)

    @field_validator("full_name")
    @classmethod
    def check_full_name(cls, v: str) -> str:
        return validate_full_name(v)


class LoginRequest(CamelModel):
    """Credentials for login. No strength rule: a wrong password is a 401, not a 400."""

    email: EmailStr = Field(..., description="Login email")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return normalize_email(v)


class AuthData(CamelModel):
    """Payload returned by signup and login."""

    token: str = Field(..., description="JWT access token; send as Authorization: Bearer <token>")
    user: UserPublic


class UserData(CamelModel):
    user: UserPublic
