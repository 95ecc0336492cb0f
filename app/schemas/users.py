"""Request/response schemas for user self-service and admin endpoints."""

from pydantic import EmailStr, Field, field_validator

from app.schemas.auth import (
    PASSWORD_MAX_LEN,
    UserPublic,
    normalize_email,
    validate_full_name,
    validate_password_strength,
)
from app.schemas.common import CamelModel


class ProfileUpdateRequest(CamelModel):
    """
    Body for PUT /users/profile.

    Only fullName and email are read; any role or status in the body is ignored.
    """

    full_name: str | None = Field(default=None, description="New display name")
    email: EmailStr | None = Field(default=None, description="New login email")

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str | None) -> str | None:
        return normalize_email(v) if v is not None else None

    @field_validator("full_name")
    @classmethod
    def check_full_name(cls, v: str | None) -> str | None:
        return validate_full_name(v) if v is not None else None


class ChangePasswordRequest(CamelModel):
    """Body for PUT /users/change-password."""

    current_password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)
    new_password: str = Field(..., description="Same strength rules as signup")

    @field_validator("new_password")
    @classmethod
    def check_new_password(cls, v: str) -> str:
        return validate_password_strength(v)


class PaginationMeta(CamelModel):
    current_page: int
    limit: int
    total_pages: int
    total_users: int
    has_next_page: bool
    has_prev_page: bool


class UsersListData(CamelModel):
    """Payload for GET /users (admin only)."""

    users: list[UserPublic]
    pagination: PaginationMeta
