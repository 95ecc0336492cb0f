"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthData,
    LoginRequest,
    SignupRequest,
    TokenClaims,
    UserData,
    UserPublic,
)
from app.schemas.common import ApiResponse, CamelModel, ErrorResponse
from app.schemas.health import HealthResponse
from app.schemas.users import (
    ChangePasswordRequest,
    PaginationMeta,
    ProfileUpdateRequest,
    UsersListData,
)

__all__ = [
    "ApiResponse",
    "AuthData",
    "CamelModel",
    "ChangePasswordRequest",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "PaginationMeta",
    "ProfileUpdateRequest",
    "SignupRequest",
    "TokenClaims",
    "UserData",
    "UserPublic",
    "UsersListData",
]
