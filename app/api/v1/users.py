"""User self-service (profile, password) and admin (list, activate, deactivate) routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_claims, require_admin
from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.models.user import User
from app.schemas.auth import TokenClaims, UserData, UserPublic
from app.schemas.common import ApiResponse
from app.schemas.users import (
    ChangePasswordRequest,
    PaginationMeta,
    ProfileUpdateRequest,
    UsersListData,
)
from app.services import users as users_service

router = APIRouter()


def _user_response(user: User, message: str | None = None) -> ApiResponse[UserData]:
    return ApiResponse(message=message, data=UserData(user=UserPublic.model_validate(user)))


@router.get("", response_model=ApiResponse[UsersListData], response_model_exclude_none=True)
def list_users(
    _admin: Annotated[TokenClaims, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[int, Query(description="1-based page number; values below 1 are treated as 1")] = 1,
    limit: Annotated[int, Query(description="Page size, clamped to 1-100")] = users_service.DEFAULT_PAGE_SIZE,
) -> ApiResponse[UsersListData]:
    """List users ordered by creation time with pagination metadata (admin only)."""
    result = users_service.list_users(db, page=page, limit=limit)
    return ApiResponse(
        data=UsersListData(
            users=[UserPublic.model_validate(u) for u in result.users],
            pagination=PaginationMeta(
                current_page=result.page,
                limit=result.limit,
                total_pages=result.total_pages,
                total_users=result.total,
                has_next_page=result.has_next_page,
                has_prev_page=result.has_prev_page,
            ),
        )
    )


@router.get("/profile", response_model=ApiResponse[UserData], response_model_exclude_none=True)
def get_profile(
    claims: Annotated[TokenClaims, Depends(get_current_claims)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[UserData]:
    """Return the caller's own profile."""
    return _user_response(users_service.get_user(db, claims.subject_id))


@router.put("/profile", response_model=ApiResponse[UserData], response_model_exclude_none=True)
def update_profile(
    body: ProfileUpdateRequest,
    claims: Annotated[TokenClaims, Depends(get_current_claims)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[UserData]:
    """Update the caller's fullName and/or email. Role and status are never read from the body."""
    user = users_service.update_profile(
        db,
        claims.subject_id,
        full_name=body.full_name,
        email=body.email,
    )
    return _user_response(user, "Profile updated successfully")


@router.put("/change-password", response_model=ApiResponse[None], response_model_exclude_none=True)
def change_password(
    body: ChangePasswordRequest,
    claims: Annotated[TokenClaims, Depends(get_current_claims)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ApiResponse[None]:
    users_service.change_password(
        db,
        claims.subject_id,
        body.current_password,
        body.new_password,
        rounds=settings.BCRYPT_ROUNDS,
    )
    return ApiResponse(message="Password changed successfully")


@router.put("/{user_id}/activate", response_model=ApiResponse[UserData], response_model_exclude_none=True)
def activate_user(
    user_id: int,
    _admin: Annotated[TokenClaims, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[UserData]:
    """Set a user's status to active (admin only, idempotent)."""
    return _user_response(users_service.activate_user(db, user_id), "User activated successfully")


@router.put("/{user_id}/deactivate", response_model=ApiResponse[UserData], response_model_exclude_none=True)
def deactivate_user(
    user_id: int,
    _admin: Annotated[TokenClaims, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[UserData]:
    """Set a user's status to inactive (admin only, idempotent)."""
    return _user_response(users_service.deactivate_user(db, user_id), "User deactivated successfully")
