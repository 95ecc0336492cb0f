"""Signup/login routes and auth dependencies (get_current_claims, require_role, require_admin)."""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.errors import UnauthenticatedError
from app.core.security import TokenError, authorize_role, decode_access_token
from app.models.user import UserRole
from app.schemas.auth import (
    AuthData,
    LoginRequest,
    SignupRequest,
    TokenClaims,
    UserData,
    UserPublic,
)
from app.schemas.common import ApiResponse
from app.services import auth as auth_service

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_current_claims(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenClaims:
    """Dependency: require a valid Bearer JWT and return its claims. Raises 401 otherwise."""
    if credentials is None:
        raise UnauthenticatedError("Not authenticated. No token provided.")
    try:
        claims = decode_access_token(credentials.credentials, settings)
    except TokenError as e:
        logger.debug("Token rejected: kind=%s", e.kind.value)
        raise UnauthenticatedError("Invalid or expired token") from e
    if settings.TOKEN_REVOCATION_ENABLED:
        auth_service.ensure_token_current(db, claims)
    request.state.claims = claims
    return claims


def require_role(expected: UserRole) -> Callable[..., TokenClaims]:
    """Build a dependency that authenticates first, then requires the given role (403)."""

    def dependency(
        claims: Annotated[TokenClaims, Depends(get_current_claims)],
    ) -> TokenClaims:
        authorize_role(claims, expected)
        return claims

    dependency.__name__ = f"require_{expected.value}"
    return dependency


require_admin = require_role(UserRole.ADMIN)


@router.post(
    "/signup",
    response_model=ApiResponse[AuthData],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def signup(
    body: SignupRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ApiResponse[AuthData]:
    """Create an account with role 'user' and return a JWT plus the new user."""
    result = auth_service.signup(db, settings, body.email, body.password, body.full_name)
    return ApiResponse(
        message="User registered successfully",
        data=AuthData(token=result.token, user=UserPublic.model_validate(result.user)),
    )


@router.post("/login", response_model=ApiResponse[AuthData], response_model_exclude_none=True)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ApiResponse[AuthData]:
    """
    Authenticate with email and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <token>
    """
    result = auth_service.login(db, settings, body.email, body.password)
    return ApiResponse(
        message="Login successful",
        data=AuthData(token=result.token, user=UserPublic.model_validate(result.user)),
    )


@router.get("/me", response_model=ApiResponse[UserData], response_model_exclude_none=True)
def me(
    claims: Annotated[TokenClaims, Depends(get_current_claims)],
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[UserData]:
    """Return the live user record for the token's subject."""
    user = auth_service.get_current_user(db, claims)
    return ApiResponse(data=UserData(user=UserPublic.model_validate(user)))


@router.post("/logout", response_model=ApiResponse[None], response_model_exclude_none=True)
def logout(
    _claims: Annotated[TokenClaims, Depends(get_current_claims)],
) -> ApiResponse[None]:
    """Tokens are stateless; the client discards its token. Kept for API symmetry."""
    return ApiResponse(message="Logged out successfully")
