"""Signup, login and current-user lookup on top of the users table."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import (
    AccountInactiveError,
    ConflictError,
    InvalidCredentialsError,
    UnauthenticatedError,
)
from app.core.security import (
    burn_password_check,
    create_access_token,
    hash_password,
    verify_password,
)
from app.models.user import User, UserRole, UserStatus
from app.schemas.auth import TokenClaims, normalize_email

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "User with this email already exists"


class AuthResult(NamedTuple):
    token: str
    user: User


def find_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def issue_token_for(user: User, settings: Settings) -> str:
    return create_access_token(
        user.id,
        UserRole(user.role),
        settings,
        token_version=user.token_version or 0,
    )


def signup(
    db: Session,
    settings: Settings,
    email: str,
    password: str,
    full_name: str,
) -> AuthResult:
    """
    Create an active 'user' account and return it with a fresh token.

    The existence check is a fast path for a friendly error; the unique index on
    email is what actually prevents two concurrent signups from both landing.
    """
    email = normalize_email(email)
    if find_user_by_email(db, email) is not None:
        raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

    user = User(
        email=email,
        password_hash=hash_password(password, rounds=settings.BCRYPT_ROUNDS),
        full_name=full_name,
        role=UserRole.USER.value,
        status=UserStatus.ACTIVE.value,
        token_version=0,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(DUPLICATE_EMAIL_MESSAGE) from e
    db.refresh(user)

    logger.info("User signed up: user_id=%s", user.id)
    return AuthResult(token=issue_token_for(user, settings), user=user)


def login(db: Session, settings: Settings, email: str, password: str) -> AuthResult:
    """
    Check credentials and return a token carrying the stored role.

    Unknown email and wrong password produce the same error. Inactive accounts
    are refused before the password is checked.
    """
    user = find_user_by_email(db, email)
    if user is None:
        burn_password_check(password, rounds=settings.BCRYPT_ROUNDS)
        logger.warning("Login failed: unknown email")
        raise InvalidCredentialsError()
    if user.status != UserStatus.ACTIVE.value:
        logger.warning("Login refused for inactive account: user_id=%s", user.id)
        raise AccountInactiveError()
    if not verify_password(password, user.password_hash):
        logger.warning("Login failed: wrong password for user_id=%s", user.id)
        raise InvalidCredentialsError()

    logger.info("User logged in: user_id=%s", user.id)
    return AuthResult(token=issue_token_for(user, settings), user=user)


def get_current_user(db: Session, claims: TokenClaims) -> User:
    """Re-fetch the live row for the token's subject, so role/status changes show up."""
    user = db.get(User, claims.subject_id)
    if user is None:
        raise UnauthenticatedError("User not found")
    return user


def ensure_token_current(db: Session, claims: TokenClaims) -> None:
    """Reject tokens minted before the user's last password change or deactivation."""
    user = db.get(User, claims.subject_id)
    if user is None or (user.token_version or 0) != claims.token_version:
        raise UnauthenticatedError("Token has been revoked")
