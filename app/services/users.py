"""User administration: paginated listing, activation, profile and password changes."""

import logging
import math
from typing import NamedTuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, InvalidCredentialsError, NotFoundError
from app.core.security import BCRYPT_ROUNDS, hash_password, verify_password
from app.models.user import MAX_USER_ID, User, UserStatus
from app.schemas.auth import normalize_email
from app.services.auth import DUPLICATE_EMAIL_MESSAGE

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class UserPage(NamedTuple):
    users: list[User]
    total: int
    page: int
    limit: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool


def clamp_pagination(page: int | None, limit: int | None) -> tuple[int, int]:
    """Clamp page to >= 1 and limit to [1, MAX_PAGE_SIZE]."""
    page = max(1, page or 1)
    if limit is None:
        limit = DEFAULT_PAGE_SIZE
    limit = min(MAX_PAGE_SIZE, max(1, limit))
    return page, limit


def list_users(db: Session, page: int | None = 1, limit: int | None = DEFAULT_PAGE_SIZE) -> UserPage:
    """Return one page of users ordered by creation time (id breaks ties)."""
    page, limit = clamp_pagination(page, limit)
    total = db.query(User).count()
    total_pages = math.ceil(total / limit) if total else 0
    # Past the last page the result is empty; cap so the offset stays a store-sized integer.
    page = min(page, total_pages + 1)
    users = (
        db.query(User)
        .order_by(User.created_at.asc(), User.id.asc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return UserPage(
        users=users,
        total=total,
        page=page,
        limit=limit,
        total_pages=total_pages,
        has_next_page=page < total_pages,
        has_prev_page=page > 1,
    )


def get_user(db: Session, user_id: int) -> User:
    if not 1 <= user_id <= MAX_USER_ID:
        raise NotFoundError("User not found")
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def _set_status(db: Session, user_id: int, status: UserStatus) -> User:
    user = get_user(db, user_id)
    if user.status == status.value:
        return user
    user.status = status.value
    if status is UserStatus.INACTIVE:
        user.token_version = (user.token_version or 0) + 1
    db.commit()
    db.refresh(user)
    logger.info("User status changed: user_id=%s status=%s", user.id, status.value)
    return user


def activate_user(db: Session, user_id: int) -> User:
    """Mark the account active. Idempotent; NotFoundError for unknown ids."""
    return _set_status(db, user_id, UserStatus.ACTIVE)


def deactivate_user(db: Session, user_id: int) -> User:
    """Mark the account inactive. Idempotent; NotFoundError for unknown ids."""
    return _set_status(db, user_id, UserStatus.INACTIVE)


def update_profile(
    db: Session,
    user_id: int,
    full_name: str | None = None,
    email: str | None = None,
) -> User:
    """
    Update display name and/or email. Role and status are not parameters here,
    so no caller can change them through this path.
    """
    user = get_user(db, user_id)
    if full_name is not None:
        user.full_name = full_name
    if email is not None:
        email = normalize_email(email)
        if email != user.email:
            taken = (
                db.query(User.id)
                .filter(User.email == email, User.id != user.id)
                .first()
            )
            if taken is not None:
                db.rollback()
                raise ConflictError(DUPLICATE_EMAIL_MESSAGE)
            user.email = email
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(DUPLICATE_EMAIL_MESSAGE) from e
    db.refresh(user)
    logger.info("Profile updated: user_id=%s", user.id)
    return user


def change_password(
    db: Session,
    user_id: int,
    current_password: str,
    new_password: str,
    rounds: int = BCRYPT_ROUNDS,
) -> User:
    """Replace the password hash after re-checking the current password."""
    user = get_user(db, user_id)
    if not verify_password(current_password, user.password_hash):
        logger.warning("Password change refused: wrong current password for user_id=%s", user.id)
        raise InvalidCredentialsError("Current password is incorrect")
    user.password_hash = hash_password(new_password, rounds=rounds)
    user.token_version = (user.token_version or 0) + 1
    db.commit()
    db.refresh(user)
    logger.info("Password changed: user_id=%s", user.id)
    return user
