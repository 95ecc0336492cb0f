"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.user import MAX_USER_ID, User, UserRole, UserStatus

__all__ = ["Base", "MAX_USER_ID", "User", "UserRole", "UserStatus"]
