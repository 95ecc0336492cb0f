"""ORM model for application users (auth and RBAC)."""

from enum import Enum

from sqlalchemy import Column, DateTime, Integer, String, func

from app.models.base import Base


# Largest id the INTEGER primary key can hold (PostgreSQL int4).
MAX_USER_ID = 2**31 - 1


class UserRole(str, Enum):
    """Closed set of roles. Authorization compares these, never raw strings."""

    USER = "user"
    ADMIN = "admin"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    email is stored lower-cased; uniqueness is enforced by the unique index, not
    by read-then-write checks. password_hash never leaves the service layer.
    token_version is bumped whenever outstanding tokens should stop working
    (password change, deactivation); it is only checked when revocation is enabled.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(100), nullable=False)
    role = Column(String(32), nullable=False, default=UserRole.USER.value)
    status = Column(String(32), nullable=False, default=UserStatus.ACTIVE.value)
    token_version = Column(Integer, nullable=False, default=0)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE.value

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role} status={self.status}>"
