"""Shared helpers: fresh schema per test and direct user inserts."""

import unittest

from app.core.database import SessionLocal, engine
from app.core.security import hash_password
from app.models import Base, User

STRONG_PASSWORD = "Aa1!aaaa"


class DatabaseTestCase(unittest.TestCase):
    """Creates all tables before each test and drops them afterwards."""

    def setUp(self) -> None:
        Base.metadata.create_all(bind=engine)

    def tearDown(self) -> None:
        Base.metadata.drop_all(bind=engine)


def create_user(
    email: str = "user@example.com",
    password: str = STRONG_PASSWORD,
    full_name: str = "Regular User",
    role: str = "user",
    status: str = "active",
    password_hash: str | None = None,
) -> int:
    """Insert a user directly (bypassing signup) and return its id."""
    with SessionLocal() as db:
        user = User(
            email=email,
            password_hash=password_hash or hash_password(password, rounds=4),
            full_name=full_name,
            role=role,
            status=status,
            token_version=0,
        )
        db.add(user)
        db.commit()
        return user.id


def fetch_user(user_id: int) -> User | None:
    with SessionLocal() as db:
        user = db.get(User, user_id)
        if user is not None:
            db.expunge(user)
        return user


def count_users() -> int:
    with SessionLocal() as db:
        return db.query(User).count()
