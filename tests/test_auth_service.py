"""Tests for app.services.auth: signup, login and current-user lookup against SQLite."""

import unittest
from unittest.mock import patch

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.errors import (
    AccountInactiveError,
    ConflictError,
    InvalidCredentialsError,
    UnauthenticatedError,
)
from app.core.security import decode_access_token
from app.models.user import UserRole, UserStatus
from app.schemas.auth import TokenClaims
from app.services import auth as auth_service
from tests.support import STRONG_PASSWORD, DatabaseTestCase, count_users, create_user


class TestSignup(DatabaseTestCase):
    """signup creates an active 'user' and returns a token for it."""

    def test_token_decodes_to_new_user_with_default_role(self) -> None:
        settings = get_settings()
        with SessionLocal() as db:
            result = auth_service.signup(db, settings, "a@b.com", STRONG_PASSWORD, "A B")
            claims = decode_access_token(result.token, settings)
            self.assertEqual(claims.subject_id, result.user.id)
            self.assertEqual(claims.role, UserRole.USER)
            self.assertEqual(result.user.role, UserRole.USER.value)
            self.assertEqual(result.user.status, UserStatus.ACTIVE.value)
            self.assertNotEqual(result.user.password_hash, STRONG_PASSWORD)

    def test_email_is_normalized(self) -> None:
        with SessionLocal() as db:
            result = auth_service.signup(
                db, get_settings(), "  Mixed.Case@Example.COM ", STRONG_PASSWORD, "Mixed Case"
            )
            self.assertEqual(result.user.email, "mixed.case@example.com")

    def test_duplicate_normalized_email_conflicts(self) -> None:
        settings = get_settings()
        with SessionLocal() as db:
            auth_service.signup(db, settings, "dup@example.com", STRONG_PASSWORD, "First User")
        with SessionLocal() as db:
            with self.assertRaises(ConflictError) as ctx:
                auth_service.signup(db, settings, "DUP@example.com", STRONG_PASSWORD, "Second User")
        self.assertIn("already exists", ctx.exception.message)
        self.assertEqual(count_users(), 1)

    def test_unique_index_catches_race(self) -> None:
        """Even if the pre-check misses, the store refuses the second insert."""
        create_user(email="race@example.com")
        with SessionLocal() as db:
            with patch.object(auth_service, "find_user_by_email", return_value=None):
                with self.assertRaises(ConflictError):
                    auth_service.signup(
                        db, get_settings(), "race@example.com", STRONG_PASSWORD, "Racer"
                    )
        self.assertEqual(count_users(), 1)


class TestLogin(DatabaseTestCase):
    """login returns a token with the stored role, or an uninformative failure."""

    def test_login_uses_stored_role(self) -> None:
        admin_id = create_user(email="admin@example.com", role="admin")
        settings = get_settings()
        with SessionLocal() as db:
            result = auth_service.login(db, settings, "ADMIN@example.com", STRONG_PASSWORD)
        claims = decode_access_token(result.token, settings)
        self.assertEqual(claims.subject_id, admin_id)
        self.assertEqual(claims.role, UserRole.ADMIN)

    def test_unknown_email_and_wrong_password_look_the_same(self) -> None:
        create_user(email="known@example.com")
        with SessionLocal() as db:
            with self.assertRaises(InvalidCredentialsError) as unknown:
                auth_service.login(db, get_settings(), "nobody@example.com", STRONG_PASSWORD)
            with self.assertRaises(InvalidCredentialsError) as wrong:
                auth_service.login(db, get_settings(), "known@example.com", "Wrong1!pass")
        self.assertEqual(unknown.exception.message, wrong.exception.message)
        self.assertEqual(unknown.exception.status_code, 401)

    def test_inactive_account_is_refused_even_with_correct_password(self) -> None:
        create_user(email="sleepy@example.com", status="inactive")
        with SessionLocal() as db:
            with patch.object(auth_service, "create_access_token") as issue:
                with self.assertRaises(AccountInactiveError):
                    auth_service.login(db, get_settings(), "sleepy@example.com", STRONG_PASSWORD)
                issue.assert_not_called()


class TestCurrentUser(DatabaseTestCase):
    """get_current_user re-reads the row; ensure_token_current compares versions."""

    def test_reflects_role_change_since_issue(self) -> None:
        user_id = create_user(email="promoted@example.com", role="admin")
        claims = TokenClaims(subject_id=user_id, role=UserRole.USER)
        with SessionLocal() as db:
            user = auth_service.get_current_user(db, claims)
            self.assertEqual(user.role, "admin")

    def test_missing_user_is_unauthenticated(self) -> None:
        with SessionLocal() as db:
            with self.assertRaises(UnauthenticatedError):
                auth_service.get_current_user(db, TokenClaims(subject_id=999, role=UserRole.USER))

    def test_stale_token_version_is_revoked(self) -> None:
        user_id = create_user(email="versioned@example.com")
        with SessionLocal() as db:
            auth_service.ensure_token_current(
                db, TokenClaims(subject_id=user_id, role=UserRole.USER, token_version=0)
            )
            with self.assertRaises(UnauthenticatedError):
                auth_service.ensure_token_current(
                    db, TokenClaims(subject_id=user_id, role=UserRole.USER, token_version=1)
                )


if __name__ == "__main__":
    unittest.main()
