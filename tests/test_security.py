"""Unit tests for app.core.security: bcrypt hashing, JWT issue/verify, role authorization."""

import base64
import json
import unittest
from datetime import UTC, datetime, timedelta

import jwt

from app.core.config import get_settings
from app.core.errors import ForbiddenError
from app.core.security import (
    TokenError,
    TokenErrorKind,
    authorize_role,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from app.models.user import UserRole
from app.schemas.auth import TokenClaims


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64url_decode(segment: str) -> bytes:
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


class TestPasswordHashing(unittest.TestCase):
    """hash_password salts every call; verify_password accepts only the original input."""

    def test_verify_accepts_original_password(self) -> None:
        digest = hash_password("Aa1!aaaa", rounds=4)
        self.assertTrue(verify_password("Aa1!aaaa", digest))

    def test_verify_rejects_different_password(self) -> None:
        digest = hash_password("Aa1!aaaa", rounds=4)
        self.assertFalse(verify_password("Aa1!aaab", digest))

    def test_same_input_gives_different_digests(self) -> None:
        first = hash_password("Secret1!x", rounds=4)
        second = hash_password("Secret1!x", rounds=4)
        self.assertNotEqual(first, second)
        self.assertTrue(verify_password("Secret1!x", first))
        self.assertTrue(verify_password("Secret1!x", second))

    def test_plaintext_not_in_digest(self) -> None:
        digest = hash_password("Plaintext1!", rounds=4)
        self.assertNotIn("Plaintext1!", digest)

    def test_malformed_digest_is_a_failed_verification(self) -> None:
        self.assertFalse(verify_password("Aa1!aaaa", "not-a-bcrypt-hash"))
        self.assertFalse(verify_password("Aa1!aaaa", ""))

    def test_long_password_is_accepted(self) -> None:
        long_password = "Aa1!" + "x" * 120
        digest = hash_password(long_password, rounds=4)
        self.assertTrue(verify_password(long_password, digest))


class TestAccessTokens(unittest.TestCase):
    """create_access_token / decode_access_token with distinguishable failure kinds."""

    def setUp(self) -> None:
        self.settings = get_settings()

    def test_round_trip_returns_subject_and_role(self) -> None:
        token = create_access_token(42, UserRole.ADMIN, self.settings, token_version=3)
        claims = decode_access_token(token, self.settings)
        self.assertEqual(claims.subject_id, 42)
        self.assertEqual(claims.role, UserRole.ADMIN)
        self.assertEqual(claims.token_version, 3)

    def test_payload_carries_expected_claims(self) -> None:
        token = create_access_token(7, "user", self.settings)
        payload = jwt.decode(
            token,
            self.settings.jwt_signing_key,
            algorithms=[self.settings.JWT_ALGORITHM],
        )
        self.assertEqual(payload["sub"], "7")
        self.assertEqual(payload["role"], "user")
        self.assertIn("iat", payload)
        self.assertGreater(payload["exp"], payload["iat"])

    def test_expired_token(self) -> None:
        token = create_access_token(
            1, UserRole.USER, self.settings, expires_delta=timedelta(seconds=-30)
        )
        with self.assertRaises(TokenError) as ctx:
            decode_access_token(token, self.settings)
        self.assertEqual(ctx.exception.kind, TokenErrorKind.EXPIRED)

    def test_token_signed_with_other_secret(self) -> None:
        now = datetime.now(UTC)
        forged = jwt.encode(
            {"sub": "1", "role": "admin", "iat": now, "exp": now + timedelta(minutes=5)},
            "some-other-secret-that-is-also-32-chars-long",
            algorithm="HS256",
        )
        with self.assertRaises(TokenError) as ctx:
            decode_access_token(forged, self.settings)
        self.assertEqual(ctx.exception.kind, TokenErrorKind.SIGNATURE_INVALID)

    def test_tampered_payload_fails_signature_check(self) -> None:
        token = create_access_token(5, UserRole.USER, self.settings)
        header, payload, signature = token.split(".")
        claims = json.loads(_b64url_decode(payload))
        claims["role"] = "admin"
        tampered = ".".join([header, _b64url(json.dumps(claims).encode()), signature])
        with self.assertRaises(TokenError) as ctx:
            decode_access_token(tampered, self.settings)
        self.assertEqual(ctx.exception.kind, TokenErrorKind.SIGNATURE_INVALID)

    def test_signature_checked_before_expiry(self) -> None:
        token = create_access_token(
            5, UserRole.USER, self.settings, expires_delta=timedelta(seconds=-30)
        )
        header, payload, _signature = token.split(".")
        bad = ".".join([header, payload, _b64url(b"x" * 32)])
        with self.assertRaises(TokenError) as ctx:
            decode_access_token(bad, self.settings)
        self.assertEqual(ctx.exception.kind, TokenErrorKind.SIGNATURE_INVALID)

    def test_garbage_is_malformed(self) -> None:
        with self.assertRaises(TokenError) as ctx:
            decode_access_token("not-a-token", self.settings)
        self.assertEqual(ctx.exception.kind, TokenErrorKind.MALFORMED)

    def test_missing_subject_is_malformed(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {"role": "user", "iat": now, "exp": now + timedelta(minutes=5)},
            self.settings.jwt_signing_key,
            algorithm=self.settings.JWT_ALGORITHM,
        )
        with self.assertRaises(TokenError) as ctx:
            decode_access_token(token, self.settings)
        self.assertEqual(ctx.exception.kind, TokenErrorKind.MALFORMED)

    def test_subject_outside_key_range_is_malformed(self) -> None:
        now = datetime.now(UTC)
        for sub in ("0", "99999999999999999999"):
            with self.subTest(sub=sub):
                token = jwt.encode(
                    {"sub": sub, "role": "user", "iat": now, "exp": now + timedelta(minutes=5)},
                    self.settings.jwt_signing_key,
                    algorithm=self.settings.JWT_ALGORITHM,
                )
                with self.assertRaises(TokenError) as ctx:
                    decode_access_token(token, self.settings)
                self.assertEqual(ctx.exception.kind, TokenErrorKind.MALFORMED)

    def test_unknown_role_is_malformed(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": "1", "role": "superuser", "iat": now, "exp": now + timedelta(minutes=5)},
            self.settings.jwt_signing_key,
            algorithm=self.settings.JWT_ALGORITHM,
        )
        with self.assertRaises(TokenError) as ctx:
            decode_access_token(token, self.settings)
        self.assertEqual(ctx.exception.kind, TokenErrorKind.MALFORMED)


class TestAuthorizeRole(unittest.TestCase):
    """authorize_role is a pure check over UserRole."""

    def test_matching_role_passes(self) -> None:
        authorize_role(TokenClaims(subject_id=1, role=UserRole.ADMIN), UserRole.ADMIN)

    def test_user_rejected_for_admin(self) -> None:
        with self.assertRaises(ForbiddenError) as ctx:
            authorize_role(TokenClaims(subject_id=1, role=UserRole.USER), UserRole.ADMIN)
        self.assertEqual(ctx.exception.status_code, 403)


if __name__ == "__main__":
    unittest.main()
