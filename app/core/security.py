"""Password hashing, JWT creation/verification, and role authorization."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from enum import Enum
from functools import lru_cache
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

from app.core.errors import ForbiddenError
from app.models.user import MAX_USER_ID, UserRole
from app.schemas.auth import TokenClaims

if TYPE_CHECKING:
    from app.core.config import Settings

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# bcrypt only reads the first 72 bytes; newer releases raise instead of truncating.
BCRYPT_MAX_BYTES = 72

_REQUIRED_CLAIMS = ["sub", "role", "iat", "exp"]


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a plain-text password for storage. Each call uses a fresh salt."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. Malformed hashes never match."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False


@lru_cache(maxsize=4)
def _dummy_hash(rounds: int) -> str:
    return hash_password("timing-equalization-dummy", rounds=rounds)


def burn_password_check(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> None:
    """
    Run one verification against a throwaway hash.

    Login calls this when the email is unknown so the response takes as long as
    a real password check and does not reveal which accounts exist.
    """
    verify_password(plain_password, _dummy_hash(rounds))


class TokenErrorKind(str, Enum):
    MALFORMED = "malformed"
    SIGNATURE_INVALID = "signature_invalid"
    EXPIRED = "expired"


class TokenError(Exception):
    """Token could not be verified. The kind is for diagnostics; HTTP always sees 401."""

    def __init__(self, kind: TokenErrorKind, message: str) -> None:
        self.kind = kind
        self.message = message
        super().__init__(message)


def create_access_token(
    subject_id: int,
    role: UserRole | str,
    settings: Settings,
    *,
    token_version: int = 0,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed JWT with sub (user id), role, ver, iat and exp."""
    now = datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(subject_id),
        "role": UserRole(role).value,
        "ver": token_version,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(
        payload,
        settings.jwt_signing_key,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str, settings: Settings) -> TokenClaims:
    """
    Verify signature, then expiry, and return the decoded claims.

    Raises TokenError with kind SIGNATURE_INVALID, EXPIRED or MALFORMED.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_signing_key,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": _REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenError(TokenErrorKind.EXPIRED, "Token has expired") from e
    except jwt.InvalidSignatureError as e:
        raise TokenError(TokenErrorKind.SIGNATURE_INVALID, "Token signature is invalid") from e
    except jwt.PyJWTError as e:
        raise TokenError(TokenErrorKind.MALFORMED, f"Token is malformed: {e}") from e

    try:
        subject_id = int(payload["sub"])
        role = UserRole(payload["role"])
        token_version = int(payload.get("ver", 0))
    except (TypeError, ValueError) as e:
        raise TokenError(TokenErrorKind.MALFORMED, "Token payload is invalid") from e
    if not 1 <= subject_id <= MAX_USER_ID:
        raise TokenError(TokenErrorKind.MALFORMED, "Token subject is out of range")

    return TokenClaims(subject_id=subject_id, role=role, token_version=token_version)


def authorize_role(claims: TokenClaims, expected: UserRole) -> None:
    """Raise ForbiddenError unless the authenticated caller has the expected role."""
    if claims.role != expected:
        raise ForbiddenError()
