"""
Create a user (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user EMAIL PASSWORD "FULL NAME" [role]
Example:
  python -m app.scripts.create_user admin@example.com 'Adm1n!pass' "Admin User" admin
"""
import argparse
import logging
import sys

from pydantic import ValidationError

from app.core.config import LOG_DATEFMT, LOG_FORMAT, get_settings
from app.core.database import SessionLocal
from app.core.security import hash_password
from app.models.user import User, UserRole, UserStatus
from app.schemas.auth import SignupRequest

logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT,
    datefmt=LOG_DATEFMT,
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Provision a user account outside the signup flow.")
    parser.add_argument("email", help="Login email")
    parser.add_argument("password", help="8-128 chars with upper, lower, digit and one of @$!%%*?&#")
    parser.add_argument("full_name", help="Display name (2-100 chars)")
    parser.add_argument(
        "role",
        nargs="?",
        default=UserRole.USER.value,
        choices=[r.value for r in UserRole],
    )
    args = parser.parse_args(argv)

    try:
        validated = SignupRequest(
            email=args.email,
            password=args.password,
            full_name=args.full_name,
        )
    except ValidationError as e:
        for err in e.errors():
            print(str(err.get("msg")).removeprefix("Value error, "), file=sys.stderr)
        return 1

    settings = get_settings()
    db = SessionLocal()
    try:
        existing = db.query(User).filter(User.email == validated.email).first()
        if existing:
            print(f"User '{validated.email}' already exists.", file=sys.stderr)
            return 1
        user = User(
            email=validated.email,
            password_hash=hash_password(validated.password, rounds=settings.BCRYPT_ROUNDS),
            full_name=validated.full_name,
            role=args.role,
            status=UserStatus.ACTIVE.value,
            token_version=0,
        )
        db.add(user)
        db.commit()
        logger.info("Created user '%s' with role '%s'.", validated.email, args.role)
        print(f"Created user '{validated.email}' with role '{args.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
