"""Test package. Point settings at an in-memory SQLite DB before any app import."""

import os

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-signing-secret-with-at-least-32-chars"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["APP_ENV"] = "dev"
os.environ["TOKEN_REVOCATION_ENABLED"] = "false"
