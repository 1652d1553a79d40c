"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

from datetime import datetime, timezone, timedelta
from pathlib import Path
from typing import Callable, Optional

import jwt  # PyJWT
import pytest

from api.dependencies import reset_container
from shared.config import get_settings


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"


def create_test_token(
    handle: str = "admin-user",
    expired: bool = False,
    secret: str = TEST_JWT_SECRET,
) -> str:
    """
    Create a test JWT token for authentication.

    Args:
        handle: Handle to place in the subject claim
        expired: If True, creates an expired token
        secret: Signing secret

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": handle,
        "aud": "authenticated",
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def make_user_record(
    handle: str,
    created_days_ago: int = 0,
    **fields,
) -> dict:
    """Build a serialized user record as the account store holds it."""
    created_at = datetime.now(timezone.utc) - timedelta(days=created_days_ago)
    record = {
        "handle": handle,
        "name": handle.title(),
        "created_at": created_at.isoformat(),
        "password_hash": "",
        "salt": "",
        "admin": False,
        "enabled": True,
        "expires_at": None,
        "email": "",
    }
    record.update(fields)
    return record


def write_file(path: Path, size: int = 0) -> Path:
    """Create a file of the given size, creating parents as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)
    return path


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset cached settings and the service container around each test."""
    get_settings.cache_clear()
    reset_container()
    yield
    get_settings.cache_clear()
    reset_container()


@pytest.fixture
def data_root(tmp_path: Path) -> Path:
    """An empty data root."""
    root = tmp_path / "data"
    root.mkdir()
    return root


@pytest.fixture
def app_env(monkeypatch, data_root: Path) -> Path:
    """
    Configure the application for tests through the environment.

    Uses the in-memory account store and a temporary data root.
    """
    monkeypatch.setenv("JWT_SECRET", TEST_JWT_SECRET)
    monkeypatch.setenv("DATA_ROOT", str(data_root))
    monkeypatch.setenv("ACCOUNT_STORE_BACKEND", "memory")
    monkeypatch.setenv("SMTP_HOST", "")
    monkeypatch.setenv("EMAIL_FROM", "")
    get_settings.cache_clear()
    reset_container()
    return data_root


@pytest.fixture
def token_factory() -> Callable[..., str]:
    """Create JWT tokens for arbitrary handles."""
    return create_test_token


@pytest.fixture
def user_factory() -> Callable[..., dict]:
    """Build serialized user records."""
    return make_user_record


@pytest.fixture
def file_factory() -> Callable[[Path, int], Path]:
    """Create files of a given size."""
    return write_file


@pytest.fixture
def auth_headers() -> Callable[[Optional[str]], dict[str, str]]:
    """Build authorization headers for a handle."""
    def build(handle: Optional[str] = "admin-user") -> dict[str, str]:
        return {"Authorization": f"Bearer {create_test_token(handle)}"}
    return build
