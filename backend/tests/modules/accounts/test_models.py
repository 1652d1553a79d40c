"""Tests for modules/accounts/models.py."""

from datetime import datetime, timedelta, timezone

from modules.accounts.models import UserRecord


class TestUserRecord:
    def test_defaults(self):
        user = UserRecord(handle="alice")
        assert user.name == "Anonymous"
        assert user.enabled is True
        assert user.admin is False
        assert user.has_password is False
        assert user.has_bound_email is False
        assert user.created_at.tzinfo is not None

    def test_naive_timestamps_are_utc(self):
        user = UserRecord(
            handle="alice",
            created_at=datetime(2024, 1, 1),
            expires_at=datetime(2025, 1, 1),
        )
        assert user.created_at.tzinfo == timezone.utc
        assert user.expires_at.tzinfo == timezone.utc

    def test_parses_stored_document(self, user_factory):
        """Unknown fields written by other components are ignored."""
        raw = user_factory("alice", email="alice@example.com", theme="dark")
        user = UserRecord.model_validate(raw)
        assert user.handle == "alice"
        assert user.has_bound_email is True

    def test_blank_email_is_not_bound(self):
        assert UserRecord(handle="alice", email="   ").has_bound_email is False

    def test_active_subscription(self):
        now = datetime.now(timezone.utc)
        assert UserRecord(handle="a", expires_at=now + timedelta(days=1)).has_active_subscription(now)
        assert not UserRecord(handle="a", expires_at=now - timedelta(days=1)).has_active_subscription(now)
        assert not UserRecord(handle="a").has_active_subscription(now)
