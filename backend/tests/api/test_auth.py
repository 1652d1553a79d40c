"""
Tests for JWT authentication middleware.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch

from api.app import create_app
from api.dependencies import get_container
from api.middleware.auth import AuthError, decode_token, get_user_from_payload
from api.models.user import TokenPayload

TEST_JWT_SECRET = "test-secret-key-for-testing-only"


class TestDecodeToken:

    @patch("api.middleware.auth.get_settings")
    def test_valid_token(self, mock_settings, token_factory):
        """Valid token should decode successfully."""
        mock_settings.return_value.jwt_secret = TEST_JWT_SECRET
        payload = decode_token(token_factory("alice"))
        assert payload.sub == "alice"
        assert payload.aud == "authenticated"

    @patch("api.middleware.auth.get_settings")
    def test_expired_token(self, mock_settings, token_factory):
        """Expired token should raise AuthError."""
        mock_settings.return_value.jwt_secret = TEST_JWT_SECRET
        with pytest.raises(AuthError) as exc_info:
            decode_token(token_factory("alice", expired=True))
        assert "expired" in str(exc_info.value.detail).lower()

    @patch("api.middleware.auth.get_settings")
    def test_invalid_token(self, mock_settings):
        """Invalid token should raise AuthError."""
        mock_settings.return_value.jwt_secret = TEST_JWT_SECRET
        with pytest.raises(AuthError) as exc_info:
            decode_token("invalid-token")
        assert "Invalid token" in str(exc_info.value.detail)

    @patch("api.middleware.auth.get_settings")
    def test_wrong_secret(self, mock_settings, token_factory):
        mock_settings.return_value.jwt_secret = TEST_JWT_SECRET
        with pytest.raises(AuthError):
            decode_token(token_factory("alice", secret="another-secret"))

    @patch("api.middleware.auth.get_settings")
    def test_unconfigured_secret(self, mock_settings, token_factory):
        """Tokens are rejected when no secret is configured."""
        mock_settings.return_value.jwt_secret = ""
        with pytest.raises(AuthError) as exc_info:
            decode_token(token_factory("alice"))
        assert exc_info.value.status_code == 401


class TestGetUserFromPayload:
    def test_maps_subject_to_handle(self):
        payload = TokenPayload(sub="alice", aud="authenticated", exp=2000000000, iat=1700000000)
        user = get_user_from_payload(payload)
        assert user.handle == "alice"
        assert user.admin is False
        assert user.issued_at.year == 2023


class TestProtectedRoutes:
    @pytest.fixture
    def client(self, app_env):
        return TestClient(create_app())

    def test_missing_auth_header(self, client):
        """Request without auth header should return 401."""
        response = client.get("/api/users/me")
        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    def test_me(self, client, auth_headers):
        response = client.get("/api/users/me", headers=auth_headers("alice"))
        assert response.status_code == 200
        assert response.json() == {"handle": "alice", "admin": False}

    def test_requests_count_as_activity(self, client, auth_headers):
        client.get("/api/users/me", headers=auth_headers("alice"))
        client.get("/api/users/me", headers=auth_headers("alice"))

        activity = get_container().activity_monitor.last_activity_for("alice")
        assert activity.total_messages == 2
        assert activity.last_heartbeat is None

    def test_heartbeat(self, client, auth_headers):
        response = client.post("/api/activity/heartbeat", headers=auth_headers("alice"))

        assert response.status_code == 204
        assert get_container().activity_monitor.last_activity_for("alice").last_heartbeat is not None

    def test_heartbeat_requires_auth(self, client):
        assert client.post("/api/activity/heartbeat").status_code == 401
