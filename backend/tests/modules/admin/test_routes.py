"""Tests for the admin API endpoints."""

import asyncio

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import get_container


@pytest.fixture
def client(app_env):
    return TestClient(create_app())


@pytest.fixture
def seed(app_env, user_factory):
    """Store user records in the configured account store."""
    def add(handle: str, created_days_ago: int = 0, **fields) -> dict:
        record = user_factory(handle, created_days_ago, **fields)
        asyncio.run(get_container().account_store.set(f"user:{handle}", record))
        return record
    return add


@pytest.fixture
def admin(seed, auth_headers):
    seed("admin-user", 400, admin=True)
    return auth_headers("admin-user")


def stored(handle: str):
    return asyncio.run(get_container().account_store.get(f"user:{handle}"))


class TestAdminAccess:
    def test_requires_token(self, client):
        assert client.get("/api/admin/users").status_code == 401

    def test_unknown_caller(self, client, auth_headers):
        response = client.get("/api/admin/users", headers=auth_headers("stranger"))
        assert response.status_code == 403

    def test_non_admin(self, client, seed, auth_headers):
        seed("alice")
        response = client.get("/api/admin/users", headers=auth_headers("alice"))
        assert response.status_code == 403

    def test_disabled_admin(self, client, seed, auth_headers):
        seed("old-admin", admin=True, enabled=False)
        response = client.get("/api/admin/users", headers=auth_headers("old-admin"))
        assert response.status_code == 403

    def test_admin(self, client, admin):
        response = client.get("/api/admin/users", headers=admin)
        assert response.status_code == 200
        assert [u["handle"] for u in response.json()] == ["admin-user"]


class TestInactiveRoutes:
    def test_scan_excludes_caller(self, client, admin, seed):
        seed("carol", 90)

        response = client.post("/api/admin/users/inactive/scan", json={"inactive_days": 60}, headers=admin)

        assert response.status_code == 200
        body = response.json()
        assert [c["handle"] for c in body["candidates"]] == ["carol"]
        assert body["total_users"] == 1
        assert len(body["confirmation_token"]) == 64

    def test_scan_rejects_bad_criteria(self, client, admin):
        response = client.post("/api/admin/users/inactive/scan", json={"inactive_days": 0}, headers=admin)
        assert response.status_code == 422

    def test_scan_rejects_infinite_storage_cap(self, client, admin):
        response = client.post(
            "/api/admin/users/inactive/scan", json={"max_storage_mb": "Infinity"}, headers=admin
        )
        assert response.status_code == 422

    def test_scan_then_delete(self, client, admin, seed):
        seed("carol", 90)
        criteria = {"inactive_days": 60, "require_unused": True}
        preview = client.post("/api/admin/users/inactive/scan", json=criteria, headers=admin).json()

        response = client.post(
            "/api/admin/users/inactive/delete",
            json={
                "criteria": criteria,
                "confirmation_token": preview["confirmation_token"],
                "confirm_count": 1,
            },
            headers=admin,
        )

        assert response.status_code == 200
        assert response.json()["total_deleted"] == 1
        assert stored("carol") is None

    def test_delete_without_token(self, client, admin):
        response = client.post(
            "/api/admin/users/inactive/delete",
            json={"criteria": {}, "confirm_count": 0},
            headers=admin,
        )
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "MISSING_CONFIRMATION_TOKEN"

    def test_delete_without_count(self, client, admin):
        response = client.post(
            "/api/admin/users/inactive/delete",
            json={"criteria": {}, "confirmation_token": "0" * 64},
            headers=admin,
        )
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "INVALID_CONFIRM_COUNT"

    def test_delete_with_stale_token(self, client, admin, seed):
        seed("carol", 90)
        preview = client.post("/api/admin/users/inactive/scan", json={}, headers=admin).json()
        seed("dave", 90)

        response = client.post(
            "/api/admin/users/inactive/delete",
            json={"confirmation_token": preview["confirmation_token"], "confirm_count": 1},
            headers=admin,
        )

        assert response.status_code == 409
        assert response.json()["detail"]["error"] == "STALE_CONFIRMATION_TOKEN"
        assert stored("carol") is not None

    def test_delete_with_wrong_count(self, client, admin, seed):
        seed("carol", 90)
        preview = client.post("/api/admin/users/inactive/scan", json={}, headers=admin).json()

        response = client.post(
            "/api/admin/users/inactive/delete",
            json={"confirmation_token": preview["confirmation_token"], "confirm_count": 5},
            headers=admin,
        )

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["error"] == "CONFIRM_COUNT_MISMATCH"
        assert detail["details"] == {"expected": 1, "supplied": 5}
        assert stored("carol") is not None


class TestUserRoutes:
    def test_create_user(self, client, admin):
        response = client.post(
            "/api/admin/users",
            json={"handle": "New Person", "name": "New Person", "password": "pw"},
            headers=admin,
        )
        assert response.status_code == 201
        assert response.json() == {"handle": "new-person"}
        assert stored("new-person")["name"] == "New Person"

    def test_create_duplicate(self, client, admin, seed):
        seed("alice")
        response = client.post("/api/admin/users", json={"handle": "alice", "name": "Alice"}, headers=admin)
        assert response.status_code == 409
        assert response.json()["detail"]["error"] == "USER_ALREADY_EXISTS"

    def test_create_invalid_handle(self, client, admin):
        response = client.post("/api/admin/users", json={"handle": "!!!", "name": "X"}, headers=admin)
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "INVALID_HANDLE"

    def test_disable_self_is_forbidden(self, client, admin):
        response = client.post("/api/admin/users/admin-user/disable", headers=admin)
        assert response.status_code == 403
        assert response.json()["detail"]["error"] == "PROTECTED_USER"

    def test_disable_and_enable(self, client, admin, seed):
        seed("alice")
        assert client.post("/api/admin/users/alice/disable", headers=admin).status_code == 204
        assert stored("alice")["enabled"] is False
        assert client.post("/api/admin/users/alice/enable", headers=admin).status_code == 204
        assert stored("alice")["enabled"] is True

    def test_promote_and_demote(self, client, admin, seed):
        seed("alice")
        assert client.post("/api/admin/users/alice/promote", headers=admin).status_code == 204
        assert stored("alice")["admin"] is True
        assert client.post("/api/admin/users/alice/demote", headers=admin).status_code == 204
        assert stored("alice")["admin"] is False

    def test_unknown_user(self, client, admin):
        response = client.post("/api/admin/users/ghost/enable", headers=admin)
        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "USER_NOT_FOUND"

    def test_delete_default_user_is_forbidden(self, client, admin, seed):
        seed("default-user")
        response = client.delete("/api/admin/users/default-user", headers=admin)
        assert response.status_code == 403
        assert stored("default-user") is not None

    def test_delete_with_purge(self, client, admin, seed, app_env, file_factory):
        seed("alice")
        file_factory(app_env / "alice" / "chats" / "a.jsonl", 5)

        response = client.delete("/api/admin/users/alice?purge=true", headers=admin)

        assert response.status_code == 204
        assert stored("alice") is None
        assert not (app_env / "alice").exists()

    def test_storage_size(self, client, admin, app_env, file_factory):
        file_factory(app_env / "alice" / "chats" / "a.jsonl", 5)

        single = client.get("/api/admin/users/alice/storage-size", headers=admin)
        batch = client.post("/api/admin/users/storage-size", json={"handles": ["alice", "???"]}, headers=admin)

        assert single.json() == {"storage_size": 5, "error": None}
        assert batch.json()["alice"]["storage_size"] == 5
        assert batch.json()["???"]["error"] == "Invalid handle format"

    def test_audit(self, client, admin, seed, app_env, file_factory):
        seed("alice")
        file_factory(app_env / "alice" / "chats" / "a.jsonl", 5)

        response = client.get("/api/admin/users/alice/audit", headers=admin)

        assert response.status_code == 200
        assert response.json()["is_unused"] is False
        assert response.json()["details"]["chats"] == {"has_extra": True, "example": "a.jsonl"}

    def test_slugify(self, client, admin):
        response = client.post("/api/admin/users/slugify", json={"text": "Hello World"}, headers=admin)
        assert response.json() == {"handle": "hello-world"}

    def test_clear_backups(self, client, admin, seed, app_env, file_factory):
        seed("alice")
        file_factory(app_env / "alice" / "backups" / "b.jsonl", 8)

        single = client.post("/api/admin/users/alice/clear-backups", headers=admin)
        assert single.json()["deleted_size"] == 8

        file_factory(app_env / "alice" / "backups" / "c.jsonl", 2)
        summary = client.post("/api/admin/users/clear-backups", headers=admin)
        assert summary.json()["total_deleted_size"] == 2
