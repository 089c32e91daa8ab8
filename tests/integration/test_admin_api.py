# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the administration endpoints and health check."""

import httpx
import pytest

from kidspark.infrastructure.database.models import Credential, Kid

pytestmark = pytest.mark.integration


class TestAdminGuard:
    """Tests for the administrator session requirement."""

    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("GET", "/api/admin/passwords"),
            ("POST", "/api/admin/passwords"),
            ("DELETE", "/api/admin/passwords/1"),
            ("GET", "/api/admin/kids"),
            ("POST", "/api/admin/kids"),
            ("GET", "/api/admin/kids/5"),
            ("PUT", "/api/admin/kids/5"),
            ("DELETE", "/api/admin/kids/5"),
        ],
    )
    async def test_requires_admin(self, client: httpx.AsyncClient, method: str, path: str) -> None:
        """Test that every admin route refuses anonymous requests."""
        response = await client.request(method, path, json={"label": "x", "password": "y", "name": "n", "age": 1})

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    async def test_kid_session_is_not_admin(self, kid_client: httpx.AsyncClient) -> None:
        """Test that a kid session cannot reach admin routes."""
        response = await kid_client.get("/api/admin/kids")

        assert response.status_code == 401


class TestPasswordAdmin:
    """Tests for /api/admin/passwords."""

    async def test_create_and_list(self, admin_client: httpx.AsyncClient) -> None:
        """Test adding a password and listing it without secrets."""
        response = await admin_client.post(
            "/api/admin/passwords",
            json={"label": "Grandma", "password": "daisy"},
        )

        assert response.status_code == 201
        created = response.json()["data"]
        assert created["label"] == "Grandma"
        assert created["last_used_at"] is None

        rows = (await admin_client.get("/api/admin/passwords")).json()["data"]
        assert [row["id"] for row in rows] == [created["id"]]
        assert set(rows[0]) == {"id", "label", "created_at", "last_used_at"}

    async def test_new_password_unlocks_kids(self, admin_client: httpx.AsyncClient, kid: Kid) -> None:
        """Test that a newly added password can be used to verify."""
        await admin_client.post("/api/admin/passwords", json={"label": "Grandma", "password": "daisy"})

        response = await admin_client.post("/api/auth/verify", json={"password": "daisy", "kid_id": kid.id})

        assert response.status_code == 200

    async def test_create_missing_fields(self, admin_client: httpx.AsyncClient) -> None:
        """Test that both fields are required."""
        response = await admin_client.post("/api/admin/passwords", json={})

        assert response.status_code == 400
        assert response.json() == {
            "error": "label and password required",
            "missing": ["label", "password"],
        }

    async def test_delete(self, admin_client: httpx.AsyncClient, kid: Kid, credential: Credential) -> None:
        """Test that a deleted password no longer unlocks anything."""
        response = await admin_client.delete(f"/api/admin/passwords/{credential.id}")
        assert response.status_code == 200
        assert response.json() == {"ok": True}

        response = await admin_client.post("/api/auth/verify", json={"password": "sunflower", "kid_id": kid.id})
        assert response.status_code == 401

    async def test_delete_id_out_of_range(self, admin_client: httpx.AsyncClient) -> None:
        """Test that a credential id beyond the integer column range is a 400."""
        response = await admin_client.delete("/api/admin/passwords/99999999999999999999")

        assert response.status_code == 400
        assert response.json()["error"].startswith("credential_id:")

    async def test_delete_unknown(self, admin_client: httpx.AsyncClient) -> None:
        """Test deleting a password that does not exist."""
        response = await admin_client.delete("/api/admin/passwords/404")

        assert response.status_code == 404
        assert response.json() == {"error": "Not found"}


class TestKidAdmin:
    """Tests for /api/admin/kids."""

    async def test_create_get_list(self, admin_client: httpx.AsyncClient) -> None:
        """Test creating a kid and reading it back."""
        response = await admin_client.post("/api/admin/kids", json={"name": "Leo", "avatar": "bear", "age": 9})

        assert response.status_code == 201
        created = response.json()["data"]
        assert created["name"] == "Leo"
        assert created["created_at"] is not None

        response = await admin_client.get(f"/api/admin/kids/{created['id']}")
        assert response.json()["data"] == created

        rows = (await admin_client.get("/api/admin/kids")).json()["data"]
        assert [row["name"] for row in rows] == ["Leo"]

    async def test_create_missing_fields(self, admin_client: httpx.AsyncClient) -> None:
        """Test that name and age are required."""
        response = await admin_client.post("/api/admin/kids", json={"avatar": "bear"})

        assert response.status_code == 400
        assert response.json()["error"] == "name and age required"

    async def test_update_keeps_absent_fields(self, admin_client: httpx.AsyncClient, kid: Kid) -> None:
        """Test that PUT only changes the fields it sends."""
        response = await admin_client.put(f"/api/admin/kids/{kid.id}", json={"age": 7, "name": None})

        assert response.status_code == 200
        data = response.json()["data"]
        assert (data["id"], data["name"], data["avatar"], data["age"]) == (5, "Mia", "fox", 7)

    async def test_unknown_kid(self, admin_client: httpx.AsyncClient) -> None:
        """Test that missing kids are a 404 on every route."""
        for method in ("GET", "PUT", "DELETE"):
            response = await admin_client.request(method, "/api/admin/kids/404", json={})
            assert response.status_code == 404
            assert response.json() == {"error": "Not found"}

    @pytest.mark.parametrize("kid_id", ["0", "99999999999999999999"])
    async def test_kid_id_out_of_range(self, admin_client: httpx.AsyncClient, kid_id: str) -> None:
        """Test that kid ids outside the integer column range are a 400 on every route."""
        for method in ("GET", "PUT", "DELETE"):
            response = await admin_client.request(method, f"/api/admin/kids/{kid_id}", json={})
            assert response.status_code == 400
            assert response.json()["error"].startswith("kid_id:")

    async def test_delete_ends_kid_sessions(self, kid_client: httpx.AsyncClient, kid: Kid) -> None:
        """Test that deleting a kid invalidates its session and progress."""
        await kid_client.post("/api/learn/progress/10", json={"status": "completed"})
        await kid_client.post("/api/auth/admin/login", json={"password": "cms-secret"})

        response = await kid_client.delete(f"/api/admin/kids/{kid.id}")
        assert response.status_code == 200

        response = await kid_client.get("/api/learn/progress")
        assert response.status_code == 401
        assert (await kid_client.get("/api/auth/check")).json()["authenticated"] is False


class TestHealth:
    """Tests for /health."""

    async def test_health(self, client: httpx.AsyncClient) -> None:
        """Test that the health check reports the service state."""
        response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["environment"] == "test"
        assert body["status"] in ("healthy", "degraded")
        assert body["database"]["status"] in ("healthy", "unhealthy")
