# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the administrator and kid session endpoints."""

import httpx
import pytest
from fastapi import FastAPI

from kidspark.infrastructure.database.models import Credential, Kid

pytestmark = pytest.mark.integration


def cookie_header(response: httpx.Response) -> str:
    return response.headers["set-cookie"].lower()


class TestAdminAuth:
    """Tests for /api/auth/admin."""

    async def test_login_sets_cookie(self, client: httpx.AsyncClient) -> None:
        """Test that a correct password opens a session cookie."""
        response = await client.post("/api/auth/admin/login", json={"password": "cms-secret"})

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        header = cookie_header(response)
        assert header.startswith("ks_admin=")
        assert "httponly" in header
        assert "max-age=86400" in header
        assert "samesite=lax" in header
        assert "path=/" in header
        assert "secure" not in header
        assert response.headers["cache-control"] == "no-store"

    async def test_login_wrong_password(self, client: httpx.AsyncClient) -> None:
        """Test that a wrong password is refused without a cookie."""
        response = await client.post("/api/auth/admin/login", json={"password": "nope"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid password"}
        assert "set-cookie" not in response.headers

    async def test_login_missing_password(self, client: httpx.AsyncClient) -> None:
        """Test that an absent password is treated as a wrong one."""
        response = await client.post("/api/auth/admin/login", json={})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid password"}

    async def test_login_invalid_json(self, client: httpx.AsyncClient) -> None:
        """Test that an unparseable body is a 400."""
        response = await client.post(
            "/api/auth/admin/login",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON"}

    async def test_check_and_logout(self, admin_client: httpx.AsyncClient) -> None:
        """Test the session check before and after logout."""
        response = await admin_client.get("/api/auth/admin/check")
        assert response.json() == {"authenticated": True}

        response = await admin_client.post("/api/auth/admin/logout")
        assert response.status_code == 200
        assert "max-age=0" in cookie_header(response)

        response = await admin_client.get("/api/auth/admin/check")
        assert response.json() == {"authenticated": False}

    async def test_logout_revokes_token(self, admin_client: httpx.AsyncClient) -> None:
        """Test that a logged out token no longer works even if replayed."""
        token = admin_client.cookies.get("ks_admin")
        await admin_client.post("/api/auth/admin/logout")

        response = await admin_client.get("/api/admin/kids", cookies={"ks_admin": token})

        assert response.status_code == 401

    async def test_check_without_cookie(self, client: httpx.AsyncClient) -> None:
        """Test that no cookie means not authenticated."""
        response = await client.get("/api/auth/admin/check")

        assert response.status_code == 200
        assert response.json() == {"authenticated": False}


class TestKidVerify:
    """Tests for POST /api/auth/verify."""

    async def test_verify_sets_session_cookie(
        self,
        client: httpx.AsyncClient,
        kid: Kid,
        credential: Credential,
    ) -> None:
        """Test that a pooled password unlocks a session for the kid."""
        response = await client.post(
            "/api/auth/verify",
            json={"password": "sunflower", "kid_id": kid.id},
        )

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        header = cookie_header(response)
        assert header.startswith("ks_session=")
        assert "httponly" in header
        assert "max-age=604800" in header
        assert "samesite=lax" in header

    async def test_verify_missing_fields(self, client: httpx.AsyncClient) -> None:
        """Test that absent fields are named in the error."""
        response = await client.post("/api/auth/verify", json={"password": "sunflower"})

        assert response.status_code == 400
        assert response.json() == {
            "error": "password and kid_id required",
            "missing": ["kid_id"],
        }

    async def test_verify_empty_password(self, client: httpx.AsyncClient, kid: Kid) -> None:
        """Test that an empty password counts as missing."""
        response = await client.post("/api/auth/verify", json={"password": "", "kid_id": kid.id})

        assert response.status_code == 400
        assert response.json()["missing"] == ["password"]

    async def test_verify_wrong_password(
        self,
        client: httpx.AsyncClient,
        kid: Kid,
        credential: Credential,
    ) -> None:
        """Test that a password outside the pool is refused."""
        response = await client.post("/api/auth/verify", json={"password": "tulip", "kid_id": kid.id})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid password"}
        assert "set-cookie" not in response.headers

    async def test_verify_unknown_kid(self, client: httpx.AsyncClient, credential: Credential) -> None:
        """Test that a valid password with an unknown kid is a 404."""
        response = await client.post("/api/auth/verify", json={"password": "sunflower", "kid_id": 999})

        assert response.status_code == 404
        assert response.json() == {"error": "Kid not found"}

    async def test_verify_bad_kid_id_type(self, client: httpx.AsyncClient) -> None:
        """Test that a non-numeric kid id is a 400."""
        response = await client.post("/api/auth/verify", json={"password": "sunflower", "kid_id": "abc"})

        assert response.status_code == 400
        assert response.json()["error"].startswith("kid_id:")

    async def test_verify_unencodable_password(
        self,
        client: httpx.AsyncClient,
        kid: Kid,
        credential: Credential,
    ) -> None:
        """Test that a lone surrogate in the password is refused like any wrong password."""
        response = await client.post(
            "/api/auth/verify",
            content='{"password": "\\ud800", "kid_id": 5}',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid password"}

    async def test_verify_kid_id_out_of_range(self, client: httpx.AsyncClient, credential: Credential) -> None:
        """Test that a kid id beyond the integer column range is a 400."""
        response = await client.post(
            "/api/auth/verify",
            json={"password": "sunflower", "kid_id": 10**30},
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("kid_id:")
        assert "set-cookie" not in response.headers

    async def test_verify_updates_last_used(
        self,
        kid_client: httpx.AsyncClient,
        admin_client: httpx.AsyncClient,
    ) -> None:
        """Test that a successful verify stamps the credential."""
        response = await admin_client.get("/api/admin/passwords")

        [entry] = response.json()["data"]
        assert entry["last_used_at"] is not None


class TestKidSession:
    """Tests for /api/auth/check and /api/auth/logout."""

    async def test_check_returns_kid(self, kid_client: httpx.AsyncClient) -> None:
        """Test that the check reports the session's kid."""
        response = await kid_client.get("/api/auth/check")

        assert response.status_code == 200
        assert response.json() == {
            "authenticated": True,
            "kid": {"id": 5, "name": "Mia", "avatar": "fox", "age": 6},
        }

    async def test_check_without_session(self, client: httpx.AsyncClient) -> None:
        """Test the check with no cookie."""
        response = await client.get("/api/auth/check")

        assert response.json() == {"authenticated": False, "kid": None}

    async def test_logout_ends_session(self, kid_client: httpx.AsyncClient) -> None:
        """Test that logging out clears the cookie and revokes the session."""
        token = kid_client.cookies.get("ks_session")

        response = await kid_client.post("/api/auth/logout")
        assert response.status_code == 200
        assert "max-age=0" in cookie_header(response)

        response = await kid_client.get("/api/learn/progress", cookies={"ks_session": token})
        assert response.status_code == 401

    async def test_logout_without_session(self, client: httpx.AsyncClient) -> None:
        """Test that logging out twice is harmless."""
        response = await client.post("/api/auth/logout")

        assert response.status_code == 200

    async def test_deleted_password_keeps_session(
        self,
        kid_client: httpx.AsyncClient,
        credential: Credential,
    ) -> None:
        """Test that removing a password does not end sessions it opened."""
        login = await kid_client.post("/api/auth/admin/login", json={"password": "cms-secret"})
        assert login.status_code == 200

        response = await kid_client.delete(f"/api/admin/passwords/{credential.id}")
        assert response.status_code == 200

        response = await kid_client.get("/api/auth/check")
        assert response.json()["authenticated"] is True


class TestErrorHandling:
    """Tests for request context and unhandled errors."""

    async def test_request_id_echoed(self, client: httpx.AsyncClient) -> None:
        """Test that a caller supplied request id comes back."""
        response = await client.get("/api/auth/check", headers={"X-Request-ID": "abc123"})

        assert response.headers["x-request-id"] == "abc123"

    async def test_request_id_generated(self, client: httpx.AsyncClient) -> None:
        """Test that a request id is generated when absent."""
        response = await client.get("/api/auth/check")

        assert len(response.headers["x-request-id"]) == 32

    async def test_unhandled_error_is_500(self, app: FastAPI, client: httpx.AsyncClient) -> None:
        """Test that an unexpected exception becomes a JSON 500."""

        async def explode() -> None:
            raise RuntimeError("disk on fire")

        app.add_api_route("/explode", explode, methods=["GET"])

        response = await client.get("/explode")

        assert response.status_code == 500
        assert response.json() == {"error": "disk on fire"}
