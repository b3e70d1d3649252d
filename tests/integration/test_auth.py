"""Integration tests for SimpleJWT authentication.

Validates:
  - /health is public (plain Django view, no DRF).
  - Token pair issued for valid credentials, rejected for bad ones.
  - Protected DRF endpoints return 401 without a token.
  - Protected DRF endpoints return 401 with an invalid or malformed token.
"""

import pytest

pytestmark = pytest.mark.integration


class TestPublicEndpoints:
    """Health check must remain accessible without credentials."""

    def test_health_is_public(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"


class TestTokenEndpoints:
    def test_obtain_token_pair(self, api_client, consumer):
        response = api_client.post(
            "/api/v1/auth/token/",
            {"username": "ama", "password": "testpass123"},
            format="json",
        )
        assert response.status_code == 200
        data = response.json()
        assert "access" in data
        assert "refresh" in data

    def test_obtained_token_authenticates(self, api_client, consumer):
        tokens = api_client.post(
            "/api/v1/auth/token/",
            {"username": "ama", "password": "testpass123"},
            format="json",
        ).json()
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")

        response = api_client.get("/api/v1/me")

        assert response.status_code == 200

    def test_wrong_password_returns_401(self, api_client, consumer):
        response = api_client.post(
            "/api/v1/auth/token/",
            {"username": "ama", "password": "wrong"},
            format="json",
        )
        assert response.status_code == 401
        assert set(response.json()) == {"error"}

    def test_refresh_returns_new_access(self, api_client, consumer):
        tokens = api_client.post(
            "/api/v1/auth/token/",
            {"username": "ama", "password": "testpass123"},
            format="json",
        ).json()

        response = api_client.post(
            "/api/v1/auth/token/refresh/", {"refresh": tokens["refresh"]}, format="json"
        )

        assert response.status_code == 200
        assert "access" in response.json()


class TestProtectedEndpoints:
    """All DRF endpoints require a valid JWT by default (Fail Closed)."""

    def test_no_token_returns_401(self, api_client):
        response = api_client.get("/api/v1/me")
        assert response.status_code == 401

    def test_invalid_token_returns_401(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION="Bearer invalid.token.here")
        response = api_client.get("/api/v1/me")
        assert response.status_code == 401

    def test_malformed_auth_header_returns_401(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION="Token some-token")
        response = api_client.get("/api/v1/me")
        assert response.status_code == 401

    def test_empty_bearer_returns_401(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION="Bearer ")
        response = api_client.get("/api/v1/me")
        assert response.status_code == 401

    def test_401_includes_www_authenticate_header(self, api_client):
        response = api_client.get("/api/v1/me")
        assert response.status_code == 401
        assert "Bearer" in response.get("WWW-Authenticate", "")
