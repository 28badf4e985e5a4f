"""Tests for health, status and fallback endpoints (F6)."""

from fastapi.testclient import TestClient

from studyvault import __version__
from studyvault.backend import DisconnectedBackend
from studyvault.web.api import create_app
from studyvault.web.context import AppContext


class TestHealthEndpoint:
    """Tests for GET /health."""

    def test_health_returns_ok(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["version"] == __version__
        assert "T" in data["timestamp"]


class TestStatusEndpoint:
    """Tests for GET /api/status."""

    def test_connected_has_no_banner(self, client):
        data = client.get("/api/status").json()
        assert data["connected"] is True
        assert data["loading"] is False
        assert data["signed_in"] is False
        assert data["banner"] is None

    def test_disconnected_shows_banner(self, app_config):
        context = AppContext(config=app_config, backend=DisconnectedBackend())
        with TestClient(create_app(context)) as client:
            data = client.get("/api/status").json()

        assert data["connected"] is False
        assert "Connect to Supabase" in data["banner"]

    def test_disconnected_login_fails_with_connect_message(self, app_config):
        context = AppContext(config=app_config, backend=DisconnectedBackend())
        with TestClient(create_app(context)) as client:
            response = client.post(
                "/api/auth/login", json={"email": "a@b.co", "password": "pw"}
            )

        assert response.status_code == 400
        assert "connect" in response.json()["error"].lower()


class TestFallbackRoutes:
    """Tests for unknown paths."""

    def test_unknown_page_redirects_home(self, client):
        response = client.get("/nowhere/at/all", follow_redirects=False)
        assert response.status_code == 307
        assert response.headers["location"] == "/"

    def test_unknown_api_path_is_404(self, client):
        assert client.get("/api/nowhere").status_code == 404
