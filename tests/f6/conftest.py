"""Fixtures for F6 tests - web API."""

import pytest
from fastapi.testclient import TestClient

from studyvault.web.api import create_app
from studyvault.web.context import AppContext


@pytest.fixture
def context(app_config, fake_backend) -> AppContext:
    """Application context over the in-memory backend."""
    return AppContext(config=app_config, backend=fake_backend)


@pytest.fixture
def client(context):
    """Test client with startup/shutdown run."""
    with TestClient(create_app(context)) as client:
        yield client


@pytest.fixture
def login(client, fake_backend):
    """Create an account and sign in through the API."""

    def _login(email: str = "ana@uni.edu", name: str = "Ana", role: str = "student"):
        fake_backend.add_account(email, password="secret123", name=name, role=role)
        response = client.post(
            "/api/auth/login", json={"email": email, "password": "secret123"}
        )
        assert response.status_code == 200, response.text
        return response.json()["user"]

    return _login


@pytest.fixture
def admin(login):
    return login("admin@example.com", "Admin", "admin")
