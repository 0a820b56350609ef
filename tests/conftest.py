"""Pytest configuration and shared fixtures for API and client tests."""

import os

import pytest

# Select the testing config before the app reads its environment
os.environ.setdefault("APP_ENV", "testing")

from api import create_app
from models import storage

PASSWORD = "password123"


@pytest.fixture
def app():
    """Fresh app on a fresh in-memory SQLite database."""
    app = create_app("testing")
    yield app
    storage.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def codec(app):
    return app.extensions["token_codec"]


@pytest.fixture
def manager(app):
    """SessionManager used directly, inside an application context."""
    with app.app_context():
        yield app.extensions["session_manager"]


def register_user(client, email="alice@example.com", name="Alice", password=PASSWORD):
    resp = client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "name": name},
    )
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["data"]


@pytest.fixture
def make_user(client):
    def _make(**kwargs):
        return register_user(client, **kwargs)
    return _make


@pytest.fixture
def registered(client):
    """Register alice@example.com over HTTP and return {user, tokens}."""
    return register_user(client)


@pytest.fixture
def auth_headers(registered):
    return {"Authorization": f"Bearer {registered['tokens']['accessToken']}"}
