"""Tests for auth endpoints: register, login, refresh, logout, and the response envelope."""

from datetime import timedelta

from models import storage
from models.base_model import utcnow
from models.refresh_token import RefreshToken

PASSWORD = "password123"


def _refresh(client, token):
    return client.post("/api/auth/refresh", json={"refreshToken": token})


def test_register(client):
    resp = client.post(
        "/api/auth/register",
        json={"email": "newuser@example.com", "password": PASSWORD, "name": "New User"},
    )
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["success"] is True
    assert body["message"] == "User registered successfully"
    user = body["data"]["user"]
    assert set(user) == {"id", "email", "name", "createdAt"}
    assert user["email"] == "newuser@example.com"
    assert set(body["data"]["tokens"]) == {"accessToken", "refreshToken"}


def test_register_duplicate_email(client, registered):
    resp = client.post(
        "/api/auth/register",
        json={"email": "alice@example.com", "password": "another-password", "name": "Other"},
    )
    assert resp.status_code == 409
    assert resp.get_json() == {"success": False, "message": "Email already registered"}


def test_register_validation_error(client):
    resp = client.post("/api/auth/register", json={"email": "not-an-email", "password": "short"})
    assert resp.status_code == 422
    body = resp.get_json()
    assert body["success"] is False
    fields = {error["field"] for error in body["errors"]}
    assert {"email", "password", "name"} <= fields


def test_login(client, registered):
    resp = client.post("/api/auth/login", json={"email": "alice@example.com", "password": PASSWORD})
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["user"]["id"] == registered["user"]["id"]
    assert data["tokens"]["refreshToken"] != registered["tokens"]["refreshToken"]


def test_login_wrong_password_and_unknown_email_look_the_same(client, registered):
    wrong = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong-password"})
    unknown = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": PASSWORD})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.get_json() == unknown.get_json() == {"success": False, "message": "Invalid credentials"}


def test_refresh_returns_tokens_only(client, registered):
    resp = _refresh(client, registered["tokens"]["refreshToken"])
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["message"] == "Token refreshed successfully"
    assert set(body["data"]) == {"tokens"}


def test_refresh_rotation_scenario(client, registered):
    r1 = registered["tokens"]["refreshToken"]

    first = _refresh(client, r1)
    r2 = first.get_json()["data"]["tokens"]["refreshToken"]
    assert r2 != r1

    reused = _refresh(client, r1)
    assert reused.status_code == 401
    assert reused.get_json()["message"] == "Invalid refresh token"

    assert _refresh(client, r2).status_code == 200


def test_refresh_with_expired_row(client, registered):
    token = registered["tokens"]["refreshToken"]
    row = storage.find_one(RefreshToken, token=token)
    row.expires_at = utcnow() - timedelta(seconds=1)
    storage.save()

    expired = _refresh(client, token)
    assert expired.status_code == 401
    assert expired.get_json()["message"] == "Refresh token expired"

    again = _refresh(client, token)
    assert again.status_code == 401
    assert again.get_json()["message"] == "Invalid refresh token"


def test_refresh_requires_token(client):
    resp = client.post("/api/auth/refresh", json={})
    assert resp.status_code == 422
    assert resp.get_json()["errors"][0]["field"] == "refreshToken"


def test_refresh_with_access_token_is_rejected(client, registered):
    resp = _refresh(client, registered["tokens"]["accessToken"])
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid refresh token"


def test_logout_then_refresh_fails(client, registered):
    token = registered["tokens"]["refreshToken"]
    resp = client.post("/api/auth/logout", json={"refreshToken": token})
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "message": "Logged out successfully"}
    assert _refresh(client, token).status_code == 401


def test_logout_never_fails_on_missing_token(client):
    assert client.post("/api/auth/logout", json={"refreshToken": "unknown"}).status_code == 200
    assert client.post("/api/auth/logout", json={}).status_code == 200
    assert client.post("/api/auth/logout").status_code == 200


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json()["success"] is True


def test_unknown_route_uses_envelope(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.get_json()["success"] is False
