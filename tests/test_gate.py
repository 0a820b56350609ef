"""The bearer-token gate in front of /api/tasks."""

from datetime import timedelta

import pytest

from utils.decorators import bearer_token
from utils.security import TokenCodec, TokenPayload


@pytest.mark.parametrize(
    "header, expected",
    [
        ("Bearer abc.def.ghi", "abc.def.ghi"),
        (None, None),
        ("", None),
        ("Bearer", None),
        ("Bearer ", None),
        ("bearer abc", None),
        ("Token abc", None),
        ("Bearer  abc", None),
        ("Bearer abc def", None),
    ],
)
def test_bearer_token_requires_exact_scheme(header, expected):
    assert bearer_token(header) == expected


def test_missing_header(client):
    resp = client.get("/api/tasks")
    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "message": "No token provided"}


def test_malformed_header(client, registered):
    token = registered["tokens"]["accessToken"]
    resp = client.get("/api/tasks", headers={"Authorization": f"Token {token}"})
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "No token provided"


def test_garbage_token(client):
    resp = client.get("/api/tasks", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid or expired token"


def test_refresh_token_is_not_an_access_token(client, registered):
    token = registered["tokens"]["refreshToken"]
    resp = client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid or expired token"


def test_expired_access_token(app, client, registered):
    expired_codec = TokenCodec(
        app.config["JWT_ACCESS_SECRET"],
        app.config["JWT_REFRESH_SECRET"],
        access_lifetime=timedelta(seconds=-30),
    )
    user = registered["user"]
    token = expired_codec.sign_access(TokenPayload(user["id"], user["email"]))
    resp = client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid or expired token"


def test_valid_token_passes(client, auth_headers):
    resp = client.get("/api/tasks", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json()["success"] is True


def test_auth_endpoints_need_no_token(client, registered):
    resp = client.post(
        "/api/auth/refresh",
        json={"refreshToken": registered["tokens"]["refreshToken"]},
    )
    assert resp.status_code == 200


def test_gate_sets_current_user_on_any_view(app, codec):
    from flask import g, jsonify

    from utils.decorators import auth_required

    @app.route("/api/whoami")
    @auth_required()
    def whoami():
        return jsonify({"userId": g.current_user.user_id, "email": g.current_user.email})

    token = codec.sign_access(TokenPayload("user-1", "bob@example.com"))
    client = app.test_client()
    resp = client.get("/api/whoami", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.get_json() == {"userId": "user-1", "email": "bob@example.com"}
    assert client.get("/api/whoami").status_code == 401
