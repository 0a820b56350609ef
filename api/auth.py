"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/refresh
- POST /auth/logout

The routes only parse bodies and wrap results in the response envelope;
the session rules live in services.session_manager.
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify

from models.schemas.user import LoginSchema, LogoutSchema, RefreshTokenSchema, RegisterSchema
from services.session_manager import get_session_manager

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshTokenSchema()
logout_schema = LogoutSchema()


def _session_body(result: dict) -> dict:
    body = dict(result)
    body["tokens"] = result["tokens"].to_dict()
    return body


@bp.post("/register")
def register():
    """
    Register a new user and start a session.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [email, password, name]
          properties:
            email: { type: string }
            password: { type: string, minLength: 8 }
            name: { type: string }
    responses:
      201:
        description: Created, returns user and token pair
      409:
        description: Email already registered
      422:
        description: Validation error
    """
    data = register_schema.load(request.get_json(silent=True) or {})
    result = get_session_manager().register(data["email"], data["password"], data["name"])
    return jsonify(
        {
            "success": True,
            "message": "User registered successfully",
            "data": _session_body(result),
        }
    ), 201


@bp.post("/login")
def login():
    """
    Login: returns the user with an access/refresh token pair
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [email, password]
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      401:
        description: Invalid credentials
    """
    data = login_schema.load(request.get_json(silent=True) or {})
    result = get_session_manager().login(data["email"], data["password"])
    return jsonify(
        {
            "success": True,
            "message": "Login successful",
            "data": _session_body(result),
        }
    ), 200


@bp.post("/refresh")
def refresh():
    """
    Exchange a refresh token for a new token pair (rotation; the old token is consumed)
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [refreshToken]
           properties:
             refreshToken: { type: string }
    responses:
      200:
        description: New token pair
      401:
        description: Invalid or expired refresh token
    """
    data = refresh_schema.load(request.get_json(silent=True) or {})
    result = get_session_manager().refresh(data["refresh_token"])
    return jsonify(
        {
            "success": True,
            "message": "Token refreshed successfully",
            "data": _session_body(result),
        }
    ), 200


@bp.post("/logout")
def logout():
    """
    Logout: deletes the stored refresh token. Unknown tokens are not an error.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refreshToken: { type: string }
    responses:
      200:
        description: Logged out
    """
    data = logout_schema.load(request.get_json(silent=True) or {})
    result = get_session_manager().logout(data.get("refresh_token"))
    return jsonify({"success": True, "message": result["message"]}), 200
