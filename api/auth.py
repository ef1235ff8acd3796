"""
Authentication blueprint:
- POST /api/auth/register
- POST /api/auth/login
- POST /api/auth/refresh
- POST /api/auth/logout
- GET  /api/auth/user

Views only load the request body and shape the response; all credential
work happens in services.CredentialService.
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify, current_app

from models.schemas.user import (
    LoginSchema,
    LogoutSchema,
    RefreshSchema,
    RegisterSchema,
    UserOutSchema,
)
from services.credentials import AuthResult, CredentialService
from utils.decorators import jwt_required

bp = Blueprint("auth", __name__, url_prefix="/auth")

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
logout_schema = LogoutSchema()
user_out_schema = UserOutSchema()


def _service() -> CredentialService:
    return current_app.extensions["credential_service"]


def _auth_response(result: AuthResult, message: str):
    return jsonify(
        {
            "success": True,
            "message": message,
            "access_token": result.access_token,
            "refresh_token": result.refresh_token,
            "token_type": "bearer",
            "expires_in": result.expires_in,
            "user": user_out_schema.dump(result.user),
        }
    ), 200


@bp.post("/register")
def register():
    """
    register a new user and issue a token pair.
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
          properties:
            username: { type: string }
            password: { type: string }
            confirmPassword: { type: string }
    responses:
      200:
        description: Registered (returns tokens)
      400:
        description: Missing fields or passwords do not match
      409:
        description: Username already exists
    """
    payload = request.get_json(silent=True) or {}
    data = register_schema.load(payload)
    result = _service().register(data["username"], data["password"], data["confirm_password"])
    return _auth_response(result, "Registration successful")


@bp.post("/login")
def login():
    """
    Login: return access_token and refresh_token
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
             username: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      401:
        description: Invalid credentials
    """
    payload = request.get_json(silent=True) or {}
    data = login_schema.load(payload)
    result = _service().login(data["username"], data["password"])
    return _auth_response(result, "Login successful")


@bp.post("/refresh")
def refresh():
    """
    Use a refresh token to obtain new access and refresh tokens (rotation)
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
             refresh_token: { type: string }
    responses:
      200:
        description: OK (returns a new token pair)
      401:
        description: Invalid refresh token
    """
    payload = request.get_json(silent=True) or {}
    data = refresh_schema.load(payload)
    result = _service().refresh(data["refresh_token"])
    return _auth_response(result, "Tokens refreshed successfully")


@bp.post("/logout")
def logout():
    """
    logout: revokes a refresh token
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
             refresh_token: { type: string }
    responses:
      204:
        description: ""
    """
    payload = request.get_json(silent=True) or {}
    data = logout_schema.load(payload)
    _service().logout(data.get("refresh_token"))
    return ("", 204)


@bp.get("/user")
@jwt_required()
def current_user(identity):
    """
    Get current user info.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    user_id, username = identity
    return jsonify(
        {
            "success": True,
            "message": "User data retrieved successfully",
            "user": user_out_schema.dump(_service().introspect(user_id, username)),
        }
    ), 200
