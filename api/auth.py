"""
Authentication blueprint:
- GET  /auth/<provider>/callback?code=  -> login through the OAuth provider
- POST /auth/refresh                    -> rotate a refresh token
- POST /auth/logout                     -> drop all refresh tokens of the caller
- GET  /auth/validate                   -> check an access token

Every path here is public to the session filter; logout and validate read the
Authorization header themselves.
"""
from __future__ import annotations

from flask import Blueprint, request, current_app, abort

from models.schemas.auth import RefreshRequestSchema, LoginResultSchema
from services.auth_service import AuthService
from services.identity import get_identity_client
from utils.security import extract_bearer_token
from utils.session import authenticate

from .errors import success_response

bp = Blueprint("auth", __name__, url_prefix="/api/auth")

refresh_request_schema = RefreshRequestSchema()
login_result_schema = LoginResultSchema()


@bp.get("/<provider>/callback")
def oauth_callback(provider):
    """
    OAuth callback: exchange the authorization code and log the user in.
    ---
    tags:
      - Auth
    parameters:
      - in: path
        name: provider
        type: string
        required: true
        description: Identity provider (kakao)
      - in: query
        name: code
        type: string
        required: true
    responses:
      200:
        description: Access token, refresh token, user and access-token expiry
      401:
        description: Login failed
      404:
        description: Unsupported provider
    """
    code = request.args.get("code", "").strip()
    if not code:
        abort(400, description="code is required")
    client = get_identity_client(provider, current_app.config)
    result = AuthService(identity_client=client).login(code)
    return success_response(login_result_schema.dump(result), "Login successful")


@bp.post("/refresh")
def refresh():
    """
    Exchange a refresh token for a new access/refresh pair.
    The presented refresh token is consumed.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            refresh_token: { type: string }
    responses:
      200:
        description: New token pair
      401:
        description: Invalid, unknown or expired refresh token
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = refresh_request_schema.load(payload)
    result = AuthService().refresh(data["refresh_token"])
    return success_response(login_result_schema.dump(result), "Token refreshed")


@bp.post("/logout")
def logout():
    """
    Logout: revoke every refresh token of the calling user.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: Logged out
      401:
        description: Missing or invalid access token
    """
    token = extract_bearer_token(request.headers.get("Authorization"))
    AuthService().logout(token)
    return success_response(None, "Logged out")


@bp.get("/validate")
def validate():
    """
    Check whether the bearer access token is valid.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: Token is valid
      401:
        description: Token is missing, invalid or expired
    """
    auth = authenticate(request.headers.get("Authorization"))
    return success_response({"valid": True, "user_id": auth.user_id}, "Token is valid")
