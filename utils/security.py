"""
Token codec: signed JWTs via PyJWT.

- create_access_token / create_refresh_token issue HS256 tokens
- validate_token is a boolean check that never raises
- get_* accessors raise InvalidToken when the token does not verify
- extract_bearer_token parses an Authorization header value

Both token kinds carry a random jti, so two tokens issued for the same user in
the same second are still different values.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Dict, Any

import jwt
from flask import current_app

from services.errors import InvalidToken

ACCESS = "access"
REFRESH = "refresh"
BEARER_PREFIX = "Bearer "


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID)."""
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _encode(subject: str, token_type: str, lifetime, extra: Dict[str, Any] | None = None) -> str:
    now = _now()
    payload = {
        "iss": current_app.config.get("JWT_ISSUER", "reading-club-api"),
        "sub": str(subject),
        "iat": int(now.timestamp()),
        "exp": int((now + lifetime).timestamp()),
        "type": token_type,
        "jti": generate_jti(),
    }
    if extra:
        payload.update(extra)
    return jwt.encode(payload, current_app.config["JWT_SECRET"], algorithm=current_app.config["JWT_ALGORITHM"])


def create_access_token(user_id: str, external_id: str) -> str:
    return _encode(
        user_id,
        ACCESS,
        current_app.config["JWT_ACCESS_TOKEN_EXPIRES"],
        extra={"external_id": str(external_id)},
    )


def create_refresh_token(user_id: str) -> str:
    return _encode(user_id, REFRESH, current_app.config["JWT_REFRESH_TOKEN_EXPIRES"])


def decode_token(token: str) -> Dict[str, Any]:
    """
    Decode and verify a JWT (signature, expiry, issuer).
    Raises InvalidToken on any failure.
    """
    if not isinstance(token, str) or not token:
        raise InvalidToken("Token is missing")
    try:
        decoded = jwt.decode(
            token,
            current_app.config["JWT_SECRET"],
            algorithms=[current_app.config["JWT_ALGORITHM"]],
            issuer=current_app.config.get("JWT_ISSUER", "reading-club-api"),
            options={"require": ["sub", "exp", "type"]},
        )
    except jwt.ExpiredSignatureError:
        raise InvalidToken("Token expired")
    except jwt.InvalidTokenError as exc:
        raise InvalidToken(f"Invalid token: {exc}")
    return decoded


def validate_token(token: str) -> bool:
    try:
        decode_token(token)
    except InvalidToken:
        return False
    return True


def get_user_id(token: str) -> str:
    return decode_token(token)["sub"]


def get_external_id(token: str) -> str | None:
    return decode_token(token).get("external_id")


def get_token_type(token: str) -> str:
    return decode_token(token)["type"]


def get_expiry(token: str) -> datetime:
    """Expiry as a naive UTC datetime."""
    exp = decode_token(token)["exp"]
    return datetime.fromtimestamp(exp, tz=timezone.utc).replace(tzinfo=None)


def extract_bearer_token(header: str | None) -> str:
    if not header or not header.startswith(BEARER_PREFIX):
        raise InvalidToken("Missing or invalid Authorization header")
    token = header[len(BEARER_PREFIX):].strip()
    if not token:
        raise InvalidToken("Missing or invalid Authorization header")
    return token
