"""
Per-request principal extraction.

init_session_filter registers a before_request hook that reads the bearer
token and stores an AuthContext on flask.g for the duration of the request.
A bad token never fails the request here; the request just continues
unauthenticated and login_required() rejects it where authentication matters.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from flask import g, request, current_app

from services.errors import InvalidToken
from utils.security import decode_token, extract_bearer_token, ACCESS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthContext:
    user_id: str
    external_id: str | None = None


def is_public_path(path: str, prefixes) -> bool:
    if path == "/":
        return True
    return any(path.startswith(prefix) for prefix in prefixes)


def authenticate(header: str | None) -> AuthContext:
    """Build the principal from an Authorization header; raises InvalidToken."""
    token = extract_bearer_token(header)
    claims = decode_token(token)
    if claims.get("type") != ACCESS:
        raise InvalidToken("Only access tokens are accepted as bearer credentials")
    return AuthContext(user_id=claims["sub"], external_id=claims.get("external_id"))


def init_session_filter(app):
    @app.before_request
    def load_principal():
        g.auth = None
        if is_public_path(request.path, current_app.config.get("PUBLIC_PATH_PREFIXES", [])):
            return None

        header = request.headers.get("Authorization")
        if not header:
            return None
        try:
            g.auth = authenticate(header)
        except InvalidToken as exc:
            g.auth = None
            logger.warning("Rejected bearer token on %s %s: %s", request.method, request.path, exc.message)
        return None
