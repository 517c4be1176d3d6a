"""
Login, token refresh and logout.

AuthService composes the identity client, the token codec (utils.security)
and the refresh-token store:

- login(code): provider exchange -> local user -> access + refresh pair
- refresh(token): rotate on use; the presented refresh token is consumed
- logout(access_token): drop every refresh token of the user
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

import models
from models.base_model import utcnow
from models.user import User
from services.errors import (
    ServiceError,
    LoginFailed,
    InvalidToken,
    TokenExpired,
)
from services.identity import resolve_or_create_user
from services.token_store import RefreshTokenStore
from utils.security import (
    create_access_token,
    create_refresh_token,
    validate_token,
    get_user_id,
    get_expiry,
    get_token_type,
    ACCESS,
    REFRESH,
)

logger = logging.getLogger(__name__)


@dataclass
class LoginResult:
    access_token: str
    refresh_token: str
    user: User
    expires_at: datetime


class AuthService:
    def __init__(self, identity_client=None, token_store=None, storage=None):
        self.identity_client = identity_client
        self.storage = storage or models.storage
        self.token_store = token_store or RefreshTokenStore(self.storage)

    def _issue_pair(self, user: User) -> LoginResult:
        access_token = create_access_token(user.id, user.external_id)
        refresh_token = create_refresh_token(user.id)
        refresh_lifetime = current_app.config["JWT_REFRESH_TOKEN_EXPIRES"]
        self.token_store.save(user.id, refresh_token, utcnow() + refresh_lifetime)
        return LoginResult(
            access_token=access_token,
            refresh_token=refresh_token,
            user=user,
            expires_at=get_expiry(access_token),
        )

    def login(self, code: str) -> LoginResult:
        try:
            provider_token = self.identity_client.exchange_code(code)
            profile = self.identity_client.fetch_profile(provider_token)
            user = resolve_or_create_user(profile, self.storage)
            result = self._issue_pair(user)
            self.storage.save()
        except (ServiceError, SQLAlchemyError) as exc:
            self.storage.rollback()
            logger.warning("Login failed: %s", exc)
            raise LoginFailed(f"Login failed: {exc}") from exc

        logger.info("User %s logged in", result.user.id)
        return result

    def refresh(self, refresh_token: str) -> LoginResult:
        if not validate_token(refresh_token) or get_token_type(refresh_token) != REFRESH:
            raise InvalidToken("Invalid refresh token")

        record = self.token_store.find_by_value(refresh_token)
        if record.is_expired():
            self.token_store.delete_by_value(refresh_token)
            self.storage.save()
            raise TokenExpired()

        user = self.storage.get(User, record.user_id)
        if user is None:
            self.token_store.delete_by_value(refresh_token)
            self.storage.save()
            raise InvalidToken("User no longer exists")

        self.token_store.delete_by_value(refresh_token)
        result = self._issue_pair(user)
        self.storage.save()
        logger.info("Rotated refresh token for user %s", user.id)
        return result

    def logout(self, access_token: str) -> int:
        if get_token_type(access_token) != ACCESS:
            raise InvalidToken("Logout needs an access token")
        user_id = get_user_id(access_token)
        removed = self.token_store.delete_all_for_user(user_id)
        self.storage.save()
        logger.info("User %s logged out (%d refresh tokens removed)", user_id, removed)
        return removed
