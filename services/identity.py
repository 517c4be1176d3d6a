"""
Identity resolution against the OAuth provider.

KakaoOAuthClient performs the two outbound calls of the authorization-code
flow (code -> provider token -> profile). resolve_or_create_user maps the
provider profile onto a local User, creating one on first login.
"""
from __future__ import annotations

import logging
from typing import NamedTuple

import requests
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError

import models
from models.user import User
from models.schemas.auth import KakaoTokenSchema, KakaoUserSchema
from services.errors import UpstreamAuthError, NotFound, Conflict

logger = logging.getLogger(__name__)

NICKNAME_BASE_MAX = 40
MAX_CREATE_ATTEMPTS = 5
DEFAULT_NICKNAME = "reader"

kakao_token_schema = KakaoTokenSchema()
kakao_user_schema = KakaoUserSchema()


class ExternalProfile(NamedTuple):
    external_id: str
    display_name: str
    profile_image_url: str | None = None


class KakaoOAuthClient:
    provider = "kakao"

    def __init__(self, client_id, client_secret, redirect_uri, token_url, profile_url,
                 timeout=10, http=None):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.token_url = token_url
        self.profile_url = profile_url
        self.timeout = timeout
        self.http = http or requests.Session()

    @classmethod
    def from_config(cls, config, http=None):
        return cls(
            client_id=config["KAKAO_CLIENT_ID"],
            client_secret=config["KAKAO_CLIENT_SECRET"],
            redirect_uri=config["KAKAO_REDIRECT_URI"],
            token_url=config["KAKAO_TOKEN_URL"],
            profile_url=config["KAKAO_PROFILE_URL"],
            timeout=config.get("OAUTH_TIMEOUT_SECONDS", 10),
            http=http,
        )

    def _json(self, response, what: str) -> dict:
        if not response.ok:
            logger.warning("Kakao %s request failed with HTTP %s", what, response.status_code)
            raise UpstreamAuthError(f"Kakao {what} request failed with HTTP {response.status_code}")
        try:
            return response.json()
        except ValueError:
            raise UpstreamAuthError(f"Kakao {what} response is not JSON")

    def exchange_code(self, code: str) -> str:
        """Trade an authorization code for a provider access token."""
        try:
            response = self.http.post(
                self.token_url,
                data={
                    "grant_type": "authorization_code",
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "redirect_uri": self.redirect_uri,
                    "code": code,
                },
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise UpstreamAuthError(f"Kakao token request failed: {exc}")

        body = self._json(response, "token")
        try:
            return kakao_token_schema.load(body)["access_token"]
        except ValidationError as err:
            raise UpstreamAuthError("Kakao token response has no access_token", details=err.messages)

    def fetch_profile(self, access_token: str) -> ExternalProfile:
        try:
            response = self.http.get(
                self.profile_url,
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise UpstreamAuthError(f"Kakao profile request failed: {exc}")

        body = self._json(response, "profile")
        try:
            data = kakao_user_schema.load(body)
        except ValidationError as err:
            raise UpstreamAuthError("Kakao profile response is missing required fields", details=err.messages)

        profile = data["kakao_account"]["profile"]
        return ExternalProfile(
            external_id=str(data["id"]),
            display_name=profile["nickname"],
            profile_image_url=profile.get("profile_image_url"),
        )


PROVIDERS = {
    KakaoOAuthClient.provider: KakaoOAuthClient,
}


def get_identity_client(provider: str, config):
    client_cls = PROVIDERS.get((provider or "").lower())
    if client_cls is None:
        raise NotFound(f"Unsupported identity provider: {provider}")
    return client_cls.from_config(config)


def next_free_nickname(session, base: str, start: int = 0) -> tuple[str, int]:
    """
    First unused nickname in the sequence base, base1, base2, ...
    starting at position `start`. Returns (nickname, position).
    """
    n = start
    while True:
        candidate = base if n == 0 else f"{base}{n}"
        if session.query(User.id).filter(User.nickname == candidate).first() is None:
            return candidate, n
        n += 1


def resolve_or_create_user(profile: ExternalProfile, storage=None) -> User:
    """
    Return the user bound to profile.external_id, creating it on first login.

    The new row is flushed, not committed; the caller commits. A unique
    violation on flush means another request won a race: either for the same
    external id (its user is returned) or for the nickname (the next suffix is
    tried).
    """
    storage = storage or models.storage
    session = storage.get_session()

    user = session.query(User).filter(User.external_id == profile.external_id).first()
    if user is not None:
        return user

    base = (profile.display_name or "").strip()[:NICKNAME_BASE_MAX] or DEFAULT_NICKNAME
    position = 0
    for _ in range(MAX_CREATE_ATTEMPTS):
        nickname, position = next_free_nickname(session, base, position)
        user = User(
            external_id=profile.external_id,
            nickname=nickname,
            profile_image=profile.profile_image_url,
        )
        storage.new(user)
        try:
            session.flush()
        except IntegrityError:
            storage.rollback()
            existing = session.query(User).filter(User.external_id == profile.external_id).first()
            if existing is not None:
                return existing
            position += 1
            continue
        logger.info("Created user %s with nickname %r", user.id, nickname)
        return user

    raise Conflict("Could not allocate a unique nickname")
