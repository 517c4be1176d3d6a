import pytest
import requests

from models import storage
from models.user import User
from services import identity
from services.errors import UpstreamAuthError, NotFound
from services.identity import (
    ExternalProfile,
    KakaoOAuthClient,
    get_identity_client,
    resolve_or_create_user,
)
from tests.conftest import FakeKakaoHttp, FakeResponse, kakao_profile


@pytest.fixture
def http():
    return FakeKakaoHttp()


@pytest.fixture
def client_with(app, http):
    return KakaoOAuthClient.from_config(app.config, http=http)


class TestKakaoOAuthClient:
    def test_exchange_code_posts_form_with_timeout(self, app, http, client_with):
        assert client_with.exchange_code("auth-code") == "kakao-token"

        method, url, data, timeout = http.calls[0]
        assert method == "POST"
        assert url == app.config["KAKAO_TOKEN_URL"]
        assert data == {
            "grant_type": "authorization_code",
            "client_id": "test-client-id",
            "client_secret": "test-client-secret",
            "redirect_uri": "http://localhost/callback",
            "code": "auth-code",
        }
        assert timeout == app.config["OAUTH_TIMEOUT_SECONDS"]

    def test_exchange_code_rejects_error_status(self, http, client_with):
        http.token_response = FakeResponse(400, {"error": "invalid_grant"})

        with pytest.raises(UpstreamAuthError):
            client_with.exchange_code("bad-code")

    def test_exchange_code_requires_access_token(self, http, client_with):
        http.token_response = FakeResponse(200, {"token_type": "bearer"})

        with pytest.raises(UpstreamAuthError):
            client_with.exchange_code("auth-code")

    def test_exchange_code_wraps_transport_errors(self, http, client_with):
        http.token_response = requests.ConnectionError("connection refused")

        with pytest.raises(UpstreamAuthError):
            client_with.exchange_code("auth-code")

    def test_exchange_code_rejects_non_json_body(self, http, client_with):
        http.token_response = FakeResponse(200, None)

        with pytest.raises(UpstreamAuthError):
            client_with.exchange_code("auth-code")

    def test_fetch_profile(self, http, client_with):
        profile = client_with.fetch_profile("kakao-token")

        assert profile == ExternalProfile("12345", "Alice", "http://img.example/alice.png")
        method, _, headers, timeout = http.calls[0]
        assert method == "GET"
        assert headers == {"Authorization": "Bearer kakao-token"}
        assert timeout is not None

    def test_fetch_profile_without_image(self, http, client_with):
        body = kakao_profile()
        del body["kakao_account"]["profile"]["profile_image_url"]
        http.profile_response = FakeResponse(200, body)

        assert client_with.fetch_profile("kakao-token").profile_image_url is None

    @pytest.mark.parametrize("body", [
        {"kakao_account": {"profile": {"nickname": "Alice"}}},
        {"id": 1},
        {"id": 1, "kakao_account": {}},
        {"id": 1, "kakao_account": {"profile": {}}},
        {"id": "not-a-number", "kakao_account": {"profile": {"nickname": "Alice"}}},
    ])
    def test_fetch_profile_rejects_unusable_identity(self, http, client_with, body):
        http.profile_response = FakeResponse(200, body)

        with pytest.raises(UpstreamAuthError):
            client_with.fetch_profile("kakao-token")

    def test_fetch_profile_rejects_error_status(self, http, client_with):
        http.profile_response = FakeResponse(500, {"msg": "internal"})

        with pytest.raises(UpstreamAuthError):
            client_with.fetch_profile("kakao-token")

    def test_unknown_provider(self, app):
        with pytest.raises(NotFound):
            get_identity_client("github", app.config)

    def test_known_provider(self, app):
        assert isinstance(get_identity_client("kakao", app.config), KakaoOAuthClient)


class TestResolveOrCreateUser:
    def test_creates_user_on_first_login(self, app):
        user = resolve_or_create_user(ExternalProfile("42", "Alice", "http://img/a.png"))
        storage.save()

        assert user.external_id == "42"
        assert user.nickname == "Alice"
        assert user.profile_image == "http://img/a.png"
        assert storage.count(User) == 1

    def test_returns_existing_user(self, app):
        first = resolve_or_create_user(ExternalProfile("42", "Alice"))
        storage.save()
        again = resolve_or_create_user(ExternalProfile("42", "Renamed upstream"))

        assert again.id == first.id
        assert again.nickname == "Alice"
        assert storage.count(User) == 1

    def test_nickname_suffixes(self, app):
        nicknames = []
        for external_id in ("1", "2", "3"):
            nicknames.append(resolve_or_create_user(ExternalProfile(external_id, "Alice")).nickname)
            storage.save()

        assert nicknames == ["Alice", "Alice1", "Alice2"]

    def test_blank_display_name_gets_default(self, app):
        assert resolve_or_create_user(ExternalProfile("1", "   ")).nickname == "reader"

    def test_retries_when_nickname_is_taken_concurrently(self, app, monkeypatch):
        storage.new(User(external_id="other", nickname="Bob"))
        storage.save()

        real_lookup = identity.next_free_nickname
        lookups = []

        def stale_lookup(session, base, start=0):
            lookups.append(start)
            if len(lookups) == 1:
                # another request inserted "Bob" after this one looked
                return base, start
            return real_lookup(session, base, start)

        monkeypatch.setattr(identity, "next_free_nickname", stale_lookup)

        user = resolve_or_create_user(ExternalProfile("new", "Bob"))
        storage.save()

        assert user.nickname == "Bob1"
        assert lookups == [0, 1]
