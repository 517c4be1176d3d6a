import itertools
import os

# Select the in-memory database before models/__init__.py builds the storage singleton
os.environ["APP_ENV"] = "test"
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest  # noqa: E402
import requests  # noqa: E402

from api import create_app  # noqa: E402
from models import storage  # noqa: E402
from models.user import User  # noqa: E402
from utils.security import create_access_token  # noqa: E402


class FakeResponse:
    """Just enough of requests.Response for the OAuth client."""

    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


def kakao_profile(kakao_id=12345, nickname="Alice", image="http://img.example/alice.png"):
    return {
        "id": kakao_id,
        "connected_at": "2024-01-01T00:00:00Z",
        "kakao_account": {
            "profile_nickname_needs_agreement": False,
            "profile": {"nickname": nickname, "profile_image_url": image},
        },
    }


class FakeKakaoHttp:
    """Stands in for requests.Session; records calls and replays canned responses."""

    def __init__(self, token_response=None, profile_response=None):
        self.token_response = token_response or FakeResponse(200, {"access_token": "kakao-token", "token_type": "bearer"})
        self.profile_response = profile_response or FakeResponse(200, kakao_profile())
        self.calls = []

    def post(self, url, data=None, timeout=None, **kwargs):
        self.calls.append(("POST", url, data, timeout))
        if isinstance(self.token_response, Exception):
            raise self.token_response
        return self.token_response

    def get(self, url, headers=None, timeout=None, **kwargs):
        self.calls.append(("GET", url, headers, timeout))
        if isinstance(self.profile_response, Exception):
            raise self.profile_response
        return self.profile_response


@pytest.fixture
def app():
    app = create_app("test")
    with app.app_context():
        storage.reset()
        yield app
        storage.close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def kakao_http(monkeypatch):
    """Route every requests.Session call made by the app through a FakeKakaoHttp."""
    fake = FakeKakaoHttp()
    monkeypatch.setattr(requests.Session, "post", lambda self, url, **kw: fake.post(url, **kw))
    monkeypatch.setattr(requests.Session, "get", lambda self, url, **kw: fake.get(url, **kw))
    return fake


@pytest.fixture
def make_user(app):
    counter = itertools.count(1)

    def _make(nickname=None):
        n = next(counter)
        user = User(external_id=f"ext-{n}", nickname=nickname or f"reader{n}")
        storage.new(user)
        storage.save()
        return user

    return _make


@pytest.fixture
def auth_headers(app):
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(user.id, user.external_id)}"}

    return _headers
