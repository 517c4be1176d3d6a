from datetime import timedelta

import pytest

from utils.security import create_access_token, create_refresh_token
from utils.session import is_public_path


class TestPublicPaths:
    @pytest.mark.parametrize("path", ["/", "/api/auth/kakao/callback", "/api/health", "/apidocs/", "/swagger.json"])
    def test_public(self, app, path):
        assert is_public_path(path, app.config["PUBLIC_PATH_PREFIXES"])

    @pytest.mark.parametrize("path", ["/api/users/me", "/api/books", "/api/authx", "/apis"])
    def test_protected(self, app, path):
        assert not is_public_path(path, app.config["PUBLIC_PATH_PREFIXES"])


class TestSessionFilter:
    def test_public_routes_need_no_token(self, client):
        assert client.get("/api/health").status_code == 200
        root = client.get("/")
        assert root.status_code == 200
        assert root.get_json()["success"] is True

    def test_missing_token_is_rejected(self, client):
        resp = client.get("/api/users/me")

        assert resp.status_code == 401
        body = resp.get_json()
        assert body["success"] is False
        assert body["data"]["error"] == "UNAUTHORIZED"
        assert body["timestamp"]

    def test_valid_access_token(self, client, make_user, auth_headers):
        user = make_user("Alice")

        resp = client.get("/api/users/me", headers=auth_headers(user))

        assert resp.status_code == 200
        assert resp.get_json()["data"]["nickname"] == "Alice"

    def test_refresh_token_is_not_a_bearer_credential(self, client, make_user):
        user = make_user()
        token = create_refresh_token(user.id)

        resp = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})

        assert resp.status_code == 401

    def test_expired_access_token(self, app, client, make_user, monkeypatch):
        user = make_user()
        monkeypatch.setitem(app.config, "JWT_ACCESS_TOKEN_EXPIRES", timedelta(seconds=-5))
        token = create_access_token(user.id, user.external_id)

        resp = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})

        assert resp.status_code == 401

    @pytest.mark.parametrize("header", ["Token abc", "Bearer", "Bearer not.a.jwt"])
    def test_malformed_header(self, client, header):
        resp = client.get("/api/users/me", headers={"Authorization": header})

        assert resp.status_code == 401

    def test_unknown_route_keeps_envelope(self, client, make_user, auth_headers):
        resp = client.get("/api/does-not-exist", headers=auth_headers(make_user()))

        assert resp.status_code == 404
        assert resp.get_json()["success"] is False
