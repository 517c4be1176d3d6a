from datetime import timedelta

import jwt
import pytest

from models.base_model import utcnow
from services.errors import InvalidToken
from utils.security import (
    create_access_token,
    create_refresh_token,
    validate_token,
    get_user_id,
    get_external_id,
    get_expiry,
    get_token_type,
    extract_bearer_token,
)


class TestTokenCodec:
    def test_access_token_round_trip(self, app):
        token = create_access_token("user-1", "kakao-99")

        assert validate_token(token) is True
        assert get_user_id(token) == "user-1"
        assert get_external_id(token) == "kakao-99"
        assert get_token_type(token) == "access"

    def test_refresh_token_has_no_external_id(self, app):
        token = create_refresh_token("user-1")

        assert get_user_id(token) == "user-1"
        assert get_token_type(token) == "refresh"
        assert get_external_id(token) is None

    def test_tokens_issued_back_to_back_differ(self, app):
        assert create_refresh_token("user-1") != create_refresh_token("user-1")
        assert create_access_token("user-1", "k") != create_access_token("user-1", "k")

    def test_expiry_follows_config(self, app):
        token = create_access_token("user-1", "k")
        expected = utcnow() + app.config["JWT_ACCESS_TOKEN_EXPIRES"]

        assert abs((get_expiry(token) - expected).total_seconds()) < 5

    def test_expired_token_is_rejected(self, app, monkeypatch):
        monkeypatch.setitem(app.config, "JWT_ACCESS_TOKEN_EXPIRES", timedelta(seconds=-10))
        token = create_access_token("user-1", "k")

        assert validate_token(token) is False
        with pytest.raises(InvalidToken):
            get_user_id(token)

    def test_token_signed_with_other_secret_is_rejected(self, app):
        token = create_access_token("user-1", "k")
        claims = jwt.decode(token, options={"verify_signature": False})
        forged = jwt.encode(claims, "another-secret", algorithm="HS256")

        assert validate_token(forged) is False
        with pytest.raises(InvalidToken):
            get_token_type(forged)

    @pytest.mark.parametrize("value", ["", "not-a-token", "a.b.c", None, 42])
    def test_malformed_values_are_invalid(self, app, value):
        assert validate_token(value) is False
        with pytest.raises(InvalidToken):
            get_user_id(value)


class TestBearerExtraction:
    def test_extracts_token(self):
        assert extract_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"

    @pytest.mark.parametrize("header", [None, "", "abc", "Token abc", "bearer abc", "Bearer ", "Bearer    "])
    def test_rejects_malformed_headers(self, header):
        with pytest.raises(InvalidToken):
            extract_bearer_token(header)
