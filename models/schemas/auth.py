"""
Schemas for the login flow:
- typed views of the identity provider's token and profile responses
- request/response bodies of the /auth endpoints

Provider responses are loaded with unknown=EXCLUDE: extra provider fields are
ignored, missing required ones fail the load.
"""
from marshmallow import Schema, fields, EXCLUDE, validate

from models.schemas.user import UserOutSchema


class KakaoTokenSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    access_token = fields.String(required=True, validate=validate.Length(min=1))
    token_type = fields.String()
    refresh_token = fields.String()
    expires_in = fields.Integer()
    scope = fields.String()


class KakaoProfileSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    nickname = fields.String(required=True, validate=validate.Length(min=1))
    profile_image_url = fields.String(allow_none=True, load_default=None)


class KakaoAccountSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    profile = fields.Nested(KakaoProfileSchema, required=True)


class KakaoUserSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    id = fields.Integer(required=True, strict=True)
    kakao_account = fields.Nested(KakaoAccountSchema, required=True)


class RefreshRequestSchema(Schema):
    refresh_token = fields.String(required=True, validate=validate.Length(min=1))


class LoginResultSchema(Schema):
    access_token = fields.String()
    refresh_token = fields.String()
    token_type = fields.Constant("bearer")
    expires_at = fields.DateTime()
    user = fields.Nested(UserOutSchema)
