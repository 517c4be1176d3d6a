from marshmallow import Schema, fields, pre_load, validate

from models.schemas.common import strip_strings


class UserOutSchema(Schema):
    id = fields.String()
    nickname = fields.String()
    profile_image = fields.String(allow_none=True)
    created_at = fields.DateTime()


class UserSummarySchema(Schema):
    """Author info embedded in posts, comments and member lists."""
    id = fields.String()
    nickname = fields.String()
    profile_image = fields.String(allow_none=True)


class UserUpdateSchema(Schema):
    nickname = fields.String(validate=validate.Length(min=1, max=50))
    profile_image = fields.String(allow_none=True, validate=validate.Length(max=500))

    @pre_load
    def normalize(self, data, **kwargs):
        return strip_strings(data, "nickname")
