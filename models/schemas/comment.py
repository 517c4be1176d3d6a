from marshmallow import Schema, fields, validate, pre_load

from models.schemas.common import strip_strings
from models.schemas.user import UserSummarySchema


class CommentCreateSchema(Schema):
    content = fields.String(required=True, validate=validate.Length(min=1, max=1000))
    parent_id = fields.String(allow_none=True, load_default=None)

    @pre_load
    def normalize(self, data, **kwargs):
        return strip_strings(data, "content")


class CommentOutSchema(Schema):
    id = fields.String()
    post_id = fields.String()
    parent_id = fields.String(allow_none=True)
    content = fields.String()
    is_deleted = fields.Boolean()
    user = fields.Nested(UserSummarySchema)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
