from marshmallow import Schema, fields, validate, pre_load

from models.schemas.common import strip_strings
from models.wishlist import DEFAULT_PRIORITY


class WishlistCreateSchema(Schema):
    title = fields.String(required=True, validate=validate.Length(min=1, max=200))
    author = fields.String(allow_none=True, validate=validate.Length(max=100))
    cover_image = fields.String(allow_none=True, validate=validate.Length(max=500))
    publisher = fields.String(allow_none=True, validate=validate.Length(max=100))
    published_date = fields.String(allow_none=True, validate=validate.Length(max=20))
    description = fields.String(allow_none=True)
    memo = fields.String(allow_none=True, validate=validate.Length(max=2000))
    priority = fields.Integer(load_default=DEFAULT_PRIORITY, validate=validate.Range(min=1, max=5))

    @pre_load
    def normalize(self, data, **kwargs):
        return strip_strings(data, "title", "author")


class WishlistUpdateSchema(WishlistCreateSchema):
    """Load with partial=True; priority is only changed when sent."""
    priority = fields.Integer(validate=validate.Range(min=1, max=5))


class WishlistOutSchema(Schema):
    id = fields.String()
    title = fields.String()
    author = fields.String(allow_none=True)
    cover_image = fields.String(allow_none=True)
    publisher = fields.String(allow_none=True)
    published_date = fields.String(allow_none=True)
    description = fields.String(allow_none=True)
    memo = fields.String(allow_none=True)
    priority = fields.Integer()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()


class WishlistMatchSchema(Schema):
    id = fields.String()
    title = fields.String()
    author = fields.String(allow_none=True)
    priority = fields.Integer()
    created_at = fields.DateTime()
