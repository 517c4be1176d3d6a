from marshmallow import Schema, fields, validates, validate, pre_load

from models.schemas.common import validate_not_future, strip_strings


class BookCreateSchema(Schema):
    title = fields.String(required=True, validate=validate.Length(min=1, max=200))
    author = fields.String(required=True, validate=validate.Length(min=1, max=100))
    cover_image = fields.String(allow_none=True, validate=validate.Length(max=500))
    rating = fields.Integer(required=True, validate=validate.Range(min=1, max=5))
    review = fields.String(allow_none=True, validate=validate.Length(max=2000))
    finished_date = fields.Date(required=True)

    @pre_load
    def normalize(self, data, **kwargs):
        return strip_strings(data, "title", "author")

    @validates("finished_date")
    def _validate_finished_date(self, value, **kwargs):
        validate_not_future(value)


class BookUpdateSchema(BookCreateSchema):
    """Same rules as create, every field optional (load with partial=True)."""


class BookOutSchema(Schema):
    id = fields.String()
    title = fields.String()
    author = fields.String()
    cover_image = fields.String(allow_none=True)
    rating = fields.Integer()
    review = fields.String(allow_none=True)
    finished_date = fields.Date()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
