from marshmallow import Schema, fields, validate, validates, pre_load, post_load

from models.currently_reading import ReadingType
from models.schemas.common import strip_strings, validate_and_normalize_isbn, validate_not_future


class DroppedBookCreateSchema(Schema):
    title = fields.String(required=True, validate=validate.Length(min=1, max=200))
    author = fields.String(allow_none=True, validate=validate.Length(max=100))
    isbn = fields.String(allow_none=True)
    cover_image = fields.String(allow_none=True, validate=validate.Length(max=500))
    publisher = fields.String(allow_none=True, validate=validate.Length(max=100))
    published_date = fields.String(allow_none=True, validate=validate.Length(max=20))
    description = fields.String(allow_none=True)
    reading_type = fields.Enum(ReadingType, required=True)
    progress_percentage = fields.Integer(allow_none=True, validate=validate.Range(min=0, max=100))
    drop_reason = fields.String(required=True, validate=validate.Length(min=1, max=1000))
    started_date = fields.Date(allow_none=True)
    dropped_date = fields.Date(allow_none=True)
    memo = fields.String(allow_none=True, validate=validate.Length(max=1000))

    @pre_load
    def normalize(self, data, **kwargs):
        return strip_strings(data, "title", "author", "isbn", "drop_reason")

    @validates("dropped_date")
    def _validate_dropped_date(self, value, **kwargs):
        validate_not_future(value)

    @post_load
    def _normalize_isbn(self, data, **kwargs):
        if data.get("isbn"):
            data["isbn"] = validate_and_normalize_isbn(data["isbn"])
        return data


class DroppedBookUpdateSchema(DroppedBookCreateSchema):
    """Same rules as create, every field optional (load with partial=True)."""


class DroppedBookOutSchema(Schema):
    id = fields.String()
    title = fields.String()
    author = fields.String(allow_none=True)
    isbn = fields.String(allow_none=True)
    cover_image = fields.String(allow_none=True)
    publisher = fields.String(allow_none=True)
    published_date = fields.String(allow_none=True)
    description = fields.String(allow_none=True)
    reading_type = fields.Enum(ReadingType)
    reading_type_label = fields.String()
    progress_percentage = fields.Integer(allow_none=True)
    drop_reason = fields.String(allow_none=True)
    started_date = fields.Date(allow_none=True)
    dropped_date = fields.Date()
    memo = fields.String(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
