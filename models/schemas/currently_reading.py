from marshmallow import Schema, fields, validate, validates_schema, pre_load, ValidationError

from models.currently_reading import ReadingType
from models.schemas.common import strip_strings

progress_range = validate.Range(min=0, max=100)


class CurrentlyReadingCreateSchema(Schema):
    title = fields.String(required=True, validate=validate.Length(min=1, max=200))
    author = fields.String(allow_none=True, validate=validate.Length(max=100))
    cover_image = fields.String(allow_none=True, validate=validate.Length(max=500))
    publisher = fields.String(allow_none=True, validate=validate.Length(max=100))
    published_date = fields.String(allow_none=True, validate=validate.Length(max=20))
    description = fields.String(allow_none=True)
    reading_type = fields.Enum(ReadingType, required=True)
    due_date = fields.Date(allow_none=True)
    progress_percentage = fields.Integer(load_default=0, validate=progress_range)
    memo = fields.String(allow_none=True)

    @pre_load
    def normalize(self, data, **kwargs):
        return strip_strings(data, "title", "author")


class CurrentlyReadingUpdateSchema(CurrentlyReadingCreateSchema):
    """Load with partial=True."""
    progress_percentage = fields.Integer(validate=progress_range)


class ProgressUpdateSchema(Schema):
    progress_percentage = fields.Integer(validate=progress_range)
    memo = fields.String(allow_none=True)

    @validates_schema
    def _needs_something(self, data, **kwargs):
        if "progress_percentage" not in data and "memo" not in data:
            raise ValidationError("Send progress_percentage and/or memo.")


class CurrentlyReadingOutSchema(Schema):
    id = fields.String()
    title = fields.String()
    author = fields.String(allow_none=True)
    cover_image = fields.String(allow_none=True)
    publisher = fields.String(allow_none=True)
    published_date = fields.String(allow_none=True)
    description = fields.String(allow_none=True)
    reading_type = fields.Enum(ReadingType)
    reading_type_label = fields.String()
    due_date = fields.Date(allow_none=True)
    progress_percentage = fields.Integer()
    memo = fields.String(allow_none=True)
    is_overdue = fields.Method("get_is_overdue")
    created_at = fields.DateTime()
    updated_at = fields.DateTime()

    def get_is_overdue(self, obj):
        return obj.is_overdue()
