from marshmallow import Schema, fields, validate, validates_schema, post_load, ValidationError

from models.monthly_book import MonthlyBookStatus
from models.schemas.common import validate_and_normalize_isbn
from models.schemas.user import UserSummarySchema


class MonthlyBookCreateSchema(Schema):
    year = fields.Integer(required=True, validate=validate.Range(min=2000, max=2100))
    month = fields.Integer(required=True, validate=validate.Range(min=1, max=12))
    book_title = fields.String(required=True, validate=validate.Length(min=1, max=200))
    book_author = fields.String(allow_none=True, validate=validate.Length(max=100))
    book_isbn = fields.String(allow_none=True)
    book_cover_image = fields.String(allow_none=True, validate=validate.Length(max=500))
    book_publisher = fields.String(allow_none=True, validate=validate.Length(max=100))
    book_description = fields.String(allow_none=True)
    selection_reason = fields.String(allow_none=True, validate=validate.Length(max=1000))
    start_date = fields.Date(allow_none=True)
    end_date = fields.Date(allow_none=True)

    @validates_schema
    def _validate_dates(self, data, **kwargs):
        start, end = data.get("start_date"), data.get("end_date")
        if start and end and end < start:
            raise ValidationError("end_date must not be before start_date.", "end_date")

    @post_load
    def _normalize_isbn(self, data, **kwargs):
        if data.get("book_isbn"):
            data["book_isbn"] = validate_and_normalize_isbn(data["book_isbn"])
        return data


class MonthlyBookStatusSchema(Schema):
    status = fields.Enum(MonthlyBookStatus, required=True)


class MonthlyBookOutSchema(Schema):
    id = fields.String()
    group_id = fields.String()
    year = fields.Integer()
    month = fields.Integer()
    book_title = fields.String()
    book_author = fields.String(allow_none=True)
    book_isbn = fields.String(allow_none=True)
    book_cover_image = fields.String(allow_none=True)
    book_publisher = fields.String(allow_none=True)
    book_description = fields.String(allow_none=True)
    selected_by = fields.Nested(UserSummarySchema)
    selection_reason = fields.String(allow_none=True)
    start_date = fields.Date(allow_none=True)
    end_date = fields.Date(allow_none=True)
    status = fields.Enum(MonthlyBookStatus)
    created_at = fields.DateTime()
