from marshmallow import Schema, fields, validate, pre_load

from models.book_review import ReviewStatus
from models.schemas.common import strip_strings
from models.schemas.user import UserSummarySchema


class BookReviewCreateSchema(Schema):
    monthly_book_id = fields.String(required=True, validate=validate.Length(min=1, max=36))
    rating = fields.Integer(load_default=5, validate=validate.Range(min=1, max=5))
    title = fields.String(required=True, validate=validate.Length(min=1, max=100))
    content = fields.String(required=True, validate=validate.Length(min=1, max=2000))
    favorite_quote = fields.String(allow_none=True, validate=validate.Length(max=500))
    recommendation = fields.String(allow_none=True, validate=validate.Length(max=1000))
    is_public = fields.Boolean(load_default=True)
    status = fields.Enum(ReviewStatus, load_default=ReviewStatus.PUBLISHED)

    @pre_load
    def normalize(self, data, **kwargs):
        return strip_strings(data, "title")


class BookReviewUpdateSchema(Schema):
    """Load with partial=True; the monthly book of a review never changes."""
    rating = fields.Integer(validate=validate.Range(min=1, max=5))
    title = fields.String(validate=validate.Length(min=1, max=100))
    content = fields.String(validate=validate.Length(min=1, max=2000))
    favorite_quote = fields.String(allow_none=True, validate=validate.Length(max=500))
    recommendation = fields.String(allow_none=True, validate=validate.Length(max=1000))
    is_public = fields.Boolean()
    status = fields.Enum(ReviewStatus)

    @pre_load
    def normalize(self, data, **kwargs):
        return strip_strings(data, "title")


class ReviewedBookSchema(Schema):
    id = fields.String()
    group_id = fields.String()
    year = fields.Integer()
    month = fields.Integer()
    book_title = fields.String()
    book_author = fields.String(allow_none=True)


class BookReviewOutSchema(Schema):
    id = fields.String()
    user = fields.Nested(UserSummarySchema)
    monthly_book = fields.Nested(ReviewedBookSchema)
    rating = fields.Integer()
    title = fields.String()
    content = fields.String(allow_none=True)
    favorite_quote = fields.String(allow_none=True)
    recommendation = fields.String(allow_none=True)
    status = fields.Enum(ReviewStatus)
    is_public = fields.Boolean()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
