from marshmallow import (
    Schema,
    fields,
    validate,
    validates_schema,
    post_load,
    pre_load,
    ValidationError,
)

from models.post import PostType, Visibility, RecommendationType
from models.schemas.common import validate_and_normalize_isbn, strip_strings
from models.schemas.user import UserSummarySchema


class QuoteSchema(Schema):
    page = fields.Integer(required=True, validate=validate.Range(min=1))
    text = fields.String(required=True, validate=validate.Length(min=1, max=1000))


class PostCreateSchema(Schema):
    post_type = fields.Enum(PostType, required=True)
    visibility = fields.Enum(Visibility, load_default=Visibility.PUBLIC)

    book_isbn = fields.String(allow_none=True)
    book_title = fields.String(required=True, validate=validate.Length(min=1, max=200))
    book_author = fields.String(allow_none=True, validate=validate.Length(max=100))
    book_publisher = fields.String(allow_none=True, validate=validate.Length(max=100))
    book_cover = fields.String(allow_none=True, validate=validate.Length(max=500))
    book_pub_date = fields.Date(allow_none=True)
    book_description = fields.String(allow_none=True)

    title = fields.String(allow_none=True, validate=validate.Length(max=200))
    content = fields.String(allow_none=True, validate=validate.Length(max=5000))
    recommendation_type = fields.Enum(RecommendationType, allow_none=True)
    reason = fields.String(allow_none=True, validate=validate.Length(max=2000))
    quotes = fields.List(fields.Nested(QuoteSchema), allow_none=True)

    @pre_load
    def normalize(self, data, **kwargs):
        return strip_strings(data, "book_title", "title")

    @validates_schema
    def _validate_by_type(self, data, partial=False, **kwargs):
        if partial:
            # updates are checked by the service against the merged post
            return
        validate_post_fields(data["post_type"], data)

    @post_load
    def _normalize(self, data, **kwargs):
        if data.get("book_isbn"):
            data["book_isbn"] = validate_and_normalize_isbn(data["book_isbn"])
        if data.get("quotes"):
            data["quotes"] = sorted(data["quotes"], key=lambda q: q["page"])
        return data


class PostUpdateSchema(PostCreateSchema):
    """Load with partial=True."""


def validate_post_fields(post_type: PostType, data: dict) -> None:
    """Each post type carries its own required body fields."""
    if post_type == PostType.REVIEW:
        if not data.get("title"):
            raise ValidationError("Review posts need a title.", "title")
        if not data.get("content"):
            raise ValidationError("Review posts need content.", "content")
    elif post_type == PostType.RECOMMENDATION:
        if data.get("recommendation_type") is None:
            raise ValidationError("Recommendation posts need a recommendation_type.", "recommendation_type")
        if not data.get("reason"):
            raise ValidationError("Recommendation posts need a reason.", "reason")
    elif post_type == PostType.QUOTE:
        if not data.get("quotes"):
            raise ValidationError("Quote posts need at least one quote.", "quotes")


class PostOutSchema(Schema):
    id = fields.String()
    post_type = fields.Enum(PostType)
    visibility = fields.Enum(Visibility)
    book_isbn = fields.String(allow_none=True)
    book_title = fields.String()
    book_author = fields.String(allow_none=True)
    book_publisher = fields.String(allow_none=True)
    book_cover = fields.String(allow_none=True)
    book_pub_date = fields.Date(allow_none=True)
    book_description = fields.String(allow_none=True)
    title = fields.String(allow_none=True)
    content = fields.String(allow_none=True)
    recommendation_type = fields.Enum(RecommendationType, allow_none=True)
    reason = fields.String(allow_none=True)
    quotes = fields.List(fields.Dict(), allow_none=True)
    user = fields.Nested(UserSummarySchema)
    comment_count = fields.Method("get_comment_count")
    created_at = fields.DateTime()
    updated_at = fields.DateTime()

    def get_comment_count(self, obj):
        return sum(1 for c in obj.comments if not c.is_deleted)
