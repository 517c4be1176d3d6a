from marshmallow import Schema, fields, validate

from models.group_meeting import MeetingStatus
from models.schemas.user import UserSummarySchema


class MeetingCreateSchema(Schema):
    title = fields.String(required=True, validate=validate.Length(min=1, max=100))
    description = fields.String(allow_none=True, validate=validate.Length(max=1000))
    meeting_date_time = fields.DateTime(required=True)
    location = fields.String(allow_none=True, validate=validate.Length(max=200))
    agenda = fields.String(allow_none=True, validate=validate.Length(max=2000))
    monthly_book_id = fields.String(allow_none=True)


class MeetingUpdateSchema(MeetingCreateSchema):
    """Load with partial=True."""

    status = fields.Enum(MeetingStatus)


class MeetingOutSchema(Schema):
    id = fields.String()
    group_id = fields.String()
    monthly_book_id = fields.String(allow_none=True)
    title = fields.String()
    description = fields.String(allow_none=True)
    meeting_date_time = fields.DateTime()
    location = fields.String(allow_none=True)
    agenda = fields.String(allow_none=True)
    status = fields.Enum(MeetingStatus)
    created_by = fields.Nested(UserSummarySchema)
    created_at = fields.DateTime()
