from marshmallow import Schema, fields, validate, pre_load

from models.group_member import MemberRole, MemberStatus
from models.reading_group import GroupStatus, MeetingType, DEFAULT_MAX_MEMBERS
from models.schemas.common import strip_strings
from models.schemas.user import UserSummarySchema


class GroupCreateSchema(Schema):
    name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    description = fields.String(allow_none=True, validate=validate.Length(max=1000))
    max_members = fields.Integer(load_default=DEFAULT_MAX_MEMBERS, validate=validate.Range(min=2, max=100))
    is_public = fields.Boolean(load_default=True)

    book_title = fields.String(allow_none=True, validate=validate.Length(max=200))
    book_author = fields.String(allow_none=True, validate=validate.Length(max=100))
    book_publisher = fields.String(allow_none=True, validate=validate.Length(max=100))
    book_cover_image = fields.String(allow_none=True, validate=validate.Length(max=500))

    meeting_date_time = fields.DateTime(allow_none=True)
    duration_hours = fields.Integer(allow_none=True, validate=validate.Range(min=1, max=24))
    has_assignment = fields.Boolean(load_default=False)
    meeting_type = fields.Enum(MeetingType, allow_none=True)
    location = fields.String(allow_none=True, validate=validate.Length(max=200))
    meeting_url = fields.String(allow_none=True, validate=validate.Length(max=500))

    @pre_load
    def normalize(self, data, **kwargs):
        return strip_strings(data, "name")


class GroupUpdateSchema(GroupCreateSchema):
    """Load with partial=True; defaults are not applied to absent keys."""

    max_members = fields.Integer(validate=validate.Range(min=2, max=100))
    is_public = fields.Boolean()
    has_assignment = fields.Boolean()


class GroupOutSchema(Schema):
    id = fields.String()
    name = fields.String()
    description = fields.String(allow_none=True)
    creator = fields.Nested(UserSummarySchema)
    max_members = fields.Integer()
    member_count = fields.Method("get_member_count")
    is_public = fields.Boolean()
    status = fields.Enum(GroupStatus)
    book_title = fields.String(allow_none=True)
    book_author = fields.String(allow_none=True)
    book_publisher = fields.String(allow_none=True)
    book_cover_image = fields.String(allow_none=True)
    meeting_date_time = fields.DateTime(allow_none=True)
    duration_hours = fields.Integer(allow_none=True)
    has_assignment = fields.Boolean()
    meeting_type = fields.Enum(MeetingType, allow_none=True)
    location = fields.String(allow_none=True)
    meeting_url = fields.String(allow_none=True)
    created_at = fields.DateTime()

    def get_member_count(self, obj):
        return sum(1 for m in obj.members if m.status == MemberStatus.ACTIVE)


class GroupDetailSchema(GroupOutSchema):
    """Shown to members: includes the invite code."""
    invite_code = fields.String()


class InvitePreviewSchema(Schema):
    id = fields.String()
    name = fields.String()
    description = fields.String(allow_none=True)
    book_title = fields.String(allow_none=True)
    max_members = fields.Integer()
    member_count = fields.Method("get_member_count")

    def get_member_count(self, obj):
        return sum(1 for m in obj.members if m.status == MemberStatus.ACTIVE)


class JoinGroupSchema(Schema):
    introduction = fields.String(allow_none=True, validate=validate.Length(max=500))


class JoinByCodeSchema(JoinGroupSchema):
    invite_code = fields.String(required=True, validate=validate.Length(equal=8))

    @pre_load
    def normalize(self, data, **kwargs):
        data = strip_strings(data, "invite_code")
        if isinstance(data, dict) and isinstance(data.get("invite_code"), str):
            data["invite_code"] = data["invite_code"].upper()
        return data


class MemberOutSchema(Schema):
    id = fields.String()
    group_id = fields.String()
    user = fields.Nested(UserSummarySchema)
    role = fields.Enum(MemberRole)
    status = fields.Enum(MemberStatus)
    introduction = fields.String(allow_none=True)
    joined_at = fields.DateTime()
