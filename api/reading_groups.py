"""
Reading groups:
- create / update / archive
- public listing and search, my groups
- invite codes: preview, join, regenerate
"""
from __future__ import annotations

from flask import Blueprint, request

from models.schemas.reading_group import (
    GroupCreateSchema,
    GroupUpdateSchema,
    GroupOutSchema,
    GroupDetailSchema,
    InvitePreviewSchema,
    JoinByCodeSchema,
    MemberOutSchema,
)
from services import group_service
from services.membership import is_member
from utils.decorators import login_required

from .errors import success_response
from .utils.pagination import parse_pagination, page_payload

bp = Blueprint("reading_groups", __name__, url_prefix="/api/reading-groups")

group_create_schema = GroupCreateSchema()
group_update_schema = GroupUpdateSchema()
group_out_schema = GroupOutSchema()
groups_out_schema = GroupOutSchema(many=True)
group_detail_schema = GroupDetailSchema()
invite_preview_schema = InvitePreviewSchema()
join_by_code_schema = JoinByCodeSchema()
member_out_schema = MemberOutSchema()


def dump_group(group, user_id: str) -> dict:
    """Members see the invite code; everyone else gets the public view."""
    if is_member(group.id, user_id):
        return group_detail_schema.dump(group)
    return group_out_schema.dump(group)


@bp.post("")
@login_required()
def create_group(auth):
    """
    Create a reading group; the caller becomes its CREATOR
    A name already used by an active group gets a numeric suffix ("Name 1").
    ---
    tags:
      - Reading Groups
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [name]
          properties:
            name: { type: string, maxLength: 100 }
            description: { type: string }
            max_members: { type: integer, default: 20 }
            is_public: { type: boolean, default: true }
            book_title: { type: string }
            meeting_date_time: { type: string, format: date-time }
            meeting_type: { type: string, enum: [ONLINE, OFFLINE] }
    responses:
      201:
        description: Created
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = group_create_schema.load(payload)
    group = group_service.create_group(auth.user_id, data)
    return success_response(group_detail_schema.dump(group), "Reading group created", 201)


@bp.get("/public")
@login_required()
def list_public_groups(auth):
    """
    Active public groups, optionally filtered by ?q
    ---
    tags:
      - Reading Groups
    security:
      - Bearer: []
    parameters:
      - { in: query, name: q, type: string }
      - { in: query, name: page, type: integer, default: 1 }
      - { in: query, name: size, type: integer, default: 20 }
    responses:
      200:
        description: OK
    """
    page, size = parse_pagination()
    result = group_service.list_public_groups(page, size, q=request.args.get("q"))
    return success_response(page_payload(result, groups_out_schema.dump))


@bp.get("/my")
@login_required()
def my_groups(auth):
    """
    Groups I am an active member of
    ---
    tags:
      - Reading Groups
    security:
      - Bearer: []
    responses:
      200:
        description: OK
    """
    groups = group_service.list_my_groups(auth.user_id)
    return success_response([group_detail_schema.dump(g) for g in groups])


@bp.get("/invite/<code>")
@login_required()
def preview_invite(auth, code):
    """
    Look up a group by invite code before joining
    ---
    tags:
      - Reading Groups
    security:
      - Bearer: []
    parameters:
      - { in: path, name: code, type: string, required: true }
    responses:
      200:
        description: OK
      404:
        description: Invalid invite code
    """
    group = group_service.get_group_by_invite_code(code)
    return success_response(invite_preview_schema.dump(group))


@bp.post("/join")
@login_required()
def join_by_code(auth):
    """
    Join a group with its invite code
    ---
    tags:
      - Reading Groups
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [invite_code]
          properties:
            invite_code: { type: string, minLength: 8, maxLength: 8 }
            introduction: { type: string }
    responses:
      201:
        description: Joined
      404:
        description: Invalid invite code
      409:
        description: Already a member, or the group is full
    """
    payload = request.get_json(silent=True) or {}
    data = join_by_code_schema.load(payload)
    membership = group_service.join_by_invite_code(data["invite_code"], auth.user_id, data.get("introduction"))
    return success_response(member_out_schema.dump(membership), "Joined the group", 201)


@bp.get("/<group_id>")
@login_required()
def get_group(auth, group_id):
    """
    Group details (private groups: members only)
    ---
    tags:
      - Reading Groups
    security:
      - Bearer: []
    parameters:
      - { in: path, name: group_id, type: string, required: true }
    responses:
      200:
        description: OK
      403:
        description: Private group
      404:
        description: Not found
    """
    group = group_service.get_group_for_user(group_id, auth.user_id)
    return success_response(dump_group(group, auth.user_id))


@bp.put("/<group_id>")
@login_required()
def update_group(auth, group_id):
    """
    Update group settings (admins only)
    ---
    tags:
      - Reading Groups
    security:
      - Bearer: []
    parameters:
      - { in: path, name: group_id, type: string, required: true }
      - in: body
        name: body
        schema:
          type: object
    responses:
      200:
        description: Updated
      403:
        description: Not an admin
      409:
        description: Name already used
    """
    payload = request.get_json(silent=True) or {}
    data = group_update_schema.load(payload, partial=True)
    group = group_service.update_group(group_id, auth.user_id, data)
    return success_response(group_detail_schema.dump(group), "Reading group updated")


@bp.delete("/<group_id>")
@login_required()
def delete_group(auth, group_id):
    """
    Archive a group (creator only)
    ---
    tags:
      - Reading Groups
    security:
      - Bearer: []
    parameters:
      - { in: path, name: group_id, type: string, required: true }
    responses:
      200:
        description: Archived
      403:
        description: Not the creator
    """
    group_service.archive_group(group_id, auth.user_id)
    return success_response(None, "Reading group deleted")


@bp.post("/<group_id>/leave")
@login_required()
def leave_group(auth, group_id):
    """
    Leave a group
    ---
    tags:
      - Reading Groups
    security:
      - Bearer: []
    parameters:
      - { in: path, name: group_id, type: string, required: true }
    responses:
      200:
        description: Left the group
      409:
        description: The creator cannot leave
    """
    group_service.leave_group(group_id, auth.user_id)
    return success_response(None, "Left the group")


@bp.post("/<group_id>/regenerate-invite-code")
@login_required()
def regenerate_invite_code(auth, group_id):
    """
    Issue a new invite code (admins only)
    ---
    tags:
      - Reading Groups
    security:
      - Bearer: []
    parameters:
      - { in: path, name: group_id, type: string, required: true }
    responses:
      200:
        description: New code
      403:
        description: Not an admin
    """
    group = group_service.regenerate_invite_code(group_id, auth.user_id)
    return success_response({"invite_code": group.invite_code}, "Invite code regenerated")
