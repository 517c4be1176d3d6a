from __future__ import annotations

from flask import Blueprint, request

from models.schemas.reading_group import JoinGroupSchema, JoinByCodeSchema, MemberOutSchema
from services import group_service
from utils.decorators import login_required

from .errors import success_response

bp = Blueprint("group_members", __name__, url_prefix="/api/reading-groups/<group_id>/members")

join_group_schema = JoinGroupSchema()
join_by_code_schema = JoinByCodeSchema()
member_out_schema = MemberOutSchema()
members_out_schema = MemberOutSchema(many=True)


@bp.post("/join")
@login_required()
def join(auth, group_id):
    """
    Join a public group
    ---
    tags:
      - Group Members
    security:
      - Bearer: []
    parameters:
      - { in: path, name: group_id, type: string, required: true }
      - in: body
        name: body
        schema:
          type: object
          properties:
            introduction: { type: string }
    responses:
      201:
        description: Joined
      403:
        description: Private group
      409:
        description: Already a member, group full, or group not active
    """
    payload = request.get_json(silent=True) or {}
    data = join_group_schema.load(payload)
    membership = group_service.join_public_group(group_id, auth.user_id, data.get("introduction"))
    return success_response(member_out_schema.dump(membership), "Joined the group", 201)


@bp.post("/join-by-code")
@login_required()
def join_by_code(auth, group_id):
    """
    Join with an invite code
    ---
    tags:
      - Group Members
    security:
      - Bearer: []
    parameters:
      - { in: path, name: group_id, type: string, required: true }
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [invite_code]
          properties:
            invite_code: { type: string }
            introduction: { type: string }
    responses:
      201:
        description: Joined
      404:
        description: Invalid invite code
    """
    payload = request.get_json(silent=True) or {}
    data = join_by_code_schema.load(payload)
    membership = group_service.join_by_invite_code(
        data["invite_code"], auth.user_id, data.get("introduction"), group_id=group_id
    )
    return success_response(member_out_schema.dump(membership), "Joined the group", 201)


@bp.get("")
@login_required()
def list_members(auth, group_id):
    """
    Active members (private groups: members only)
    ---
    tags:
      - Group Members
    security:
      - Bearer: []
    parameters:
      - { in: path, name: group_id, type: string, required: true }
    responses:
      200:
        description: OK
      403:
        description: Private group
    """
    members = group_service.list_members(group_id, auth.user_id)
    return success_response(members_out_schema.dump(members))


@bp.delete("/leave")
@login_required()
def leave(auth, group_id):
    """
    Leave the group
    ---
    tags:
      - Group Members
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


@bp.delete("/<user_id>")
@login_required()
def remove_member(auth, group_id, user_id):
    """
    Remove a member (admins only; the creator cannot be removed)
    ---
    tags:
      - Group Members
    security:
      - Bearer: []
    parameters:
      - { in: path, name: group_id, type: string, required: true }
      - { in: path, name: user_id, type: string, required: true }
    responses:
      200:
        description: Removed
      403:
        description: Not an admin, or target is the creator
      404:
        description: Not a member
    """
    group_service.remove_member(group_id, auth.user_id, user_id)
    return success_response(None, "Member removed")
