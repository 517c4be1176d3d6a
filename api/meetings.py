from __future__ import annotations

from flask import Blueprint, request

from models.schemas.meeting import MeetingCreateSchema, MeetingUpdateSchema, MeetingOutSchema
from services import meeting_service
from utils.decorators import login_required

from .errors import success_response

bp = Blueprint("meetings", __name__, url_prefix="/api/reading-groups/<group_id>/meetings")

meeting_create_schema = MeetingCreateSchema()
meeting_update_schema = MeetingUpdateSchema()
meeting_out_schema = MeetingOutSchema()
meetings_out_schema = MeetingOutSchema(many=True)


@bp.post("")
@login_required()
def create_meeting(auth, group_id):
    """
    Schedule a meeting (admins only)
    ---
    tags:
      - Meetings
    security:
      - Bearer: []
    parameters:
      - { in: path, name: group_id, type: string, required: true }
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [title, meeting_date_time]
          properties:
            title: { type: string }
            description: { type: string }
            meeting_date_time: { type: string, format: date-time }
            location: { type: string }
            agenda: { type: string }
            monthly_book_id: { type: string }
    responses:
      201:
        description: Created
      403:
        description: Not an admin
    """
    payload = request.get_json(silent=True) or {}
    data = meeting_create_schema.load(payload)
    meeting = meeting_service.create_meeting(group_id, auth.user_id, data)
    return success_response(meeting_out_schema.dump(meeting), "Meeting created", 201)


@bp.get("")
@login_required()
def list_meetings(auth, group_id):
    """
    All meetings of the group (members only)
    ---
    tags:
      - Meetings
    security:
      - Bearer: []
    parameters:
      - { in: path, name: group_id, type: string, required: true }
    responses:
      200:
        description: OK
      403:
        description: Not a member
    """
    meetings = meeting_service.list_meetings(group_id, auth.user_id)
    return success_response(meetings_out_schema.dump(meetings))


@bp.get("/upcoming")
@login_required()
def upcoming_meetings(auth, group_id):
    """
    Scheduled meetings from now on (members only)
    ---
    tags:
      - Meetings
    security:
      - Bearer: []
    parameters:
      - { in: path, name: group_id, type: string, required: true }
    responses:
      200:
        description: OK
    """
    meetings = meeting_service.list_upcoming_meetings(group_id, auth.user_id)
    return success_response(meetings_out_schema.dump(meetings))


@bp.get("/next")
@login_required()
def next_meeting(auth, group_id):
    """
    The next scheduled meeting (members only)
    ---
    tags:
      - Meetings
    security:
      - Bearer: []
    parameters:
      - { in: path, name: group_id, type: string, required: true }
    responses:
      200:
        description: OK
      404:
        description: No upcoming meeting
    """
    meeting = meeting_service.get_next_meeting(group_id, auth.user_id)
    return success_response(meeting_out_schema.dump(meeting))


@bp.put("/<meeting_id>")
@login_required()
def update_meeting(auth, group_id, meeting_id):
    """
    Update a meeting (admins only)
    ---
    tags:
      - Meetings
    security:
      - Bearer: []
    parameters:
      - { in: path, name: group_id, type: string, required: true }
      - { in: path, name: meeting_id, type: string, required: true }
      - in: body
        name: body
        schema:
          type: object
    responses:
      200:
        description: Updated
      403:
        description: Not an admin
      404:
        description: Not found
    """
    payload = request.get_json(silent=True) or {}
    data = meeting_update_schema.load(payload, partial=True)
    meeting = meeting_service.update_meeting(group_id, meeting_id, auth.user_id, data)
    return success_response(meeting_out_schema.dump(meeting), "Meeting updated")


@bp.delete("/<meeting_id>")
@login_required()
def delete_meeting(auth, group_id, meeting_id):
    """
    Delete a meeting (admins only)
    ---
    tags:
      - Meetings
    security:
      - Bearer: []
    parameters:
      - { in: path, name: group_id, type: string, required: true }
      - { in: path, name: meeting_id, type: string, required: true }
    responses:
      200:
        description: Deleted
      403:
        description: Not an admin
    """
    meeting_service.delete_meeting(group_id, meeting_id, auth.user_id)
    return success_response(None, "Meeting deleted")
