from __future__ import annotations

import logging

import models
from models.base_model import utcnow
from models.group_meeting import GroupMeeting, MeetingStatus
from models.monthly_book import MonthlyBook
from services.errors import NotFound
from services.membership import get_group, require_member, require_admin

logger = logging.getLogger(__name__)


def _get_group_meeting(group_id: str, meeting_id: str) -> GroupMeeting:
    meeting = models.storage.get(GroupMeeting, meeting_id)
    if meeting is None or meeting.group_id != group_id:
        raise NotFound("Meeting not found")
    return meeting


def _check_monthly_book(group_id: str, monthly_book_id: str | None) -> None:
    if monthly_book_id is None:
        return
    book = models.storage.get(MonthlyBook, monthly_book_id)
    if book is None or book.group_id != group_id:
        raise NotFound("Monthly book not found")


def create_meeting(group_id: str, user_id: str, data: dict) -> GroupMeeting:
    group = get_group(group_id)
    require_admin(group.id, user_id)
    _check_monthly_book(group.id, data.get("monthly_book_id"))
    meeting = GroupMeeting(group_id=group.id, created_by_id=user_id, status=MeetingStatus.SCHEDULED, **data)
    models.storage.new(meeting)
    models.storage.save()
    logger.info("Meeting %s scheduled for group %s", meeting.id, group.id)
    return meeting


def list_meetings(group_id: str, user_id: str) -> list:
    group = get_group(group_id)
    require_member(group.id, user_id)
    session = models.storage.get_session()
    return (
        session.query(GroupMeeting)
        .filter(GroupMeeting.group_id == group.id)
        .order_by(GroupMeeting.meeting_date_time.desc())
        .all()
    )


def _upcoming_query(group_id: str):
    session = models.storage.get_session()
    return (
        session.query(GroupMeeting)
        .filter(
            GroupMeeting.group_id == group_id,
            GroupMeeting.status == MeetingStatus.SCHEDULED,
            GroupMeeting.meeting_date_time >= utcnow(),
        )
        .order_by(GroupMeeting.meeting_date_time.asc())
    )


def list_upcoming_meetings(group_id: str, user_id: str) -> list:
    group = get_group(group_id)
    require_member(group.id, user_id)
    return _upcoming_query(group.id).all()


def get_next_meeting(group_id: str, user_id: str) -> GroupMeeting:
    group = get_group(group_id)
    require_member(group.id, user_id)
    meeting = _upcoming_query(group.id).first()
    if meeting is None:
        raise NotFound("No upcoming meeting")
    return meeting


def update_meeting(group_id: str, meeting_id: str, user_id: str, data: dict) -> GroupMeeting:
    get_group(group_id)
    require_admin(group_id, user_id)
    meeting = _get_group_meeting(group_id, meeting_id)
    if "monthly_book_id" in data:
        _check_monthly_book(group_id, data["monthly_book_id"])
    for key, value in data.items():
        setattr(meeting, key, value)
    models.storage.save()
    return meeting


def delete_meeting(group_id: str, meeting_id: str, user_id: str) -> None:
    get_group(group_id)
    require_admin(group_id, user_id)
    meeting = _get_group_meeting(group_id, meeting_id)
    models.storage.delete(meeting)
    models.storage.save()
