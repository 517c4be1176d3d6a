"""Group-membership lookups used by the group, meeting and monthly-book services."""
from __future__ import annotations

import logging

import models
from models.group_member import GroupMember, MemberStatus
from models.reading_group import ReadingGroup, GroupStatus
from services.errors import NotFound, Forbidden

logger = logging.getLogger(__name__)


def get_group(group_id: str) -> ReadingGroup:
    """Archived groups answer as missing to every group-scoped operation."""
    group = models.storage.get(ReadingGroup, group_id)
    if group is None or group.status == GroupStatus.ARCHIVED:
        raise NotFound("Reading group not found")
    return group


def get_membership(group_id: str, user_id: str) -> GroupMember | None:
    session = models.storage.get_session()
    return (
        session.query(GroupMember)
        .filter(GroupMember.group_id == group_id, GroupMember.user_id == user_id)
        .first()
    )


def active_member_count(group_id: str) -> int:
    session = models.storage.get_session()
    return (
        session.query(GroupMember)
        .filter(GroupMember.group_id == group_id, GroupMember.status == MemberStatus.ACTIVE)
        .count()
    )


def is_member(group_id: str, user_id: str) -> bool:
    membership = get_membership(group_id, user_id)
    return membership is not None and membership.is_active()


def require_member(group_id: str, user_id: str) -> GroupMember:
    membership = get_membership(group_id, user_id)
    if membership is None or not membership.is_active():
        logger.info("User %s denied: not a member of group %s", user_id, group_id)
        raise Forbidden("Only group members can do this")
    return membership


def require_admin(group_id: str, user_id: str) -> GroupMember:
    membership = require_member(group_id, user_id)
    if not membership.is_admin():
        logger.info("User %s denied: not an admin of group %s", user_id, group_id)
        raise Forbidden("Only group admins can do this")
    return membership
