"""
Reading groups and their membership.

The creator is stored as a CREATOR member. Admin operations need an active
CREATOR or ADMIN membership; archiving the group needs the creator.
"""
from __future__ import annotations

import logging
import secrets
import string

from sqlalchemy import func, or_

import models
from models.base_model import utcnow
from models.group_member import GroupMember, MemberRole, MemberStatus
from models.reading_group import ReadingGroup, GroupStatus
from services.errors import NotFound, Forbidden, Conflict, ValidationFailed
from services.membership import (
    get_group,
    get_membership,
    active_member_count,
    is_member,
    require_member,
    require_admin,
)
from services.pagination import paginate, Page

logger = logging.getLogger(__name__)

INVITE_CODE_ALPHABET = string.ascii_uppercase + string.digits
INVITE_CODE_LENGTH = 8
GROUP_NAME_MAX = 100


def generate_invite_code() -> str:
    """Random 8-character code that no other group uses."""
    session = models.storage.get_session()
    while True:
        code = "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(INVITE_CODE_LENGTH))
        if session.query(ReadingGroup.id).filter(ReadingGroup.invite_code == code).first() is None:
            return code


def _name_taken(name: str, exclude_id: str | None = None) -> bool:
    session = models.storage.get_session()
    query = session.query(ReadingGroup.id).filter(
        ReadingGroup.name == name, ReadingGroup.status == GroupStatus.ACTIVE
    )
    if exclude_id:
        query = query.filter(ReadingGroup.id != exclude_id)
    return query.first() is not None


def unique_group_name(name: str) -> str:
    """name, then "name 1", "name 2", ... among active groups, cut to fit the column."""
    candidate, n = name, 0
    while _name_taken(candidate):
        n += 1
        suffix = f" {n}"
        candidate = name[:GROUP_NAME_MAX - len(suffix)].rstrip() + suffix
    return candidate


def create_group(user_id: str, data: dict) -> ReadingGroup:
    data = dict(data)
    data["name"] = unique_group_name(data["name"])
    group = ReadingGroup(
        creator_id=user_id,
        invite_code=generate_invite_code(),
        status=GroupStatus.ACTIVE,
        **data,
    )
    models.storage.new(group)
    models.storage.new(GroupMember(
        group_id=group.id,
        user_id=user_id,
        role=MemberRole.CREATOR,
        status=MemberStatus.ACTIVE,
        joined_at=utcnow(),
    ))
    models.storage.save()
    logger.info("User %s created reading group %s", user_id, group.id)
    return group


def list_public_groups(page: int, size: int, q: str | None = None) -> Page:
    session = models.storage.get_session()
    query = session.query(ReadingGroup).filter(
        ReadingGroup.is_public.is_(True), ReadingGroup.status == GroupStatus.ACTIVE
    )
    if q:
        like = f"%{q.strip().lower()}%"
        query = query.filter(or_(
            func.lower(ReadingGroup.name).like(like),
            func.lower(ReadingGroup.description).like(like),
            func.lower(ReadingGroup.book_title).like(like),
        ))
    return paginate(query.order_by(ReadingGroup.created_at.desc()), page, size)


def list_my_groups(user_id: str) -> list:
    session = models.storage.get_session()
    return (
        session.query(ReadingGroup)
        .join(GroupMember, GroupMember.group_id == ReadingGroup.id)
        .filter(
            GroupMember.user_id == user_id,
            GroupMember.status == MemberStatus.ACTIVE,
            ReadingGroup.status != GroupStatus.ARCHIVED,
        )
        .order_by(GroupMember.joined_at.desc())
        .all()
    )


def get_group_for_user(group_id: str, user_id: str) -> ReadingGroup:
    """Public groups are visible to everyone; private ones to members only."""
    group = get_group(group_id)
    if not group.is_public:
        require_member(group.id, user_id)
    return group


def update_group(group_id: str, user_id: str, data: dict) -> ReadingGroup:
    group = get_group(group_id)
    require_admin(group.id, user_id)

    name = data.get("name")
    if name and name != group.name and _name_taken(name, exclude_id=group.id):
        raise Conflict("A reading group with this name already exists")
    max_members = data.get("max_members")
    if max_members is not None and max_members < active_member_count(group.id):
        raise ValidationFailed("max_members cannot be lower than the current member count")

    for key, value in data.items():
        setattr(group, key, value)
    models.storage.save()
    return group


def archive_group(group_id: str, user_id: str) -> ReadingGroup:
    group = get_group(group_id)
    if group.creator_id != user_id:
        logger.info("User %s denied archiving group %s", user_id, group_id)
        raise Forbidden("Only the creator can delete the group")
    group.status = GroupStatus.ARCHIVED
    models.storage.save()
    logger.info("Reading group %s archived", group_id)
    return group


def regenerate_invite_code(group_id: str, user_id: str) -> ReadingGroup:
    group = get_group(group_id)
    require_admin(group.id, user_id)
    group.invite_code = generate_invite_code()
    models.storage.save()
    return group


def get_group_by_invite_code(code: str) -> ReadingGroup:
    session = models.storage.get_session()
    group = (
        session.query(ReadingGroup)
        .filter(ReadingGroup.invite_code == (code or "").strip().upper())
        .first()
    )
    if group is None or not group.is_active():
        raise NotFound("Invalid invite code")
    return group


def _add_member(group: ReadingGroup, user_id: str, introduction: str | None) -> GroupMember:
    if not group.is_active():
        raise Conflict("This group is not accepting new members")

    membership = get_membership(group.id, user_id)
    if membership is not None:
        if membership.status == MemberStatus.BANNED:
            raise Forbidden("You cannot join this group")
        if membership.is_active():
            raise Conflict("You are already a member of this group")

    if active_member_count(group.id) >= group.max_members:
        raise Conflict("This group is full")

    if membership is None:
        membership = GroupMember(group_id=group.id, user_id=user_id, role=MemberRole.MEMBER)
        models.storage.new(membership)
    membership.status = MemberStatus.ACTIVE
    membership.introduction = introduction
    membership.joined_at = utcnow()
    models.storage.save()
    logger.info("User %s joined group %s", user_id, group.id)
    return membership


def join_public_group(group_id: str, user_id: str, introduction: str | None = None) -> GroupMember:
    group = get_group(group_id)
    if not group.is_public:
        raise Forbidden("Private groups can only be joined with an invite code")
    return _add_member(group, user_id, introduction)


def join_by_invite_code(code: str, user_id: str, introduction: str | None = None,
                        group_id: str | None = None) -> GroupMember:
    group = get_group_by_invite_code(code)
    if group_id is not None and group.id != group_id:
        raise NotFound("Invalid invite code")
    return _add_member(group, user_id, introduction)


def list_members(group_id: str, user_id: str) -> list:
    group = get_group(group_id)
    if not group.is_public and not is_member(group.id, user_id):
        raise Forbidden("Only group members can see the member list")
    session = models.storage.get_session()
    return (
        session.query(GroupMember)
        .filter(GroupMember.group_id == group.id, GroupMember.status == MemberStatus.ACTIVE)
        .order_by(GroupMember.joined_at.asc())
        .all()
    )


def remove_member(group_id: str, admin_id: str, target_user_id: str) -> None:
    group = get_group(group_id)
    require_admin(group.id, admin_id)
    target = get_membership(group.id, target_user_id)
    if target is None:
        raise NotFound("Member not found")
    if target.role == MemberRole.CREATOR:
        raise Forbidden("The group creator cannot be removed")
    models.storage.delete(target)
    models.storage.save()
    logger.info("User %s removed %s from group %s", admin_id, target_user_id, group.id)


def leave_group(group_id: str, user_id: str) -> None:
    group = get_group(group_id)
    membership = require_member(group.id, user_id)
    if membership.role == MemberRole.CREATOR:
        raise Conflict("The creator cannot leave the group; delete it instead")
    models.storage.delete(membership)
    models.storage.save()
    logger.info("User %s left group %s", user_id, group.id)
