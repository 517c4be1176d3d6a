"""
Comments on posts.

Replies are one level deep: a reply's parent must be a root comment on the
same post. Deleting is a soft delete performed only by the author.
"""
from __future__ import annotations

import logging

import models
from models.comment import Comment
from services.errors import NotFound, Forbidden, Conflict, ValidationFailed
from services.pagination import paginate, Page
from services.post_service import get_visible_post

logger = logging.getLogger(__name__)


def get_comment(comment_id: str) -> Comment:
    comment = models.storage.get(Comment, comment_id)
    if comment is None:
        raise NotFound("Comment not found")
    return comment


def list_post_comments(post_id: str, user_id: str, page: int, size: int) -> Page:
    """Root comments of a post, oldest first; replies hang off each root."""
    get_visible_post(post_id, user_id)
    session = models.storage.get_session()
    query = (
        session.query(Comment)
        .filter(Comment.post_id == post_id, Comment.parent_id.is_(None))
        .order_by(Comment.created_at.asc())
    )
    return paginate(query, page, size)


def comment_counts(post_id: str) -> dict:
    session = models.storage.get_session()
    total = session.query(Comment).filter(Comment.post_id == post_id).count()
    active = session.query(Comment).filter(Comment.post_id == post_id, Comment.is_deleted.is_(False)).count()
    return {"total_comments": total, "active_comments": active}


def create_comment(post_id: str, user_id: str, content: str, parent_id: str | None = None) -> Comment:
    get_visible_post(post_id, user_id)

    if parent_id:
        parent = models.storage.get(Comment, parent_id)
        if parent is None:
            raise NotFound("Parent comment not found")
        if parent.post_id != post_id:
            raise ValidationFailed("Parent comment belongs to a different post")
        if parent.is_reply():
            raise ValidationFailed("Replies cannot be nested more than one level")
        if parent.is_deleted:
            raise ValidationFailed("Cannot reply to a deleted comment")

    comment = Comment(post_id=post_id, user_id=user_id, content=content, parent_id=parent_id or None)
    models.storage.new(comment)
    models.storage.save()
    return comment


def delete_comment(comment_id: str, user_id: str) -> Comment:
    comment = get_comment(comment_id)
    if comment.user_id != user_id:
        logger.info("User %s denied deleting comment %s", user_id, comment_id)
        raise Forbidden("You can only delete your own comments")
    if comment.is_deleted:
        raise Conflict("Comment is already deleted")
    comment.soft_delete()
    models.storage.save()
    return comment


def list_replies(comment_id: str, user_id: str) -> list:
    parent = get_comment(comment_id)
    get_visible_post(parent.post_id, user_id)
    session = models.storage.get_session()
    return (
        session.query(Comment)
        .filter(Comment.parent_id == parent.id)
        .order_by(Comment.created_at.asc())
        .all()
    )


def list_my_comments(user_id: str, page: int, size: int) -> Page:
    session = models.storage.get_session()
    query = (
        session.query(Comment)
        .filter(Comment.user_id == user_id, Comment.is_deleted.is_(False))
        .order_by(Comment.created_at.desc())
    )
    return paginate(query, page, size)
