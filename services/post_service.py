from __future__ import annotations

import logging

from sqlalchemy import func, or_

import models
from models.post import Post, Visibility
from models.schemas.post import validate_post_fields
from services.errors import NotFound, Forbidden
from services.pagination import paginate, Page

logger = logging.getLogger(__name__)


def _get_post(post_id: str) -> Post:
    post = models.storage.get(Post, post_id)
    if post is None:
        raise NotFound("Post not found")
    return post


def get_visible_post(post_id: str, user_id: str) -> Post:
    """Public posts are visible to everyone, private ones only to their author."""
    post = _get_post(post_id)
    if not post.is_public() and post.user_id != user_id:
        raise Forbidden("This post is private")
    return post


def get_owned_post(post_id: str, user_id: str) -> Post:
    post = _get_post(post_id)
    if post.user_id != user_id:
        logger.info("User %s denied write access to post %s", user_id, post_id)
        raise Forbidden("You can only modify your own posts")
    return post


def list_public_posts(page: int, size: int, post_type=None) -> Page:
    session = models.storage.get_session()
    query = session.query(Post).filter(Post.visibility == Visibility.PUBLIC)
    if post_type is not None:
        query = query.filter(Post.post_type == post_type)
    return paginate(query.order_by(Post.created_at.desc()), page, size)


def list_my_posts(user_id: str, page: int, size: int) -> Page:
    session = models.storage.get_session()
    query = session.query(Post).filter(Post.user_id == user_id).order_by(Post.created_at.desc())
    return paginate(query, page, size)


def list_posts_by_isbn(isbn: str, page: int, size: int) -> Page:
    session = models.storage.get_session()
    query = (
        session.query(Post)
        .filter(Post.book_isbn == isbn, Post.visibility == Visibility.PUBLIC)
        .order_by(Post.created_at.desc())
    )
    return paginate(query, page, size)


def search_posts(page: int, size: int, keyword=None, book_title=None, post_type=None) -> Page:
    session = models.storage.get_session()
    query = session.query(Post).filter(Post.visibility == Visibility.PUBLIC)
    if keyword:
        like = f"%{keyword.strip().lower()}%"
        query = query.filter(or_(
            func.lower(Post.title).like(like),
            func.lower(Post.content).like(like),
            func.lower(Post.book_title).like(like),
        ))
    if book_title:
        query = query.filter(func.lower(Post.book_title).like(f"%{book_title.strip().lower()}%"))
    if post_type is not None:
        query = query.filter(Post.post_type == post_type)
    return paginate(query.order_by(Post.created_at.desc()), page, size)


def create_post(user_id: str, data: dict) -> Post:
    post = Post(user_id=user_id, **data)
    models.storage.new(post)
    models.storage.save()
    return post


def update_post(post_id: str, user_id: str, data: dict) -> Post:
    post = get_owned_post(post_id, user_id)

    merged = {column: getattr(post, column) for column in (
        "post_type", "title", "content", "recommendation_type", "reason", "quotes",
    )}
    merged.update(data)
    # raises marshmallow.ValidationError, mapped to 422 like any schema error
    validate_post_fields(merged["post_type"], merged)

    for key, value in data.items():
        setattr(post, key, value)
    models.storage.save()
    return post


def delete_post(post_id: str, user_id: str) -> None:
    post = get_owned_post(post_id, user_id)
    models.storage.delete(post)
    models.storage.save()
    logger.info("Post %s deleted by its author", post_id)

