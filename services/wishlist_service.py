"""Books the user wants to read. Every operation is scoped to the calling user."""
from __future__ import annotations

import logging

from sqlalchemy import func, or_

import models
from models.wishlist import Wishlist
from services.errors import NotFound, Forbidden
from services.pagination import paginate, Page

logger = logging.getLogger(__name__)


def get_owned_wishlist(wishlist_id: str, user_id: str) -> Wishlist:
    wishlist = models.storage.get(Wishlist, wishlist_id)
    if wishlist is None:
        raise NotFound("Wishlist item not found")
    if wishlist.user_id != user_id:
        logger.info("User %s denied access to wishlist item %s", user_id, wishlist_id)
        raise Forbidden("You can only access your own wishlist")
    return wishlist


def list_wishlists(user_id: str, page: int, size: int, priority=None, search=None) -> Page:
    session = models.storage.get_session()
    query = session.query(Wishlist).filter(Wishlist.user_id == user_id)
    if priority is not None:
        query = query.filter(Wishlist.priority == priority)
    if search and search.strip():
        like = f"%{search.strip().lower()}%"
        query = query.filter(or_(func.lower(Wishlist.title).like(like), func.lower(Wishlist.author).like(like)))
    query = query.order_by(Wishlist.priority.asc(), Wishlist.created_at.desc())
    return paginate(query, page, size)


def create_wishlist(user_id: str, data: dict) -> Wishlist:
    wishlist = Wishlist(user_id=user_id, **data)
    models.storage.new(wishlist)
    models.storage.save()
    logger.info("User %s added %r to their wishlist", user_id, wishlist.title)
    return wishlist


def update_wishlist(wishlist_id: str, user_id: str, data: dict) -> Wishlist:
    wishlist = get_owned_wishlist(wishlist_id, user_id)
    for key, value in data.items():
        setattr(wishlist, key, value)
    models.storage.save()
    return wishlist


def delete_wishlist(wishlist_id: str, user_id: str) -> None:
    wishlist = get_owned_wishlist(wishlist_id, user_id)
    models.storage.delete(wishlist)
    models.storage.save()


def find_duplicates(user_id: str, title: str, author: str | None = None) -> list:
    """Wishlist items whose title (and author, when given) contain the search text."""
    session = models.storage.get_session()
    query = session.query(Wishlist).filter(
        Wishlist.user_id == user_id,
        func.lower(Wishlist.title).like(f"%{title.strip().lower()}%"),
    )
    if author and author.strip():
        query = query.filter(func.lower(Wishlist.author).like(f"%{author.strip().lower()}%"))
    return query.order_by(Wishlist.priority.asc(), Wishlist.created_at.desc()).all()


def priority_statistics(user_id: str) -> list:
    session = models.storage.get_session()
    rows = (
        session.query(Wishlist.priority, func.count(Wishlist.id))
        .filter(Wishlist.user_id == user_id)
        .group_by(Wishlist.priority)
        .order_by(Wishlist.priority.asc())
        .all()
    )
    return [{"priority": priority, "count": count} for priority, count in rows]
