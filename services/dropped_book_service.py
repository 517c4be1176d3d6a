"""
Books the user gave up on. The same book is recorded once per user: matched by
ISBN first, then by title and author, then by title alone.
"""
from __future__ import annotations

import logging

from sqlalchemy import func, or_

import models
from models.base_model import utcnow
from models.dropped_book import DroppedBook
from services.errors import NotFound, Forbidden, Conflict, ValidationFailed
from services.pagination import paginate, Page

logger = logging.getLogger(__name__)


def get_owned_dropped_book(dropped_book_id: str, user_id: str) -> DroppedBook:
    book = models.storage.get(DroppedBook, dropped_book_id)
    if book is None:
        raise NotFound("Dropped book not found")
    if book.user_id != user_id:
        logger.info("User %s denied access to dropped book %s", user_id, dropped_book_id)
        raise Forbidden("You can only access your own dropped books")
    return book


def find_duplicate(user_id: str, title: str | None, author: str | None = None,
                   isbn: str | None = None, exclude_id: str | None = None) -> tuple:
    """Return (existing record, reason) for the first rule that matches, else (None, None)."""
    session = models.storage.get_session()
    base = session.query(DroppedBook).filter(DroppedBook.user_id == user_id)
    if exclude_id:
        base = base.filter(DroppedBook.id != exclude_id)

    if isbn:
        match = base.filter(DroppedBook.isbn == isbn).first()
        if match is not None:
            return match, f"This ISBN is already on your dropped list: {isbn}"

    if title and title.strip():
        by_title = base.filter(func.lower(DroppedBook.title) == title.strip().lower())
        if author and author.strip():
            match = by_title.filter(func.lower(DroppedBook.author) == author.strip().lower()).first()
            if match is not None:
                return match, f"This book is already on your dropped list: {title} - {author}"
        match = by_title.first()
        if match is not None:
            return match, f"This title is already on your dropped list: {title}"
    return None, None


def _check_dates(started, dropped) -> None:
    if started and dropped and started > dropped:
        raise ValidationFailed("started_date must not be after dropped_date",
                               {"started_date": ["Must not be after dropped_date."]})


def list_dropped_books(user_id: str, page: int, size: int, search=None) -> Page:
    session = models.storage.get_session()
    query = session.query(DroppedBook).filter(DroppedBook.user_id == user_id)
    if search and search.strip():
        like = f"%{search.strip().lower()}%"
        query = query.filter(or_(func.lower(DroppedBook.title).like(like), func.lower(DroppedBook.author).like(like)))
    query = query.order_by(DroppedBook.dropped_date.desc(), DroppedBook.created_at.desc())
    return paginate(query, page, size)


def create_dropped_book(user_id: str, data: dict) -> DroppedBook:
    existing, reason = find_duplicate(user_id, data.get("title"), data.get("author"), data.get("isbn"))
    if existing is not None:
        raise Conflict(reason)

    data = dict(data)
    if not data.get("dropped_date"):
        data["dropped_date"] = utcnow().date()
    _check_dates(data.get("started_date"), data["dropped_date"])

    book = DroppedBook(user_id=user_id, **data)
    models.storage.new(book)
    models.storage.save()
    logger.info("User %s dropped %r", user_id, book.title)
    return book


def update_dropped_book(dropped_book_id: str, user_id: str, data: dict) -> DroppedBook:
    book = get_owned_dropped_book(dropped_book_id, user_id)
    data = {key: value for key, value in data.items() if not (key == "dropped_date" and value is None)}

    identity = ("title", "author", "isbn")
    if any(key in data and data[key] != getattr(book, key) for key in identity):
        existing, reason = find_duplicate(
            user_id,
            data.get("title", book.title),
            data.get("author", book.author),
            data.get("isbn", book.isbn),
            exclude_id=book.id,
        )
        if existing is not None:
            raise Conflict(reason)
    _check_dates(data.get("started_date", book.started_date), data.get("dropped_date", book.dropped_date))

    for key, value in data.items():
        setattr(book, key, value)
    models.storage.save()
    return book


def delete_dropped_book(dropped_book_id: str, user_id: str) -> None:
    book = get_owned_dropped_book(dropped_book_id, user_id)
    models.storage.delete(book)
    models.storage.save()
