"""
Books in progress. A user cannot list the same title/author twice; progress is
kept within 0-100 and library rentals past their due date count as overdue.
"""
from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import func, or_

import models
from models.base_model import utcnow
from models.currently_reading import CurrentlyReading, ReadingType, clamp_progress
from services.errors import NotFound, Forbidden, Conflict
from services.pagination import paginate, Page

logger = logging.getLogger(__name__)


def get_owned_reading(reading_id: str, user_id: str) -> CurrentlyReading:
    reading = models.storage.get(CurrentlyReading, reading_id)
    if reading is None:
        raise NotFound("Currently-reading entry not found")
    if reading.user_id != user_id:
        logger.info("User %s denied access to currently-reading entry %s", user_id, reading_id)
        raise Forbidden("You can only access your own reading list")
    return reading


def _same_book_query(user_id: str, title: str, author: str | None):
    session = models.storage.get_session()
    query = session.query(CurrentlyReading).filter(
        CurrentlyReading.user_id == user_id,
        func.lower(CurrentlyReading.title) == title.strip().lower(),
    )
    if author and author.strip():
        return query.filter(func.lower(CurrentlyReading.author) == author.strip().lower())
    return query.filter(or_(CurrentlyReading.author.is_(None), CurrentlyReading.author == ""))


def list_reading(user_id: str, page: int, size: int, search=None) -> Page:
    session = models.storage.get_session()
    query = session.query(CurrentlyReading).filter(CurrentlyReading.user_id == user_id)
    if search and search.strip():
        like = f"%{search.strip().lower()}%"
        query = query.filter(or_(
            func.lower(CurrentlyReading.title).like(like),
            func.lower(CurrentlyReading.author).like(like),
        ))
    return paginate(query.order_by(CurrentlyReading.created_at.desc()), page, size)


def create_reading(user_id: str, data: dict) -> CurrentlyReading:
    if _same_book_query(user_id, data["title"], data.get("author")).first() is not None:
        raise Conflict("You are already reading this book")
    data = dict(data)
    data["progress_percentage"] = clamp_progress(data.get("progress_percentage") or 0)
    reading = CurrentlyReading(user_id=user_id, **data)
    models.storage.new(reading)
    models.storage.save()
    logger.info("User %s started reading %r", user_id, reading.title)
    return reading


def update_reading(reading_id: str, user_id: str, data: dict) -> CurrentlyReading:
    reading = get_owned_reading(reading_id, user_id)
    title = data.get("title", reading.title)
    author = data.get("author", reading.author)
    if ("title" in data or "author" in data) and (title, author) != (reading.title, reading.author):
        clash = _same_book_query(user_id, title, author).filter(CurrentlyReading.id != reading.id).first()
        if clash is not None:
            raise Conflict("You are already reading this book")

    for key, value in data.items():
        if key == "progress_percentage":
            value = clamp_progress(value)
        setattr(reading, key, value)
    models.storage.save()
    return reading


def update_progress(reading_id: str, user_id: str, data: dict) -> CurrentlyReading:
    reading = get_owned_reading(reading_id, user_id)
    if data.get("progress_percentage") is not None:
        reading.progress_percentage = clamp_progress(data["progress_percentage"])
    if "memo" in data:
        reading.memo = data["memo"]
    models.storage.save()
    return reading


def delete_reading(reading_id: str, user_id: str) -> None:
    reading = get_owned_reading(reading_id, user_id)
    models.storage.delete(reading)
    models.storage.save()


def find_duplicates(user_id: str, title: str, author: str | None = None) -> list:
    return _same_book_query(user_id, title, author).order_by(CurrentlyReading.created_at.desc()).all()


def list_overdue(user_id: str, today: date | None = None) -> list:
    today = today or utcnow().date()
    session = models.storage.get_session()
    return (
        session.query(CurrentlyReading)
        .filter(
            CurrentlyReading.user_id == user_id,
            CurrentlyReading.reading_type == ReadingType.LIBRARY_RENTAL,
            CurrentlyReading.due_date.is_not(None),
            CurrentlyReading.due_date < today,
        )
        .order_by(CurrentlyReading.due_date.asc())
        .all()
    )
