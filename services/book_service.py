"""Finished-reading records. Every operation is scoped to the calling user."""
from __future__ import annotations

import logging

from sqlalchemy import func, extract, or_

import models
from models.book import Book
from services.errors import NotFound, Forbidden
from services.pagination import paginate, Page

logger = logging.getLogger(__name__)


def get_owned_book(book_id: str, user_id: str) -> Book:
    book = models.storage.get(Book, book_id)
    if book is None:
        raise NotFound("Book not found")
    if book.user_id != user_id:
        logger.info("User %s denied access to book %s", user_id, book_id)
        raise Forbidden("You can only access your own books")
    return book


def list_books(user_id: str, page: int, size: int, year=None, month=None, rating=None, q=None) -> Page:
    session = models.storage.get_session()
    query = session.query(Book).filter(Book.user_id == user_id)
    if year is not None:
        query = query.filter(extract("year", Book.finished_date) == year)
    if month is not None:
        query = query.filter(extract("month", Book.finished_date) == month)
    if rating is not None:
        query = query.filter(Book.rating == rating)
    if q:
        like = f"%{q.strip().lower()}%"
        query = query.filter(or_(func.lower(Book.title).like(like), func.lower(Book.author).like(like)))
    query = query.order_by(Book.finished_date.desc(), Book.created_at.desc())
    return paginate(query, page, size)


def create_book(user_id: str, data: dict) -> Book:
    book = Book(user_id=user_id, **data)
    models.storage.new(book)
    models.storage.save()
    return book


def update_book(book_id: str, user_id: str, data: dict) -> Book:
    book = get_owned_book(book_id, user_id)
    for key, value in data.items():
        setattr(book, key, value)
    models.storage.save()
    return book


def delete_book(book_id: str, user_id: str) -> None:
    book = get_owned_book(book_id, user_id)
    models.storage.delete(book)
    models.storage.save()


def is_duplicate(user_id: str, title: str, author: str) -> bool:
    session = models.storage.get_session()
    return session.query(Book.id).filter(
        Book.user_id == user_id,
        func.lower(Book.title) == title.strip().lower(),
        func.lower(Book.author) == author.strip().lower(),
    ).first() is not None


def monthly_statistics(user_id: str) -> list:
    session = models.storage.get_session()
    year_col = extract("year", Book.finished_date)
    month_col = extract("month", Book.finished_date)
    rows = (
        session.query(year_col, month_col, func.count(Book.id), func.avg(Book.rating))
        .filter(Book.user_id == user_id)
        .group_by(year_col, month_col)
        .order_by(year_col.desc(), month_col.desc())
        .all()
    )
    return [
        {
            "year": int(year),
            "month": int(month),
            "count": count,
            "average_rating": round(float(avg), 2) if avg is not None else 0.0,
        }
        for year, month, count, avg in rows
    ]
