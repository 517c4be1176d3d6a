from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import func, extract

import models
from models.base_model import utcnow
from models.book import Book
from models.currently_reading import CurrentlyReading
from models.dropped_book import DroppedBook
from models.post import Post, Visibility
from models.user import User
from models.wishlist import Wishlist
from services.errors import NotFound, Conflict

logger = logging.getLogger(__name__)

RECENT_POSTS_LIMIT = 5


def get_user(user_id: str) -> User:
    user = models.storage.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def update_profile(user_id: str, data: dict) -> User:
    """Change nickname and/or profile image of the calling user."""
    user = get_user(user_id)
    session = models.storage.get_session()

    nickname = data.get("nickname")
    if nickname and nickname != user.nickname:
        taken = session.query(User.id).filter(User.nickname == nickname, User.id != user.id).first()
        if taken:
            raise Conflict("Nickname is already taken")
        user.nickname = nickname

    if "profile_image" in data:
        user.profile_image = data["profile_image"]

    models.storage.save()
    return user


def get_statistics(user_id: str, today: date | None = None) -> dict:
    today = today or utcnow().date()
    session = models.storage.get_session()
    books = session.query(Book).filter(Book.user_id == user_id)

    total_books = books.count()
    average_rating = session.query(func.avg(Book.rating)).filter(Book.user_id == user_id).scalar()
    this_year = books.filter(extract("year", Book.finished_date) == today.year).count()
    this_month = books.filter(
        extract("year", Book.finished_date) == today.year,
        extract("month", Book.finished_date) == today.month,
    ).count()
    total_posts = session.query(Post).filter(Post.user_id == user_id).count()
    dropped = session.query(DroppedBook).filter(DroppedBook.user_id == user_id)
    month_start = today.replace(day=1)

    return {
        "total_books": total_books,
        "average_rating": round(float(average_rating), 2) if average_rating is not None else 0.0,
        "books_this_year": this_year,
        "books_this_month": this_month,
        "total_posts": total_posts,
        "currently_reading_count": session.query(CurrentlyReading).filter(CurrentlyReading.user_id == user_id).count(),
        "wishlist_count": session.query(Wishlist).filter(Wishlist.user_id == user_id).count(),
        "dropped_books_count": dropped.count(),
        "dropped_books_this_month": dropped.filter(
            DroppedBook.dropped_date >= month_start, DroppedBook.dropped_date <= today
        ).count(),
    }


def get_public_profile(user_id: str) -> dict:
    user = get_user(user_id)
    session = models.storage.get_session()
    recent_posts = (
        session.query(Post)
        .filter(Post.user_id == user.id, Post.visibility == Visibility.PUBLIC)
        .order_by(Post.created_at.desc())
        .limit(RECENT_POSTS_LIMIT)
        .all()
    )
    return {
        "user": user,
        "statistics": get_statistics(user.id),
        "recent_posts": recent_posts,
    }
