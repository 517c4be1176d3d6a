"""
Member reviews of a group's monthly book. Reading or writing reviews needs an
active membership of the book's group; editing or deleting needs the author.
"""
from __future__ import annotations

import logging

from sqlalchemy import func

import models
from models.book_review import BookReview, ReviewStatus
from models.monthly_book import MonthlyBook
from services.errors import NotFound, Forbidden, Conflict
from services.membership import get_group, require_member

logger = logging.getLogger(__name__)


def _get_monthly_book_for_member(monthly_book_id: str, user_id: str) -> MonthlyBook:
    monthly_book = models.storage.get(MonthlyBook, monthly_book_id)
    if monthly_book is None:
        raise NotFound("Monthly book not found")
    group = get_group(monthly_book.group_id)
    require_member(group.id, user_id)
    return monthly_book


def get_owned_review(review_id: str, user_id: str) -> BookReview:
    review = models.storage.get(BookReview, review_id)
    if review is None:
        raise NotFound("Review not found")
    if review.user_id != user_id:
        logger.info("User %s denied access to review %s", user_id, review_id)
        raise Forbidden("You can only change your own review")
    return review


def _find_review(monthly_book_id: str, user_id: str) -> BookReview | None:
    session = models.storage.get_session()
    return (
        session.query(BookReview)
        .filter(BookReview.monthly_book_id == monthly_book_id, BookReview.user_id == user_id)
        .first()
    )


def create_review(user_id: str, data: dict) -> BookReview:
    monthly_book = _get_monthly_book_for_member(data["monthly_book_id"], user_id)
    if _find_review(monthly_book.id, user_id) is not None:
        raise Conflict("You already reviewed this book")
    review = BookReview(user_id=user_id, **data)
    models.storage.new(review)
    models.storage.save()
    logger.info("User %s reviewed monthly book %s", user_id, monthly_book.id)
    return review


def list_public_reviews(monthly_book_id: str, user_id: str) -> list:
    monthly_book = _get_monthly_book_for_member(monthly_book_id, user_id)
    session = models.storage.get_session()
    return (
        session.query(BookReview)
        .filter(
            BookReview.monthly_book_id == monthly_book.id,
            BookReview.is_public.is_(True),
            BookReview.status == ReviewStatus.PUBLISHED,
        )
        .order_by(BookReview.created_at.desc())
        .all()
    )


def get_my_review(monthly_book_id: str, user_id: str) -> BookReview | None:
    monthly_book = _get_monthly_book_for_member(monthly_book_id, user_id)
    return _find_review(monthly_book.id, user_id)


def update_review(review_id: str, user_id: str, data: dict) -> BookReview:
    review = get_owned_review(review_id, user_id)
    for key, value in data.items():
        setattr(review, key, value)
    models.storage.save()
    return review


def delete_review(review_id: str, user_id: str) -> None:
    review = get_owned_review(review_id, user_id)
    models.storage.delete(review)
    models.storage.save()


def review_statistics(monthly_book_id: str, user_id: str) -> dict:
    """Average rating, count and 1-5 star distribution of published reviews."""
    monthly_book = _get_monthly_book_for_member(monthly_book_id, user_id)
    session = models.storage.get_session()
    rows = (
        session.query(BookReview.rating, func.count(BookReview.id))
        .filter(BookReview.monthly_book_id == monthly_book.id, BookReview.status == ReviewStatus.PUBLISHED)
        .group_by(BookReview.rating)
        .all()
    )
    distribution = [0] * 5
    for rating, count in rows:
        distribution[rating - 1] = count
    total = sum(distribution)
    average = sum(star * count for star, count in enumerate(distribution, start=1)) / total if total else 0.0
    return {
        "average_rating": round(average, 2),
        "total_reviews": total,
        "rating_distribution": distribution,
    }
