from __future__ import annotations

import logging
from datetime import date

import models
from models.base_model import utcnow
from models.monthly_book import MonthlyBook
from services.errors import NotFound, Conflict
from services.membership import get_group, require_member, require_admin

logger = logging.getLogger(__name__)


def select_monthly_book(group_id: str, user_id: str, data: dict) -> MonthlyBook:
    """Pick the group's book for a year/month; one pick per month."""
    group = get_group(group_id)
    require_admin(group.id, user_id)

    session = models.storage.get_session()
    exists = session.query(MonthlyBook.id).filter(
        MonthlyBook.group_id == group.id,
        MonthlyBook.year == data["year"],
        MonthlyBook.month == data["month"],
    ).first()
    if exists:
        raise Conflict("A book is already selected for this month")

    monthly_book = MonthlyBook(group_id=group.id, selected_by_id=user_id, **data)
    models.storage.new(monthly_book)
    models.storage.save()
    logger.info("Group %s selected %r for %d-%02d", group.id, monthly_book.book_title,
                monthly_book.year, monthly_book.month)
    return monthly_book


def list_monthly_books(group_id: str, user_id: str) -> list:
    group = get_group(group_id)
    require_member(group.id, user_id)
    session = models.storage.get_session()
    return (
        session.query(MonthlyBook)
        .filter(MonthlyBook.group_id == group.id)
        .order_by(MonthlyBook.year.desc(), MonthlyBook.month.desc())
        .all()
    )


def get_current_monthly_book(group_id: str, user_id: str, today: date | None = None) -> MonthlyBook:
    today = today or utcnow().date()
    group = get_group(group_id)
    require_member(group.id, user_id)
    session = models.storage.get_session()
    monthly_book = session.query(MonthlyBook).filter(
        MonthlyBook.group_id == group.id,
        MonthlyBook.year == today.year,
        MonthlyBook.month == today.month,
    ).first()
    if monthly_book is None:
        raise NotFound("No book selected for this month")
    return monthly_book


def update_status(group_id: str, monthly_book_id: str, user_id: str, status) -> MonthlyBook:
    get_group(group_id)
    require_admin(group_id, user_id)
    monthly_book = models.storage.get(MonthlyBook, monthly_book_id)
    if monthly_book is None or monthly_book.group_id != group_id:
        raise NotFound("Monthly book not found")
    monthly_book.status = status
    models.storage.save()
    return monthly_book
