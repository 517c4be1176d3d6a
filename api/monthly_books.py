from __future__ import annotations

from flask import Blueprint, request

from models.schemas.monthly_book import (
    MonthlyBookCreateSchema,
    MonthlyBookStatusSchema,
    MonthlyBookOutSchema,
)
from services import monthly_book_service
from utils.decorators import login_required

from .errors import success_response

bp = Blueprint("monthly_books", __name__, url_prefix="/api/reading-groups/<group_id>/monthly-books")

monthly_book_create_schema = MonthlyBookCreateSchema()
monthly_book_status_schema = MonthlyBookStatusSchema()
monthly_book_out_schema = MonthlyBookOutSchema()
monthly_books_out_schema = MonthlyBookOutSchema(many=True)


@bp.post("")
@login_required()
def select_monthly_book(auth, group_id):
    """
    Select the group's book for a month (admins only)
    ---
    tags:
      - Monthly Books
    security:
      - Bearer: []
    parameters:
      - { in: path, name: group_id, type: string, required: true }
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [year, month, book_title]
          properties:
            year: { type: integer }
            month: { type: integer, minimum: 1, maximum: 12 }
            book_title: { type: string }
            book_author: { type: string }
            book_isbn: { type: string }
            selection_reason: { type: string }
            start_date: { type: string, format: date }
            end_date: { type: string, format: date }
    responses:
      201:
        description: Selected
      403:
        description: Not an admin
      409:
        description: A book is already selected for that month
    """
    payload = request.get_json(silent=True) or {}
    data = monthly_book_create_schema.load(payload)
    monthly_book = monthly_book_service.select_monthly_book(group_id, auth.user_id, data)
    return success_response(monthly_book_out_schema.dump(monthly_book), "Monthly book selected", 201)


@bp.get("")
@login_required()
def list_monthly_books(auth, group_id):
    """
    Monthly book history, newest month first (members only)
    ---
    tags:
      - Monthly Books
    security:
      - Bearer: []
    parameters:
      - { in: path, name: group_id, type: string, required: true }
    responses:
      200:
        description: OK
    """
    monthly_books = monthly_book_service.list_monthly_books(group_id, auth.user_id)
    return success_response(monthly_books_out_schema.dump(monthly_books))


@bp.get("/current")
@login_required()
def current_monthly_book(auth, group_id):
    """
    This month's book (members only)
    ---
    tags:
      - Monthly Books
    security:
      - Bearer: []
    parameters:
      - { in: path, name: group_id, type: string, required: true }
    responses:
      200:
        description: OK
      404:
        description: Nothing selected for this month
    """
    monthly_book = monthly_book_service.get_current_monthly_book(group_id, auth.user_id)
    return success_response(monthly_book_out_schema.dump(monthly_book))


@bp.put("/<monthly_book_id>/status")
@login_required()
def update_status(auth, group_id, monthly_book_id):
    """
    Change the reading status (admins only)
    ---
    tags:
      - Monthly Books
    security:
      - Bearer: []
    parameters:
      - { in: path, name: group_id, type: string, required: true }
      - { in: path, name: monthly_book_id, type: string, required: true }
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            status: { type: string, enum: [UPCOMING, READING, COMPLETED, CANCELLED] }
    responses:
      200:
        description: Updated
      403:
        description: Not an admin
    """
    payload = request.get_json(silent=True) or {}
    data = monthly_book_status_schema.load(payload)
    monthly_book = monthly_book_service.update_status(group_id, monthly_book_id, auth.user_id, data["status"])
    return success_response(monthly_book_out_schema.dump(monthly_book), "Status updated")
