"""Books the caller stopped reading. The same book can be recorded only once."""
from __future__ import annotations

from flask import Blueprint, request, abort

from models.schemas.dropped_book import (
    DroppedBookCreateSchema,
    DroppedBookUpdateSchema,
    DroppedBookOutSchema,
)
from services import dropped_book_service
from utils.decorators import login_required

from .errors import success_response
from .utils.pagination import parse_pagination, page_payload

bp = Blueprint("dropped_books", __name__, url_prefix="/api/dropped-books")

dropped_create_schema = DroppedBookCreateSchema()
dropped_update_schema = DroppedBookUpdateSchema()
dropped_out_schema = DroppedBookOutSchema()
dropped_list_schema = DroppedBookOutSchema(many=True)


@bp.get("")
@login_required()
def list_dropped_books(auth):
    """
    List my dropped books, most recently dropped first
    ---
    tags:
      - Dropped Books
    security:
      - Bearer: []
    parameters:
      - { in: query, name: page, type: integer, default: 1 }
      - { in: query, name: size, type: integer, default: 20 }
      - { in: query, name: search, type: string, description: "Search title or author" }
    responses:
      200:
        description: OK
    """
    page, size = parse_pagination()
    result = dropped_book_service.list_dropped_books(auth.user_id, page, size, search=request.args.get("search"))
    return success_response(page_payload(result, dropped_list_schema.dump))


@bp.post("")
@login_required()
def create_dropped_book(auth):
    """
    Record a book I stopped reading
    ---
    tags:
      - Dropped Books
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [title, reading_type, drop_reason]
          properties:
            title: { type: string, maxLength: 200 }
            author: { type: string, maxLength: 100 }
            isbn: { type: string }
            reading_type: { type: string, enum: [PAPER_BOOK, LIBRARY_RENTAL, MILLIE, E_BOOK] }
            progress_percentage: { type: integer, minimum: 0, maximum: 100 }
            drop_reason: { type: string, maxLength: 1000 }
            started_date: { type: string, format: date }
            dropped_date: { type: string, format: date, description: "Defaults to today" }
            memo: { type: string, maxLength: 1000 }
    responses:
      201:
        description: Created
      409:
        description: Already on the dropped list
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = dropped_create_schema.load(payload)
    book = dropped_book_service.create_dropped_book(auth.user_id, data)
    return success_response(dropped_out_schema.dump(book), "Dropped book recorded", 201)


@bp.get("/check-duplicate")
@login_required()
def check_duplicate(auth):
    """
    Whether a title (and optionally an author) is already on my dropped list
    ---
    tags:
      - Dropped Books
    security:
      - Bearer: []
    parameters:
      - { in: query, name: title, type: string, required: true }
      - { in: query, name: author, type: string }
    responses:
      200:
        description: OK
    """
    title = request.args.get("title", "").strip()
    if not title:
        abort(400, description="title is required")
    existing, reason = dropped_book_service.find_duplicate(auth.user_id, title, request.args.get("author"))
    return success_response({
        "duplicate": existing is not None,
        "existing_book": dropped_out_schema.dump(existing) if existing is not None else None,
        "message": reason or "No matching dropped book",
    })


@bp.get("/<dropped_book_id>")
@login_required()
def get_dropped_book(auth, dropped_book_id):
    """
    Get one of my dropped books
    ---
    tags:
      - Dropped Books
    security:
      - Bearer: []
    parameters:
      - { in: path, name: dropped_book_id, type: string, required: true }
    responses:
      200:
        description: OK
      403:
        description: Not your record
      404:
        description: Not found
    """
    book = dropped_book_service.get_owned_dropped_book(dropped_book_id, auth.user_id)
    return success_response(dropped_out_schema.dump(book))


@bp.put("/<dropped_book_id>")
@login_required()
def update_dropped_book(auth, dropped_book_id):
    """
    Update one of my dropped books (partial)
    ---
    tags:
      - Dropped Books
    security:
      - Bearer: []
    parameters:
      - { in: path, name: dropped_book_id, type: string, required: true }
      - in: body
        name: body
        schema:
          type: object
    responses:
      200:
        description: Updated
      403:
        description: Not your record
      404:
        description: Not found
      409:
        description: Clashes with another dropped book
    """
    payload = request.get_json(silent=True) or {}
    data = dropped_update_schema.load(payload, partial=True)
    book = dropped_book_service.update_dropped_book(dropped_book_id, auth.user_id, data)
    return success_response(dropped_out_schema.dump(book), "Dropped book updated")


@bp.delete("/<dropped_book_id>")
@login_required()
def delete_dropped_book(auth, dropped_book_id):
    """
    Delete one of my dropped books
    ---
    tags:
      - Dropped Books
    security:
      - Bearer: []
    parameters:
      - { in: path, name: dropped_book_id, type: string, required: true }
    responses:
      200:
        description: Deleted
      403:
        description: Not your record
      404:
        description: Not found
    """
    dropped_book_service.delete_dropped_book(dropped_book_id, auth.user_id)
    return success_response(None, "Dropped book deleted")
