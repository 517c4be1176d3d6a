"""
Personal finished-reading records. Every route is scoped to the caller:
another user's record answers 403.
"""
from __future__ import annotations

from flask import Blueprint, request, abort

from models.schemas.book import BookCreateSchema, BookUpdateSchema, BookOutSchema
from services import book_service
from utils.decorators import login_required

from .errors import success_response
from .utils.pagination import parse_pagination, parse_int_arg, page_payload

bp = Blueprint("books", __name__, url_prefix="/api/books")

book_create_schema = BookCreateSchema()
book_update_schema = BookUpdateSchema()
book_out_schema = BookOutSchema()
books_out_schema = BookOutSchema(many=True)


@bp.get("")
@login_required()
def list_books(auth):
    """
    List my finished books (paginated, filterable)
    ---
    tags:
      - Books
    security:
      - Bearer: []
    parameters:
      - { in: query, name: page, type: integer, default: 1 }
      - { in: query, name: size, type: integer, default: 20 }
      - { in: query, name: year, type: integer }
      - { in: query, name: month, type: integer }
      - { in: query, name: rating, type: integer }
      - { in: query, name: q, type: string, description: "Search title or author" }
    responses:
      200:
        description: OK
    """
    page, size = parse_pagination()
    result = book_service.list_books(
        auth.user_id,
        page,
        size,
        year=parse_int_arg("year"),
        month=parse_int_arg("month", 1, 12),
        rating=parse_int_arg("rating", 1, 5),
        q=request.args.get("q"),
    )
    return success_response(page_payload(result, books_out_schema.dump))


@bp.post("")
@login_required()
def create_book(auth):
    """
    Record a finished book
    ---
    tags:
      - Books
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [title, author, rating, finished_date]
          properties:
            title: { type: string, maxLength: 200 }
            author: { type: string, maxLength: 100 }
            cover_image: { type: string }
            rating: { type: integer, minimum: 1, maximum: 5 }
            review: { type: string }
            finished_date: { type: string, format: date }
    responses:
      201:
        description: Created
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = book_create_schema.load(payload)
    book = book_service.create_book(auth.user_id, data)
    return success_response(book_out_schema.dump(book), "Book recorded", 201)


@bp.get("/check-duplicate")
@login_required()
def check_duplicate(auth):
    """
    Whether I already recorded a book with this title and author
    ---
    tags:
      - Books
    security:
      - Bearer: []
    parameters:
      - { in: query, name: title, type: string, required: true }
      - { in: query, name: author, type: string, required: true }
    responses:
      200:
        description: OK
    """
    title = request.args.get("title", "").strip()
    author = request.args.get("author", "").strip()
    if not title or not author:
        abort(400, description="title and author are required")
    return success_response({"duplicate": book_service.is_duplicate(auth.user_id, title, author)})


@bp.get("/statistics/monthly")
@login_required()
def monthly_statistics(auth):
    """
    Books finished per month, with average rating
    ---
    tags:
      - Books
    security:
      - Bearer: []
    responses:
      200:
        description: OK
    """
    return success_response(book_service.monthly_statistics(auth.user_id))


@bp.get("/<book_id>")
@login_required()
def get_book(auth, book_id):
    """
    Get one of my books
    ---
    tags:
      - Books
    security:
      - Bearer: []
    parameters:
      - { in: path, name: book_id, type: string, required: true }
    responses:
      200:
        description: OK
      403:
        description: Not your book
      404:
        description: Not found
    """
    book = book_service.get_owned_book(book_id, auth.user_id)
    return success_response(book_out_schema.dump(book))


@bp.put("/<book_id>")
@login_required()
def update_book(auth, book_id):
    """
    Update one of my books (partial)
    ---
    tags:
      - Books
    security:
      - Bearer: []
    parameters:
      - { in: path, name: book_id, type: string, required: true }
      - in: body
        name: body
        schema:
          type: object
    responses:
      200:
        description: Updated
      403:
        description: Not your book
      404:
        description: Not found
    """
    payload = request.get_json(silent=True) or {}
    data = book_update_schema.load(payload, partial=True)
    book = book_service.update_book(book_id, auth.user_id, data)
    return success_response(book_out_schema.dump(book), "Book updated")


@bp.delete("/<book_id>")
@login_required()
def delete_book(auth, book_id):
    """
    Delete one of my books
    ---
    tags:
      - Books
    security:
      - Bearer: []
    parameters:
      - { in: path, name: book_id, type: string, required: true }
    responses:
      200:
        description: Deleted
      403:
        description: Not your book
      404:
        description: Not found
    """
    book_service.delete_book(book_id, auth.user_id)
    return success_response(None, "Book deleted")
