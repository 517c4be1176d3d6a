"""
Books the caller is reading now. Library rentals carry a due date; the
/overdue listing shows rentals past it.
"""
from __future__ import annotations

from flask import Blueprint, request, abort

from models.schemas.currently_reading import (
    CurrentlyReadingCreateSchema,
    CurrentlyReadingUpdateSchema,
    ProgressUpdateSchema,
    CurrentlyReadingOutSchema,
)
from services import currently_reading_service
from utils.decorators import login_required

from .errors import success_response
from .utils.pagination import parse_pagination, page_payload

bp = Blueprint("currently_reading", __name__, url_prefix="/api/currently-reading")

reading_create_schema = CurrentlyReadingCreateSchema()
reading_update_schema = CurrentlyReadingUpdateSchema()
progress_update_schema = ProgressUpdateSchema()
reading_out_schema = CurrentlyReadingOutSchema()
readings_out_schema = CurrentlyReadingOutSchema(many=True)


@bp.get("")
@login_required()
def list_reading(auth):
    """
    List the books I am reading (paginated)
    ---
    tags:
      - Currently Reading
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
    result = currently_reading_service.list_reading(auth.user_id, page, size, search=request.args.get("search"))
    return success_response(page_payload(result, readings_out_schema.dump))


@bp.post("")
@login_required()
def create_reading(auth):
    """
    Start reading a book
    ---
    tags:
      - Currently Reading
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [title, reading_type]
          properties:
            title: { type: string, maxLength: 200 }
            author: { type: string, maxLength: 100 }
            cover_image: { type: string }
            publisher: { type: string }
            published_date: { type: string }
            description: { type: string }
            reading_type: { type: string, enum: [PAPER_BOOK, LIBRARY_RENTAL, MILLIE, E_BOOK] }
            due_date: { type: string, format: date }
            progress_percentage: { type: integer, minimum: 0, maximum: 100 }
            memo: { type: string }
    responses:
      201:
        description: Created
      409:
        description: Already reading this book
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = reading_create_schema.load(payload)
    reading = currently_reading_service.create_reading(auth.user_id, data)
    return success_response(reading_out_schema.dump(reading), "Added to currently reading", 201)


@bp.get("/check-duplicate")
@login_required()
def check_duplicate(auth):
    """
    Whether I am already reading a book with this title and author
    ---
    tags:
      - Currently Reading
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
    matches = currently_reading_service.find_duplicates(auth.user_id, title, request.args.get("author"))
    return success_response({"duplicate": bool(matches), "duplicate_books": readings_out_schema.dump(matches)})


@bp.get("/overdue")
@login_required()
def list_overdue(auth):
    """
    Library rentals past their due date
    ---
    tags:
      - Currently Reading
    security:
      - Bearer: []
    responses:
      200:
        description: OK
    """
    return success_response(readings_out_schema.dump(currently_reading_service.list_overdue(auth.user_id)))


@bp.get("/<reading_id>")
@login_required()
def get_reading(auth, reading_id):
    """
    Get one of my currently-reading entries
    ---
    tags:
      - Currently Reading
    security:
      - Bearer: []
    parameters:
      - { in: path, name: reading_id, type: string, required: true }
    responses:
      200:
        description: OK
      403:
        description: Not your entry
      404:
        description: Not found
    """
    reading = currently_reading_service.get_owned_reading(reading_id, auth.user_id)
    return success_response(reading_out_schema.dump(reading))


@bp.put("/<reading_id>")
@login_required()
def update_reading(auth, reading_id):
    """
    Update one of my currently-reading entries (partial)
    ---
    tags:
      - Currently Reading
    security:
      - Bearer: []
    parameters:
      - { in: path, name: reading_id, type: string, required: true }
      - in: body
        name: body
        schema:
          type: object
    responses:
      200:
        description: Updated
      403:
        description: Not your entry
      404:
        description: Not found
      409:
        description: Already reading a book with this title and author
    """
    payload = request.get_json(silent=True) or {}
    data = reading_update_schema.load(payload, partial=True)
    reading = currently_reading_service.update_reading(reading_id, auth.user_id, data)
    return success_response(reading_out_schema.dump(reading), "Entry updated")


@bp.put("/<reading_id>/progress")
@login_required()
def update_progress(auth, reading_id):
    """
    Update reading progress and/or memo
    ---
    tags:
      - Currently Reading
    security:
      - Bearer: []
    parameters:
      - { in: path, name: reading_id, type: string, required: true }
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            progress_percentage: { type: integer, minimum: 0, maximum: 100 }
            memo: { type: string }
    responses:
      200:
        description: Updated
      403:
        description: Not your entry
      404:
        description: Not found
    """
    payload = request.get_json(silent=True) or {}
    data = progress_update_schema.load(payload)
    reading = currently_reading_service.update_progress(reading_id, auth.user_id, data)
    return success_response(reading_out_schema.dump(reading), "Progress updated")


@bp.delete("/<reading_id>")
@login_required()
def delete_reading(auth, reading_id):
    """
    Remove a book from my currently-reading list
    ---
    tags:
      - Currently Reading
    security:
      - Bearer: []
    parameters:
      - { in: path, name: reading_id, type: string, required: true }
    responses:
      200:
        description: Deleted
      403:
        description: Not your entry
      404:
        description: Not found
    """
    currently_reading_service.delete_reading(reading_id, auth.user_id)
    return success_response(None, "Removed from currently reading")
