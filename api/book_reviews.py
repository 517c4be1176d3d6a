"""
Reviews of a reading group's monthly book. Only members of the book's group
can read or write them; only the author can edit or delete one.
"""
from __future__ import annotations

from flask import Blueprint, request

from models.schemas.book_review import (
    BookReviewCreateSchema,
    BookReviewUpdateSchema,
    BookReviewOutSchema,
)
from services import book_review_service
from utils.decorators import login_required

from .errors import success_response

bp = Blueprint("book_reviews", __name__, url_prefix="/api/book-reviews")

review_create_schema = BookReviewCreateSchema()
review_update_schema = BookReviewUpdateSchema()
review_out_schema = BookReviewOutSchema()
reviews_out_schema = BookReviewOutSchema(many=True)


@bp.post("")
@login_required()
def create_review(auth):
    """
    Review a monthly book of one of my groups
    ---
    tags:
      - Book Reviews
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [monthly_book_id, title, content]
          properties:
            monthly_book_id: { type: string }
            rating: { type: integer, minimum: 1, maximum: 5, default: 5 }
            title: { type: string, maxLength: 100 }
            content: { type: string, maxLength: 2000 }
            favorite_quote: { type: string, maxLength: 500 }
            recommendation: { type: string, maxLength: 1000 }
            is_public: { type: boolean, default: true }
            status: { type: string, enum: [DRAFT, PUBLISHED, HIDDEN], default: PUBLISHED }
    responses:
      201:
        description: Created
      403:
        description: Not a member of the group
      404:
        description: Monthly book not found
      409:
        description: Already reviewed
    """
    payload = request.get_json(silent=True) or {}
    data = review_create_schema.load(payload)
    review = book_review_service.create_review(auth.user_id, data)
    return success_response(review_out_schema.dump(review), "Review posted", 201)


@bp.get("/monthly-book/<monthly_book_id>")
@login_required()
def list_public_reviews(auth, monthly_book_id):
    """
    Published public reviews of a monthly book (members only)
    ---
    tags:
      - Book Reviews
    security:
      - Bearer: []
    parameters:
      - { in: path, name: monthly_book_id, type: string, required: true }
    responses:
      200:
        description: OK
      403:
        description: Not a member of the group
    """
    reviews = book_review_service.list_public_reviews(monthly_book_id, auth.user_id)
    return success_response(reviews_out_schema.dump(reviews))


@bp.get("/monthly-book/<monthly_book_id>/my")
@login_required()
def get_my_review(auth, monthly_book_id):
    """
    My review of a monthly book; data is null when I have not written one
    ---
    tags:
      - Book Reviews
    security:
      - Bearer: []
    parameters:
      - { in: path, name: monthly_book_id, type: string, required: true }
    responses:
      200:
        description: OK
    """
    review = book_review_service.get_my_review(monthly_book_id, auth.user_id)
    return success_response(review_out_schema.dump(review) if review is not None else None)


@bp.get("/monthly-book/<monthly_book_id>/statistics")
@login_required()
def review_statistics(auth, monthly_book_id):
    """
    Average rating and star distribution of published reviews
    ---
    tags:
      - Book Reviews
    security:
      - Bearer: []
    parameters:
      - { in: path, name: monthly_book_id, type: string, required: true }
    responses:
      200:
        description: OK
    """
    return success_response(book_review_service.review_statistics(monthly_book_id, auth.user_id))


@bp.put("/<review_id>")
@login_required()
def update_review(auth, review_id):
    """
    Update my review (partial)
    ---
    tags:
      - Book Reviews
    security:
      - Bearer: []
    parameters:
      - { in: path, name: review_id, type: string, required: true }
      - in: body
        name: body
        schema:
          type: object
    responses:
      200:
        description: Updated
      403:
        description: Not your review
      404:
        description: Not found
    """
    payload = request.get_json(silent=True) or {}
    data = review_update_schema.load(payload, partial=True)
    review = book_review_service.update_review(review_id, auth.user_id, data)
    return success_response(review_out_schema.dump(review), "Review updated")


@bp.delete("/<review_id>")
@login_required()
def delete_review(auth, review_id):
    """
    Delete my review
    ---
    tags:
      - Book Reviews
    security:
      - Bearer: []
    parameters:
      - { in: path, name: review_id, type: string, required: true }
    responses:
      200:
        description: Deleted
      403:
        description: Not your review
      404:
        description: Not found
    """
    book_review_service.delete_review(review_id, auth.user_id)
    return success_response(None, "Review deleted")
