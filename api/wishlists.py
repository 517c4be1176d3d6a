"""Books the caller wants to read, ordered by priority (1 = most wanted)."""
from __future__ import annotations

from flask import Blueprint, request, abort

from models.schemas.wishlist import (
    WishlistCreateSchema,
    WishlistUpdateSchema,
    WishlistOutSchema,
    WishlistMatchSchema,
)
from services import wishlist_service
from utils.decorators import login_required

from .errors import success_response
from .utils.pagination import parse_pagination, parse_int_arg, page_payload

bp = Blueprint("wishlists", __name__, url_prefix="/api/wishlists")

wishlist_create_schema = WishlistCreateSchema()
wishlist_update_schema = WishlistUpdateSchema()
wishlist_out_schema = WishlistOutSchema()
wishlists_out_schema = WishlistOutSchema(many=True)
wishlist_matches_schema = WishlistMatchSchema(many=True)


@bp.get("")
@login_required()
def list_wishlists(auth):
    """
    List my wishlist (paginated, most wanted first)
    ---
    tags:
      - Wishlists
    security:
      - Bearer: []
    parameters:
      - { in: query, name: page, type: integer, default: 1 }
      - { in: query, name: size, type: integer, default: 20 }
      - { in: query, name: priority, type: integer, minimum: 1, maximum: 5 }
      - { in: query, name: search, type: string, description: "Search title or author" }
    responses:
      200:
        description: OK
    """
    page, size = parse_pagination()
    result = wishlist_service.list_wishlists(
        auth.user_id,
        page,
        size,
        priority=parse_int_arg("priority", 1, 5),
        search=request.args.get("search"),
    )
    return success_response(page_payload(result, wishlists_out_schema.dump))


@bp.post("")
@login_required()
def create_wishlist(auth):
    """
    Add a book to my wishlist
    ---
    tags:
      - Wishlists
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [title]
          properties:
            title: { type: string, maxLength: 200 }
            author: { type: string, maxLength: 100 }
            cover_image: { type: string }
            publisher: { type: string }
            published_date: { type: string }
            description: { type: string }
            memo: { type: string }
            priority: { type: integer, minimum: 1, maximum: 5, default: 3 }
    responses:
      201:
        description: Created
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = wishlist_create_schema.load(payload)
    wishlist = wishlist_service.create_wishlist(auth.user_id, data)
    return success_response(wishlist_out_schema.dump(wishlist), "Added to wishlist", 201)


@bp.get("/check-duplicate")
@login_required()
def check_duplicate(auth):
    """
    Wishlist items matching a title (and optionally an author)
    ---
    tags:
      - Wishlists
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
    matches = wishlist_service.find_duplicates(auth.user_id, title, request.args.get("author"))
    return success_response({
        "duplicate": bool(matches),
        "duplicate_wishlists": wishlist_matches_schema.dump(matches),
    })


@bp.get("/statistics/priority")
@login_required()
def priority_statistics(auth):
    """
    Number of wishlist items per priority
    ---
    tags:
      - Wishlists
    security:
      - Bearer: []
    responses:
      200:
        description: OK
    """
    return success_response(wishlist_service.priority_statistics(auth.user_id))


@bp.get("/<wishlist_id>")
@login_required()
def get_wishlist(auth, wishlist_id):
    """
    Get one of my wishlist items
    ---
    tags:
      - Wishlists
    security:
      - Bearer: []
    parameters:
      - { in: path, name: wishlist_id, type: string, required: true }
    responses:
      200:
        description: OK
      403:
        description: Not your item
      404:
        description: Not found
    """
    wishlist = wishlist_service.get_owned_wishlist(wishlist_id, auth.user_id)
    return success_response(wishlist_out_schema.dump(wishlist))


@bp.put("/<wishlist_id>")
@login_required()
def update_wishlist(auth, wishlist_id):
    """
    Update one of my wishlist items (partial)
    ---
    tags:
      - Wishlists
    security:
      - Bearer: []
    parameters:
      - { in: path, name: wishlist_id, type: string, required: true }
      - in: body
        name: body
        schema:
          type: object
    responses:
      200:
        description: Updated
      403:
        description: Not your item
      404:
        description: Not found
    """
    payload = request.get_json(silent=True) or {}
    data = wishlist_update_schema.load(payload, partial=True)
    wishlist = wishlist_service.update_wishlist(wishlist_id, auth.user_id, data)
    return success_response(wishlist_out_schema.dump(wishlist), "Wishlist item updated")


@bp.delete("/<wishlist_id>")
@login_required()
def delete_wishlist(auth, wishlist_id):
    """
    Remove a book from my wishlist
    ---
    tags:
      - Wishlists
    security:
      - Bearer: []
    parameters:
      - { in: path, name: wishlist_id, type: string, required: true }
    responses:
      200:
        description: Deleted
      403:
        description: Not your item
      404:
        description: Not found
    """
    wishlist_service.delete_wishlist(wishlist_id, auth.user_id)
    return success_response(None, "Removed from wishlist")
