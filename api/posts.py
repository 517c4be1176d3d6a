from __future__ import annotations

from flask import Blueprint, request, abort

from models.post import PostType
from models.schemas.common import validate_and_normalize_isbn
from models.schemas.post import PostCreateSchema, PostUpdateSchema, PostOutSchema
from services import post_service
from utils.decorators import login_required

from .errors import success_response
from .utils.pagination import parse_pagination, page_payload

bp = Blueprint("posts", __name__, url_prefix="/api/posts")

post_create_schema = PostCreateSchema()
post_update_schema = PostUpdateSchema()
post_out_schema = PostOutSchema()
posts_out_schema = PostOutSchema(many=True)


def parse_post_type():
    val = request.args.get("post_type")
    if not val:
        return None
    try:
        return PostType[val.strip().upper()]
    except KeyError:
        abort(400, description=f"Unsupported post_type: {val}")


@bp.get("")
@login_required()
def list_posts(auth):
    """
    Public feed, newest first
    ---
    tags:
      - Posts
    security:
      - Bearer: []
    parameters:
      - { in: query, name: page, type: integer, default: 1 }
      - { in: query, name: size, type: integer, default: 20 }
      - { in: query, name: post_type, type: string, enum: [REVIEW, RECOMMENDATION, QUOTE] }
    responses:
      200:
        description: OK
    """
    page, size = parse_pagination()
    result = post_service.list_public_posts(page, size, post_type=parse_post_type())
    return success_response(page_payload(result, posts_out_schema.dump))


@bp.get("/my")
@login_required()
def my_posts(auth):
    """
    My posts, public and private
    ---
    tags:
      - Posts
    security:
      - Bearer: []
    responses:
      200:
        description: OK
    """
    page, size = parse_pagination()
    result = post_service.list_my_posts(auth.user_id, page, size)
    return success_response(page_payload(result, posts_out_schema.dump))


@bp.get("/search")
@login_required()
def search_posts(auth):
    """
    Search public posts
    ---
    tags:
      - Posts
    security:
      - Bearer: []
    parameters:
      - { in: query, name: keyword, type: string }
      - { in: query, name: book_title, type: string }
      - { in: query, name: post_type, type: string }
    responses:
      200:
        description: OK
    """
    page, size = parse_pagination()
    result = post_service.search_posts(
        page,
        size,
        keyword=request.args.get("keyword"),
        book_title=request.args.get("book_title"),
        post_type=parse_post_type(),
    )
    return success_response(page_payload(result, posts_out_schema.dump))


@bp.get("/book/<isbn>")
@login_required()
def posts_by_isbn(auth, isbn):
    """
    Public posts about one book
    ---
    tags:
      - Posts
    security:
      - Bearer: []
    parameters:
      - { in: path, name: isbn, type: string, required: true }
    responses:
      200:
        description: OK
      422:
        description: Invalid ISBN
    """
    page, size = parse_pagination()
    result = post_service.list_posts_by_isbn(validate_and_normalize_isbn(isbn), page, size)
    return success_response(page_payload(result, posts_out_schema.dump))


@bp.post("")
@login_required()
def create_post(auth):
    """
    Create a post
    Required fields depend on post_type:
    REVIEW needs title and content, RECOMMENDATION needs recommendation_type
    and reason, QUOTE needs at least one quote.
    ---
    tags:
      - Posts
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [post_type, book_title]
          properties:
            post_type: { type: string, enum: [REVIEW, RECOMMENDATION, QUOTE] }
            visibility: { type: string, enum: [PUBLIC, PRIVATE] }
            book_isbn: { type: string }
            book_title: { type: string }
            book_author: { type: string }
            title: { type: string }
            content: { type: string }
            recommendation_type: { type: string, enum: [RECOMMEND, NOT_RECOMMEND] }
            reason: { type: string }
            quotes:
              type: array
              items:
                type: object
                properties:
                  page: { type: integer }
                  text: { type: string }
    responses:
      201:
        description: Created
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = post_create_schema.load(payload)
    post = post_service.create_post(auth.user_id, data)
    return success_response(post_out_schema.dump(post), "Post created", 201)


@bp.get("/<post_id>")
@login_required()
def get_post(auth, post_id):
    """
    Get a post (private posts only for their author)
    ---
    tags:
      - Posts
    security:
      - Bearer: []
    parameters:
      - { in: path, name: post_id, type: string, required: true }
    responses:
      200:
        description: OK
      403:
        description: Private post
      404:
        description: Not found
    """
    post = post_service.get_visible_post(post_id, auth.user_id)
    return success_response(post_out_schema.dump(post))


@bp.put("/<post_id>")
@login_required()
def update_post(auth, post_id):
    """
    Update my post (partial)
    ---
    tags:
      - Posts
    security:
      - Bearer: []
    parameters:
      - { in: path, name: post_id, type: string, required: true }
      - in: body
        name: body
        schema:
          type: object
    responses:
      200:
        description: Updated
      403:
        description: Not your post
      404:
        description: Not found
    """
    payload = request.get_json(silent=True) or {}
    data = post_update_schema.load(payload, partial=True)
    post = post_service.update_post(post_id, auth.user_id, data)
    return success_response(post_out_schema.dump(post), "Post updated")


@bp.delete("/<post_id>")
@login_required()
def delete_post(auth, post_id):
    """
    Delete my post and its comments
    ---
    tags:
      - Posts
    security:
      - Bearer: []
    parameters:
      - { in: path, name: post_id, type: string, required: true }
    responses:
      200:
        description: Deleted
      403:
        description: Not your post
      404:
        description: Not found
    """
    post_service.delete_post(post_id, auth.user_id)
    return success_response(None, "Post deleted")
