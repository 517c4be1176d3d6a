from __future__ import annotations

from flask import Blueprint, request

from models.schemas.comment import CommentCreateSchema, CommentOutSchema
from services import comment_service
from utils.decorators import login_required

from .errors import success_response
from .utils.pagination import parse_pagination, page_payload

bp = Blueprint("comments", __name__, url_prefix="/api/comments")

comment_create_schema = CommentCreateSchema()
comment_out_schema = CommentOutSchema()


def dump_comment(comment, user_id: str, with_replies: bool = False) -> dict:
    data = comment_out_schema.dump(comment)
    data["can_delete"] = comment.can_delete(user_id)
    if with_replies:
        data["replies"] = [dump_comment(reply, user_id) for reply in comment.replies]
    return data


def dump_threads(comments, user_id: str) -> list:
    return [dump_comment(c, user_id, with_replies=True) for c in comments]


@bp.get("/posts/<post_id>")
@login_required()
def list_post_comments(auth, post_id):
    """
    Comments of a post: root comments paginated, replies nested
    ---
    tags:
      - Comments
    security:
      - Bearer: []
    parameters:
      - { in: path, name: post_id, type: string, required: true }
      - { in: query, name: page, type: integer, default: 1 }
      - { in: query, name: size, type: integer, default: 20 }
    responses:
      200:
        description: OK
      403:
        description: Private post
      404:
        description: Post not found
    """
    page, size = parse_pagination()
    result = comment_service.list_post_comments(post_id, auth.user_id, page, size)
    payload = page_payload(result, lambda items: dump_threads(items, auth.user_id))
    payload.update(comment_service.comment_counts(post_id))
    return success_response(payload)


@bp.post("/posts/<post_id>")
@login_required()
def create_comment(auth, post_id):
    """
    Comment on a post, or reply to a root comment with parent_id
    ---
    tags:
      - Comments
    security:
      - Bearer: []
    parameters:
      - { in: path, name: post_id, type: string, required: true }
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [content]
          properties:
            content: { type: string, maxLength: 1000 }
            parent_id: { type: string }
    responses:
      201:
        description: Created
      404:
        description: Post or parent comment not found
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = comment_create_schema.load(payload)
    comment = comment_service.create_comment(post_id, auth.user_id, data["content"], data.get("parent_id"))
    return success_response(dump_comment(comment, auth.user_id), "Comment created", 201)


@bp.delete("/<comment_id>")
@login_required()
def delete_comment(auth, comment_id):
    """
    Delete my comment (soft delete)
    ---
    tags:
      - Comments
    security:
      - Bearer: []
    parameters:
      - { in: path, name: comment_id, type: string, required: true }
    responses:
      200:
        description: Deleted
      403:
        description: Not your comment
      404:
        description: Not found
      409:
        description: Already deleted
    """
    comment_service.delete_comment(comment_id, auth.user_id)
    return success_response(None, "Comment deleted")


@bp.get("/<comment_id>/replies")
@login_required()
def list_replies(auth, comment_id):
    """
    Replies to a comment
    ---
    tags:
      - Comments
    security:
      - Bearer: []
    parameters:
      - { in: path, name: comment_id, type: string, required: true }
    responses:
      200:
        description: OK
    """
    replies = comment_service.list_replies(comment_id, auth.user_id)
    return success_response([dump_comment(r, auth.user_id) for r in replies])


@bp.get("/my")
@login_required()
def my_comments(auth):
    """
    My comments, newest first
    ---
    tags:
      - Comments
    security:
      - Bearer: []
    responses:
      200:
        description: OK
    """
    page, size = parse_pagination()
    result = comment_service.list_my_comments(auth.user_id, page, size)
    return success_response(page_payload(result, lambda items: dump_threads(items, auth.user_id)))
