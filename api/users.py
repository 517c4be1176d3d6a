from __future__ import annotations

from flask import Blueprint, request

from models.schemas.post import PostOutSchema
from models.schemas.user import UserOutSchema, UserUpdateSchema
from services import user_service
from utils.decorators import login_required

from .errors import success_response

bp = Blueprint("users", __name__, url_prefix="/api/users")

user_out_schema = UserOutSchema()
user_update_schema = UserUpdateSchema()
posts_out_schema = PostOutSchema(many=True)


@bp.get("/me")
@login_required()
def get_me(auth):
    """
    Current user's profile
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    user = user_service.get_user(auth.user_id)
    return success_response(user_out_schema.dump(user))


@bp.put("/me")
@login_required()
def update_me(auth):
    """
    Update nickname or profile image
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            nickname: { type: string, maxLength: 50 }
            profile_image: { type: string }
    responses:
      200:
        description: Updated
      409:
        description: Nickname already taken
    """
    payload = request.get_json(silent=True) or {}
    data = user_update_schema.load(payload)
    user = user_service.update_profile(auth.user_id, data)
    return success_response(user_out_schema.dump(user), "Profile updated")


@bp.get("/me/statistics")
@login_required()
def my_statistics(auth):
    """
    Reading statistics of the current user
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
    """
    return success_response(user_service.get_statistics(auth.user_id))


@bp.get("/<user_id>")
@login_required()
def get_profile(auth, user_id):
    """
    Public profile with statistics and recent public posts
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - in: path
        name: user_id
        type: string
        required: true
    responses:
      200:
        description: OK
      404:
        description: Not found
    """
    profile = user_service.get_public_profile(user_id)
    return success_response({
        "user": user_out_schema.dump(profile["user"]),
        "statistics": profile["statistics"],
        "recent_posts": posts_out_schema.dump(profile["recent_posts"]),
    })
