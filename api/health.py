from flask import Blueprint

from .errors import success_response

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    """
    Health check
    ---
    tags:
      - Health
    responses:
      200:
        description: API is up
    """
    return success_response({"status": "ok", "version": "1.0.0"})
