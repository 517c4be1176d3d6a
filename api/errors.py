"""
Response envelope and global error handlers.

Every JSON response, success or failure, has the shape
    {"success": bool, "data": ..., "message": str, "timestamp": "YYYY-MM-DDTHH:MM:SS"}
"""
from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError
import logging

from models import storage
from models.base_model import utcnow, TIME_FMT
from services.errors import ServiceError

logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
}


def envelope(success: bool, data=None, message: str = ""):
    return {
        "success": success,
        "data": data,
        "message": message,
        "timestamp": utcnow().strftime(TIME_FMT),
    }


def success_response(data=None, message: str = "OK", status: int = 200):
    return jsonify(envelope(True, data, message)), status


def error_response(error: str, message: str, status: int, details: dict | None = None):
    data = {"error": error}
    if details:
        data["details"] = details
    return jsonify(envelope(False, data, message)), status


def register_error_handlers(app):
    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        storage.rollback()
        if err.status >= 500:
            logger.error("%s: %s", err.code, err.message)
        return error_response(err.code, err.message, err.status, details=err.details)

    # Marshmallow validation errors map to 422
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        storage.rollback()
        return error_response("VALIDATION_ERROR", "Invalid input", 422, details=err.messages)

    # Integrity errors (unique constraints, FK violations, check constraints)
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        storage.rollback()
        message = str(getattr(err, "orig", err))
        lower_msg = message.lower()
        if current_app and current_app.debug:
            logger.exception("Integrity error", exc_info=err)
        if "unique constraint" in lower_msg or "unique violation" in lower_msg:
            return error_response("CONFLICT", "Unique constraint violated.", 409)
        if "foreign key constraint" in lower_msg or "foreign key mismatch" in lower_msg:
            return error_response("BAD_REQUEST", "Foreign key constraint failed.", 400)
        if "check constraint" in lower_msg or "constraint failed" in lower_msg:
            return error_response("BAD_REQUEST", "Check constraint failed.", 400)
        return error_response("BAD_REQUEST", "Integrity error.", 400)

    # Werkzeug HTTPExceptions (abort(), 404 routing, 405) keep their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = err.code or 500
        return error_response(HTTP_ERROR_CODES.get(status, "HTTP_ERROR"), err.description, status)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        storage.rollback()
        logger.exception("Unhandled exception", exc_info=err)
        details = None
        if current_app and current_app.debug:
            details = {"type": err.__class__.__name__, "message": str(err)}
        return error_response("INTERNAL_ERROR", "An unexpected error occurred", 500, details=details)
