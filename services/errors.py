"""
Domain exceptions raised by the service layer.

Each carries the HTTP status and error code that api/errors.py uses when it
turns the exception into a response envelope.
"""
from __future__ import annotations


class ServiceError(Exception):
    status = 400
    code = "BAD_REQUEST"
    default_message = "Bad request"

    def __init__(self, message: str | None = None, details: dict | None = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationFailed(ServiceError):
    status = 422
    code = "VALIDATION_ERROR"
    default_message = "Invalid input"


class InvalidToken(ServiceError):
    status = 401
    code = "INVALID_TOKEN"
    default_message = "Invalid token"


class TokenNotFound(ServiceError):
    status = 401
    code = "TOKEN_NOT_FOUND"
    default_message = "Refresh token not found"


class TokenExpired(ServiceError):
    status = 401
    code = "TOKEN_EXPIRED"
    default_message = "Refresh token expired"


class LoginFailed(ServiceError):
    status = 401
    code = "LOGIN_FAILED"
    default_message = "Login failed"


class Forbidden(ServiceError):
    status = 403
    code = "FORBIDDEN"
    default_message = "You do not have permission to perform this action"


class NotFound(ServiceError):
    status = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"


class Conflict(ServiceError):
    status = 409
    code = "CONFLICT"
    default_message = "Conflict"


class UpstreamAuthError(ServiceError):
    status = 502
    code = "UPSTREAM_AUTH_ERROR"
    default_message = "Identity provider request failed"
