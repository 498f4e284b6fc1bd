"""
Domain errors raised by services and translated to JSON at the request boundary.

Every error body has the shape {"success": false, "message": ...}; validation
failures also carry an "errors" map of field -> message.
"""

from typing import Dict, Optional

from flask import jsonify, request
from werkzeug.exceptions import HTTPException


class ApiError(Exception):
    status_code = 500
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self) -> dict:
        return {"success": False, "message": self.message}


class ValidationError(ApiError):
    status_code = 400
    default_message = "Validation failed"

    def __init__(
        self, message: Optional[str] = None, errors: Optional[Dict[str, str]] = None
    ):
        super().__init__(message)
        self.errors = errors or {}

    def to_dict(self) -> dict:
        body = super().to_dict()
        if self.errors:
            body["errors"] = dict(self.errors)
        return body


class Unauthenticated(ApiError):
    status_code = 401
    default_message = "No token, authorization denied"


class PermissionDenied(ApiError):
    status_code = 403
    default_message = "Not authorized to update this campaign"


class NotFound(ApiError):
    status_code = 404
    default_message = "Not found"


class StorageError(ApiError):
    status_code = 502
    default_message = "Upload failed, try again later"


class RateLimited(ApiError):
    status_code = 429
    default_message = "rate limit exceeded"

    def __init__(self, retry_after: int = 60):
        super().__init__()
        self.retry_after = retry_after

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["retry_after"] = self.retry_after
        return body


def error_response(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def register_error_handlers(app, jwt):
    @app.errorhandler(ApiError)
    def handle_api_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(404)
    def handle_not_found(e):
        return error_response("Route not found", 404)

    @app.errorhandler(405)
    def handle_method_not_allowed(e):
        return error_response("Method not allowed", 405)

    @app.errorhandler(413)
    def handle_too_large(e):
        return error_response("Upload too large", 413)

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        if isinstance(e, HTTPException):
            return error_response(e.description or e.name, e.code or 500)
        app.logger.exception("Unhandled error on %s", request.path)
        return error_response("Server error", 500)

    @jwt.unauthorized_loader
    def handle_missing_token(reason):
        return error_response("No token, authorization denied", 401)

    @jwt.invalid_token_loader
    def handle_invalid_token(reason):
        return error_response("Token is not valid", 401)

    @jwt.expired_token_loader
    def handle_expired_token(jwt_header, jwt_payload):
        return error_response("Token has expired", 401)
