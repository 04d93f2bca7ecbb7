"""Centralised error handling and custom exceptions.

This module defines custom exception classes and provides Flask
error handlers that serialise them into JSON responses. Services raise
these exceptions to signal specific error conditions without coupling
themselves to HTTP response codes. The handlers are registered by the
application factory.

Every error body has the shape::

    {"error": {"code": "...", "message": "..."}}

Storage failures are logged with their traceback and reported to the
client with a generic message only.
"""
from __future__ import annotations

import logging

from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def payload(self) -> dict:
        return {"code": self.code, "message": self.message}

    def to_response(self):
        return jsonify({"error": self.payload()}), self.status_code


class ValidationError(ApiError):
    """Raised when input validation fails."""

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, fields: dict | None = None) -> None:
        super().__init__(message)
        self.fields = fields or {}

    def payload(self) -> dict:
        body = super().payload()
        body["fields"] = self.fields
        return body


class UnauthorizedError(ApiError):
    """Raised when a request carries no valid session."""

    status_code = 401
    code = "UNAUTHORIZED"


class ForbiddenError(ApiError):
    """Raised when an authenticated user may not touch a resource."""

    status_code = 403
    code = "FORBIDDEN"


class NotFoundError(ApiError):
    """Raised when a requested resource cannot be found."""

    status_code = 404
    code = "NOT_FOUND"


class ConflictError(ApiError):
    """Raised when a uniqueness conflict occurs.

    Defaults to 409; callers may pass another status where the public
    API reports the conflict differently.
    """

    status_code = 409
    code = "CONFLICT"


def error_response(status_code: int, code: str, message: str):
    """Build an error response outside of exception handling."""
    return jsonify({"error": {"code": code, "message": message}}), status_code


def register_error_handlers(app) -> None:
    """Register custom error handlers on the given Flask app."""
    from .db import db

    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        return err.to_response()

    @app.errorhandler(SQLAlchemyError)
    def handle_storage_error(err: SQLAlchemyError):
        db.session.rollback()
        logger.exception("Storage failure while handling request")
        return error_response(500, "INTERNAL_ERROR", "An unexpected error occurred.")

    @app.errorhandler(413)
    def handle_request_too_large(err):
        return error_response(413, "PAYLOAD_TOO_LARGE", "Request body is too large.")
