"""
Server-side sessions on top of Flask-JWT-Extended.

Logging in issues an access token and records its ``jti`` claim as a
row in the ``sessions`` table. On every protected request the token's
``jti`` is looked up there: a token whose row is missing or expired is
treated as revoked. Logging out deletes the row, which invalidates the
token immediately even though it has not expired yet.

Tokens are accepted from the ``Authorization: Bearer`` header and from
an HTTP-only cookie set at login.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from flask import current_app
from flask_jwt_extended import (
    JWTManager,
    create_access_token,
    decode_token,
    get_jwt,
    get_jwt_identity,
)

from .errors import error_response
from .models import User
from .storage import get_storage

logger = logging.getLogger(__name__)


def open_session(user: User) -> str:
    """Issue an access token for ``user`` and store its session row."""
    token = create_access_token(identity=str(user.id))
    claims = decode_token(token)
    expires_at = current_app.config["JWT_ACCESS_TOKEN_EXPIRES"]
    storage = get_storage()
    removed = storage.prune_expired_sessions(datetime.utcnow())
    if removed:
        logger.info("Pruned %d expired sessions", removed)
    storage.create_session(
        sid=claims["jti"],
        user_id=user.id,
        expires_at=_utc_from_timestamp(claims["iat"]) + expires_at,
    )
    logger.info("Opened session for user %s", user.id)
    return token


def close_session() -> None:
    """Delete the session row behind the current request's token."""
    get_storage().delete_session(get_jwt()["jti"])
    logger.info("Closed session for user %s", get_jwt_identity())


def current_user_id() -> int:
    """Return the id of the authenticated user for this request."""
    return int(get_jwt_identity())


def _utc_from_timestamp(timestamp: int) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).replace(tzinfo=None)


def register_session_callbacks(jwt: JWTManager) -> None:
    """Wire the session table and error bodies into ``jwt``."""

    @jwt.token_in_blocklist_loader
    def session_revoked(jwt_header: dict, jwt_payload: dict) -> bool:
        session = get_storage().get_session(jwt_payload["jti"])
        return session is None or session.is_expired()

    @jwt.unauthorized_loader
    def missing_token(reason: str):
        return error_response(401, "UNAUTHORIZED", "Authentication required.")

    @jwt.invalid_token_loader
    def invalid_token(reason: str):
        return error_response(401, "UNAUTHORIZED", "Invalid session.")

    @jwt.expired_token_loader
    def expired_token(jwt_header: dict, jwt_payload: dict):
        return error_response(401, "UNAUTHORIZED", "Session expired.")

    @jwt.revoked_token_loader
    def revoked_token(jwt_header: dict, jwt_payload: dict):
        return error_response(401, "UNAUTHORIZED", "Session has ended.")
