"""
Authentication routes for ReliefHub.

Provides endpoints for registering, logging in and out, and fetching
the current user. Logging in (or registering) opens a server-side
session and returns an access token, both in the response body and as
an HTTP-only cookie for browser clients.
"""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, request, jsonify
from flask_jwt_extended import jwt_required, set_access_cookies, unset_jwt_cookies

from sqlalchemy.exc import IntegrityError

from ..db import db
from ..errors import ConflictError, NotFoundError, UnauthorizedError
from ..schemas import CredentialsSchema, UserSchema, load_or_raise
from ..sessions import close_session, current_user_id, open_session
from ..storage import get_storage

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)


def _request_data() -> dict:
    return request.get_json(silent=True) or request.form.to_dict()


def _session_response(user, token: str, status_code: int):
    response = jsonify({"access_token": token, "user": UserSchema().dump(user)})
    response.status_code = status_code
    if "cookies" in current_app.config["JWT_TOKEN_LOCATION"]:
        set_access_cookies(response, token)
    return response


@auth_bp.route("/register", methods=["POST"])
def register():
    """Register a new user and log them in.

    Expects ``username`` and ``password``. Usernames must be unique;
    a taken username returns 409.
    """
    data = load_or_raise(CredentialsSchema(), _request_data())
    storage = get_storage()
    if storage.get_user_by_username(data["username"]) is not None:
        raise ConflictError("Username already exists.")

    try:
        user = storage.create_user(data["username"], data["password"])
    except IntegrityError:
        # lost a race with a concurrent registration for the same name
        db.session.rollback()
        raise ConflictError("Username already exists.")
    logger.info("Registered user %s", user.id)
    return _session_response(user, open_session(user), 201)


@auth_bp.route("/login", methods=["POST"])
def login():
    """Authenticate a user and open a session.

    Unknown usernames and wrong passwords produce the same 401 so the
    response does not reveal which usernames exist.
    """
    data = load_or_raise(CredentialsSchema(), _request_data())
    user = get_storage().get_user_by_username(data["username"])
    if user is None or not user.check_password(data["password"]):
        raise UnauthorizedError("Invalid username or password.")
    return _session_response(user, open_session(user), 200)


@auth_bp.route("/logout", methods=["POST"])
@jwt_required()
def logout():
    """End the current session."""
    close_session()
    response = jsonify({"message": "Logged out."})
    unset_jwt_cookies(response)
    return response


@auth_bp.route("/user", methods=["GET"])
@jwt_required()
def current_user() -> tuple[dict, int]:
    """Return the public profile of the logged-in user."""
    user = get_storage().get_user(current_user_id())
    if user is None:
        raise NotFoundError("User not found.")
    return UserSchema().dump(user), 200
