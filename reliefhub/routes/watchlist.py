"""
Routes for the current user's watchlist.

All endpoints require a session. Adding a resource twice is rejected
with 400; removing a resource that is not on the list succeeds.
"""

from __future__ import annotations

from flask import Blueprint
from flask_jwt_extended import jwt_required

from ..services import get_watchlist_service
from ..sessions import current_user_id

watchlist_bp = Blueprint("watchlist", __name__)


@watchlist_bp.route("/watchlist", methods=["GET"])
@jwt_required()
def list_watchlist() -> tuple[list[dict], int]:
    """List watched resources, each flagged with ``isWatched``."""
    return get_watchlist_service().list_watched(current_user_id()), 200


@watchlist_bp.route("/watchlist/<int:resource_id>", methods=["POST"])
@jwt_required()
def add_to_watchlist(resource_id: int) -> tuple[dict, int]:
    return get_watchlist_service().add(current_user_id(), resource_id), 201


@watchlist_bp.route("/watchlist/<int:resource_id>", methods=["DELETE"])
@jwt_required()
def remove_from_watchlist(resource_id: int) -> tuple[str, int]:
    get_watchlist_service().remove(current_user_id(), resource_id)
    return "", 204
