"""
Routes for browsing and managing resource listings.

Anyone may browse the full list. Everything else requires a session,
and changes to a listing are limited to its owner. Create and update
accept either JSON or ``multipart/form-data``; in multipart requests
``types`` may repeat and image files are sent under ``images``.
"""

from __future__ import annotations

from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from ..errors import ValidationError
from ..services import ResourceFilter, get_resource_service
from ..sessions import current_user_id

resources_bp = Blueprint("resources", __name__)


def _request_payload() -> dict:
    if request.is_json:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object.")
        return dict(data)
    data = request.form.to_dict()
    if "types" in request.form:
        data["types"] = request.form.getlist("types")
    return data


def _uploaded_images() -> list:
    return request.files.getlist("images")


@resources_bp.route("/resources", methods=["GET"])
def list_resources() -> tuple[list[dict], int]:
    """List every resource with its provider.

    Optional ``type``, ``q`` and ``available`` query parameters narrow
    the result.
    """
    resource_filter = ResourceFilter.from_args(request.args)
    return get_resource_service().list_all(resource_filter), 200


@resources_bp.route("/resources/owned", methods=["GET"])
@jwt_required()
def list_owned_resources() -> tuple[list[dict], int]:
    """List the current user's resources, including unavailable ones."""
    resource_filter = ResourceFilter.from_args(request.args)
    return get_resource_service().list_owned(current_user_id(), resource_filter), 200


@resources_bp.route("/resources", methods=["POST"])
@jwt_required()
def create_resource() -> tuple[dict, int]:
    """Create a resource owned by the current user."""
    resource = get_resource_service().create(current_user_id(), _request_payload(), _uploaded_images())
    return resource, 201


@resources_bp.route("/resources/<int:resource_id>", methods=["PATCH"])
@jwt_required()
def update_resource(resource_id: int) -> tuple[dict, int]:
    """Update a resource.

    A body holding only ``available`` toggles availability and leaves
    everything else alone. Any other body updates the given fields and
    appends uploaded images.
    """
    resource = get_resource_service().update(
        current_user_id(), resource_id, _request_payload(), _uploaded_images()
    )
    return resource, 200


@resources_bp.route("/resources/<int:resource_id>", methods=["DELETE"])
@jwt_required()
def delete_resource(resource_id: int) -> tuple[str, int]:
    """Delete a resource permanently."""
    get_resource_service().delete(current_user_id(), resource_id)
    return "", 204
