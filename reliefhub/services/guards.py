"""Ownership checks for resource mutations.

Authentication itself is enforced by ``@jwt_required()`` on the route,
which runs before any of this. What remains is, in order: the resource
must exist (404), then it must belong to the requester (403).
"""
from __future__ import annotations

from ..errors import ForbiddenError, NotFoundError
from ..models import Resource


def load_owned_resource(storage, resource_id: int, user_id: int) -> Resource:
    """Return the resource if ``user_id`` owns it, else raise."""
    resource = storage.get_resource(resource_id)
    if resource is None:
        raise NotFoundError("Resource not found.")
    if resource.user_id != user_id:
        raise ForbiddenError("You can only modify your own resources.")
    return resource
