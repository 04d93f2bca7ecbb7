"""Resource listing and management.

``ResourceService`` composes storage calls into the behaviour behind
the ``/api/resources`` endpoints. It validates payloads, checks
ownership, embeds uploaded images and returns JSON-ready dictionaries.

Updates follow one of two paths:

* an *availability-only* update, when the body holds exactly the
  ``available`` key and no files, changes that flag and nothing else;
* a *full* update validates the submitted fields as a partial payload,
  replaces them, and appends newly uploaded images to the existing
  list. Existing images are never removed this way.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable, List, Optional

from werkzeug.datastructures import FileStorage

from ..errors import NotFoundError
from ..models import Resource
from ..schemas import (
    AvailabilitySchema,
    ResourcePayloadSchema,
    ResourceSchema,
    UserSchema,
    load_or_raise,
)
from .filters import ResourceFilter
from .guards import load_owned_resource
from .uploads import MAX_IMAGE_BYTES, MAX_IMAGE_COUNT, encode_images

logger = logging.getLogger(__name__)


def _normalise_capacity(values: dict[str, Any], types: Iterable[str]) -> None:
    # Capacity only applies to shelters
    if "shelter" not in types:
        values["capacity"] = None


class ResourceService:
    def __init__(
        self,
        storage,
        max_images: int = MAX_IMAGE_COUNT,
        max_image_bytes: int = MAX_IMAGE_BYTES,
    ) -> None:
        self.storage = storage
        self.max_images = max_images
        self.max_image_bytes = max_image_bytes

    def _encode(self, images: Optional[Iterable[FileStorage]]) -> List[str]:
        return encode_images(images or (), self.max_images, self.max_image_bytes)

    def _apply(self, resource_id: int, changes: dict[str, Any]) -> Resource:
        updated = self.storage.update_resource(resource_id, changes)
        if updated is None:
            # deleted between the ownership check and the write
            raise NotFoundError("Resource not found.")
        return updated

    def list_all(self, resource_filter: Optional[ResourceFilter] = None) -> List[dict]:
        """Return every resource with its provider's public profile."""
        resources = self.storage.list_resources()
        if resource_filter is not None:
            resources = resource_filter.apply(resources)

        resource_schema = ResourceSchema()
        user_schema = UserSchema()
        providers: dict[int, Any] = {}
        result = []
        for resource in resources:
            if resource.user_id not in providers:
                providers[resource.user_id] = self.storage.get_user(resource.user_id)
            provider = providers[resource.user_id]
            data = resource_schema.dump(resource)
            data["provider"] = user_schema.dump(provider) if provider is not None else None
            result.append(data)
        return result

    def list_owned(self, user_id: int, resource_filter: Optional[ResourceFilter] = None) -> List[dict]:
        """Return the requester's own resources, available or not."""
        resources = self.storage.list_user_resources(user_id)
        if resource_filter is not None:
            resources = resource_filter.apply(resources)
        return ResourceSchema(many=True).dump(resources)

    def create(
        self,
        user_id: int,
        payload: dict[str, Any],
        images: Optional[Iterable[FileStorage]] = None,
    ) -> dict:
        values = load_or_raise(ResourcePayloadSchema(), payload)
        uploaded = self._encode(images)
        values["image_urls"] = list(values.get("image_urls") or []) + uploaded
        _normalise_capacity(values, values["types"])

        resource = self.storage.create_resource(
            user_id=user_id,
            created_at=datetime.utcnow(),
            **values,
        )
        logger.info("User %s created resource %s", user_id, resource.id)
        return ResourceSchema().dump(resource)

    def update(
        self,
        user_id: int,
        resource_id: int,
        payload: dict[str, Any],
        images: Optional[Iterable[FileStorage]] = None,
    ) -> dict:
        resource = load_owned_resource(self.storage, resource_id, user_id)
        images = [f for f in images or () if f is not None and f.filename]

        if set(payload) == {"available"} and not images:
            changes = load_or_raise(AvailabilitySchema(), payload)
            updated = self._apply(resource.id, changes)
            logger.info("User %s set resource %s available=%s", user_id, resource.id, changes["available"])
            return ResourceSchema().dump(updated)

        changes = load_or_raise(ResourcePayloadSchema(), payload, partial=True)
        # Images are only ever appended through uploads on this path
        changes.pop("image_urls", None)
        uploaded = self._encode(images)
        if uploaded:
            changes["image_urls"] = list(resource.image_urls or []) + uploaded
        _normalise_capacity(changes, changes.get("types", resource.types))

        updated = self._apply(resource.id, changes)
        logger.info("User %s updated resource %s (%d new images)", user_id, resource.id, len(uploaded))
        return ResourceSchema().dump(updated)

    def delete(self, user_id: int, resource_id: int) -> None:
        """Permanently delete a resource.

        Watchlist entries pointing at it are left in place and skipped
        when watchlists are read.
        """
        resource = load_owned_resource(self.storage, resource_id, user_id)
        self.storage.delete_resource(resource.id)
        logger.info("User %s deleted resource %s", user_id, resource.id)
