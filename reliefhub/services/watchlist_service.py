"""Per-user watchlists.

A watchlist entry only stores the id of the resource it tracks. When a
resource is deleted its entries are not cleaned up; ``list_watched``
skips them instead.

Duplicate prevention is a check-then-act existence test. Two
simultaneous adds for the same pair can both pass the check, so a
duplicate row is possible under concurrency. Readers tolerate it by
returning each resource once.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import List

from ..errors import ConflictError, NotFoundError
from ..schemas import ResourceSchema

logger = logging.getLogger(__name__)


class WatchlistService:
    def __init__(self, storage) -> None:
        self.storage = storage

    def list_watched(self, user_id: int) -> List[dict]:
        """Return the user's watched resources in the order they were added."""
        schema = ResourceSchema()
        seen = set()
        result = []
        for entry in self.storage.list_watchlist(user_id):
            if entry.resource_id in seen:
                continue
            resource = self.storage.get_resource(entry.resource_id)
            if resource is None:
                continue
            seen.add(entry.resource_id)
            data = schema.dump(resource)
            data["isWatched"] = True
            result.append(data)
        return result

    def add(self, user_id: int, resource_id: int) -> dict:
        if self.storage.get_resource(resource_id) is None:
            raise NotFoundError("Resource not found.")
        if self.storage.get_watchlist_entry(user_id, resource_id) is not None:
            raise ConflictError("Already in watchlist.", status_code=400)
        self.storage.add_watchlist_entry(user_id, resource_id, created_at=datetime.utcnow())
        logger.info("User %s is watching resource %s", user_id, resource_id)
        return {"message": "Added to watchlist"}

    def remove(self, user_id: int, resource_id: int) -> None:
        """Remove the entry if present. Missing entries are not an error."""
        self.storage.remove_watchlist_entry(user_id, resource_id)
