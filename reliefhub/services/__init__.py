"""Service layer for ReliefHub.

This package contains business logic that sits between the Flask
route handlers and the storage layer. Services receive a storage
object at construction and never touch HTTP: they return plain Python
data structures and raise exceptions defined in ``reliefhub.errors``
when something goes wrong.

The application factory creates one instance of each service and
registers them on ``app.extensions["reliefhub"]``; route handlers
fetch them with the accessors below.
"""

from flask import current_app

from .filters import ResourceFilter
from .resource_service import ResourceService
from .watchlist_service import WatchlistService


def get_resource_service() -> ResourceService:
    return current_app.extensions["reliefhub"]["resources"]


def get_watchlist_service() -> WatchlistService:
    return current_app.extensions["reliefhub"]["watchlist"]


__all__ = [
    "ResourceFilter",
    "ResourceService",
    "WatchlistService",
    "get_resource_service",
    "get_watchlist_service",
]
