"""
Persistence layer for ReliefHub.

``DatabaseStorage`` wraps the Flask-SQLAlchemy session and exposes the
small set of queries the services need: users, resources, watchlist
entries and server-side sessions. Services receive a storage object
when they are constructed, so tests can hand them an in-memory
implementation with the same methods instead of a database.

Every mutating method commits before returning.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, List

from flask import current_app

from .models import User, Resource, WatchlistEntry, UserSession


class DatabaseStorage:
    """Storage backed by the shared SQLAlchemy ``db`` object."""

    def __init__(self, db) -> None:
        self.db = db

    # Users

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.session.get(User, user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return User.query.filter_by(username=username).first()

    def create_user(self, username: str, password: str) -> User:
        user = User(username=username)
        user.set_password(password)
        self.db.session.add(user)
        self.db.session.commit()
        return user

    # Resources

    def list_resources(self) -> List[Resource]:
        return Resource.query.order_by(Resource.id.asc()).all()

    def list_user_resources(self, user_id: int) -> List[Resource]:
        return Resource.query.filter_by(user_id=user_id).order_by(Resource.id.asc()).all()

    def get_resource(self, resource_id: int) -> Optional[Resource]:
        return self.db.session.get(Resource, resource_id)

    def create_resource(self, **values: Any) -> Resource:
        resource = Resource(**values)
        self.db.session.add(resource)
        self.db.session.commit()
        return resource

    def update_resource(self, resource_id: int, changes: dict[str, Any]) -> Optional[Resource]:
        resource = self.get_resource(resource_id)
        if resource is None:
            return None
        for field, value in changes.items():
            setattr(resource, field, value)
        self.db.session.commit()
        return resource

    def delete_resource(self, resource_id: int) -> None:
        Resource.query.filter_by(id=resource_id).delete()
        self.db.session.commit()

    # Watchlist

    def list_watchlist(self, user_id: int) -> List[WatchlistEntry]:
        return WatchlistEntry.query.filter_by(user_id=user_id).order_by(WatchlistEntry.id.asc()).all()

    def get_watchlist_entry(self, user_id: int, resource_id: int) -> Optional[WatchlistEntry]:
        return WatchlistEntry.query.filter_by(user_id=user_id, resource_id=resource_id).first()

    def add_watchlist_entry(self, user_id: int, resource_id: int, created_at: datetime) -> WatchlistEntry:
        entry = WatchlistEntry(user_id=user_id, resource_id=resource_id, created_at=created_at)
        self.db.session.add(entry)
        self.db.session.commit()
        return entry

    def remove_watchlist_entry(self, user_id: int, resource_id: int) -> None:
        WatchlistEntry.query.filter_by(user_id=user_id, resource_id=resource_id).delete()
        self.db.session.commit()

    # Sessions

    def create_session(self, sid: str, user_id: int, expires_at: datetime) -> UserSession:
        session = UserSession(sid=sid, user_id=user_id, expires_at=expires_at)
        self.db.session.add(session)
        self.db.session.commit()
        return session

    def get_session(self, sid: str) -> Optional[UserSession]:
        return self.db.session.get(UserSession, sid)

    def delete_session(self, sid: str) -> None:
        UserSession.query.filter_by(sid=sid).delete()
        self.db.session.commit()

    def prune_expired_sessions(self, now: datetime) -> int:
        """Delete session rows that expired at or before ``now``."""
        removed = UserSession.query.filter(UserSession.expires_at <= now).delete()
        self.db.session.commit()
        return removed


def get_storage() -> DatabaseStorage:
    """Return the storage object registered on the current app."""
    return current_app.extensions["reliefhub"]["storage"]
