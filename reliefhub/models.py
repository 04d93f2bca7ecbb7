"""
Database models for ReliefHub.

Three tables hold the application data: ``users``, ``resources`` and
``watchlist``. A fourth table, ``sessions``, is the server-side session
store consulted on every authenticated request.

A resource is owned by the user that created it. Watchlist entries
reference resources by id only. There is deliberately no foreign key
and no cascade from ``watchlist.resource_id`` to ``resources.id``:
deleting a resource leaves its watchlist entries dangling and readers
skip entries whose resource no longer exists.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, List

from werkzeug.security import generate_password_hash, check_password_hash

from .db import db


RESOURCE_TYPES = (
    "shelter",
    "supplies",
    "transportation",
    "medical",
    "food",
    "water",
    "other",
)


class User(db.Model):
    __allow_unmapped__ = True  # allow unmapped type annotations for SQLAlchemy 2.0
    """A registered user.

    Usernames are unique. Passwords are stored as salted hashes and the
    hash is never serialised.
    """
    __tablename__ = "users"

    id: int = db.Column(db.Integer, primary_key=True)
    username: str = db.Column(db.String(80), unique=True, nullable=False)
    password_hash: str = db.Column(db.String(255), nullable=False)

    resources: List[Resource] = db.relationship("Resource", back_populates="owner")

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def __repr__(self) -> str:
        return f"<User {self.username}>"


class Resource(db.Model):
    __allow_unmapped__ = True
    """A relief resource listing.

    ``types`` is a non-empty list drawn from ``RESOURCE_TYPES``.
    ``image_urls`` holds self-describing ``data:`` URLs rather than
    links to external blobs.
    """
    __tablename__ = "resources"

    id: int = db.Column(db.Integer, primary_key=True)
    user_id: int = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    types: List[str] = db.Column(db.JSON, nullable=False)
    title: str = db.Column(db.Text, nullable=False)
    description: str = db.Column(db.Text, nullable=False)
    location: str = db.Column(db.Text, nullable=False)
    latitude: Optional[str] = db.Column(db.String(32))
    longitude: Optional[str] = db.Column(db.String(32))
    # Only meaningful for shelters
    capacity: Optional[int] = db.Column(db.Integer)
    email: Optional[str] = db.Column(db.String(255))
    phone: Optional[str] = db.Column(db.String(64))
    image_urls: Optional[List[str]] = db.Column(db.JSON)
    available: bool = db.Column(db.Boolean, nullable=False, default=True)
    created_at: datetime = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    owner: User = db.relationship("User", back_populates="resources")

    def __repr__(self) -> str:
        return f"<Resource {self.id} {self.title!r}>"


class WatchlistEntry(db.Model):
    __allow_unmapped__ = True
    """A user's bookmark on a resource.

    ``resource_id`` is a weak reference: the resource may have been
    deleted since the entry was written. At most one entry should exist
    per (user, resource); this is enforced by an existence check before
    insert, not by a table constraint.
    """
    __tablename__ = "watchlist"

    id: int = db.Column(db.Integer, primary_key=True)
    user_id: int = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    resource_id: int = db.Column(db.Integer, nullable=False)
    created_at: datetime = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<WatchlistEntry user={self.user_id} resource={self.resource_id}>"


class UserSession(db.Model):
    __allow_unmapped__ = True
    """Server-side session keyed by the access token's ``jti`` claim."""
    __tablename__ = "sessions"

    sid: str = db.Column(db.String(64), primary_key=True)
    user_id: int = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    created_at: datetime = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    expires_at: datetime = db.Column(db.DateTime, nullable=False)

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or datetime.utcnow()) >= self.expires_at

    def __repr__(self) -> str:
        return f"<UserSession {self.sid} user={self.user_id}>"
