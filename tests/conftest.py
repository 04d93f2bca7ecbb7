"""Shared fixtures for the ReliefHub tests.

API tests build the app through ``create_app`` with an in-memory
SQLite database. Service tests use ``InMemoryStorage``, which exposes
the same methods as ``DatabaseStorage`` without a database.
"""
import io
import itertools

import pytest

from reliefhub import create_app, db
from reliefhub.models import Resource, User, UserSession, WatchlistEntry


TEST_CONFIG = {
    "TESTING": True,
    "SQLALCHEMY_DATABASE_URI": "sqlite://",
    "JWT_SECRET_KEY": "test-secret-key-long-enough-for-hmac-sha256",
    # Header tokens only, so the test client's cookie jar never authenticates a request
    "JWT_TOKEN_LOCATION": ["headers"],
    "MAX_IMAGE_BYTES": 1024,
}


class InMemoryStorage:
    """Dictionary-backed stand-in for ``DatabaseStorage``."""

    def __init__(self):
        self.users = {}
        self.resources = {}
        self.watchlist = []
        self.sessions = {}
        self._ids = itertools.count(1)

    def get_user(self, user_id):
        return self.users.get(user_id)

    def get_user_by_username(self, username):
        return next((u for u in self.users.values() if u.username == username), None)

    def create_user(self, username, password):
        user = User(id=next(self._ids), username=username)
        user.set_password(password)
        self.users[user.id] = user
        return user

    def list_resources(self):
        return [self.resources[key] for key in sorted(self.resources)]

    def list_user_resources(self, user_id):
        return [r for r in self.list_resources() if r.user_id == user_id]

    def get_resource(self, resource_id):
        return self.resources.get(resource_id)

    def create_resource(self, **values):
        resource = Resource(id=next(self._ids), **values)
        self.resources[resource.id] = resource
        return resource

    def update_resource(self, resource_id, changes):
        resource = self.resources.get(resource_id)
        if resource is None:
            return None
        for field, value in changes.items():
            setattr(resource, field, value)
        return resource

    def delete_resource(self, resource_id):
        self.resources.pop(resource_id, None)

    def list_watchlist(self, user_id):
        return [e for e in self.watchlist if e.user_id == user_id]

    def get_watchlist_entry(self, user_id, resource_id):
        return next(
            (e for e in self.watchlist if e.user_id == user_id and e.resource_id == resource_id),
            None,
        )

    def add_watchlist_entry(self, user_id, resource_id, created_at):
        entry = WatchlistEntry(
            id=next(self._ids), user_id=user_id, resource_id=resource_id, created_at=created_at
        )
        self.watchlist.append(entry)
        return entry

    def remove_watchlist_entry(self, user_id, resource_id):
        self.watchlist = [
            e for e in self.watchlist if not (e.user_id == user_id and e.resource_id == resource_id)
        ]

    def create_session(self, sid, user_id, expires_at):
        session = UserSession(sid=sid, user_id=user_id, expires_at=expires_at)
        self.sessions[sid] = session
        return session

    def get_session(self, sid):
        return self.sessions.get(sid)

    def delete_session(self, sid):
        self.sessions.pop(sid, None)

    def prune_expired_sessions(self, now):
        expired = [sid for sid, s in self.sessions.items() if s.expires_at <= now]
        for sid in expired:
            del self.sessions[sid]
        return len(expired)


@pytest.fixture
def app():
    app = create_app(TEST_CONFIG)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register(client):
    """Return a helper that registers a user and returns auth headers."""

    def _register(username, password="correct-horse"):
        response = client.post("/api/register", json={"username": username, "password": password})
        assert response.status_code == 201
        return {"Authorization": f"Bearer {response.get_json()['access_token']}"}

    return _register


@pytest.fixture
def alice(register):
    return register("alice")


@pytest.fixture
def bob(register):
    return register("bob")


@pytest.fixture
def resource_data():
    """Return a helper producing a valid resource payload."""

    def _resource_data(**overrides):
        data = {
            "types": ["shelter"],
            "title": "School gym",
            "description": "Cots and blankets",
            "location": "Lincoln High School",
            "capacity": 10,
        }
        data.update(overrides)
        return data

    return _resource_data


@pytest.fixture
def create_resource(client, resource_data):
    """Return a helper that creates a resource over the API."""

    def _create_resource(headers, **overrides):
        response = client.post("/api/resources", json=resource_data(**overrides), headers=headers)
        assert response.status_code == 201, response.get_json()
        return response.get_json()

    return _create_resource


def image(name="photo.png", content=b"\x89PNG\r\n\x1a\nfake", mimetype="image/png"):
    return (io.BytesIO(content), name, mimetype)


@pytest.fixture
def make_image():
    return image


@pytest.fixture
def memory_storage():
    return InMemoryStorage()
