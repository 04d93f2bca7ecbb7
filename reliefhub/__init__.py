"""
Application factory for ReliefHub.

ReliefHub is a community resource-sharing API: people post relief
resources (shelter, supplies, transportation, medical help, food,
water), browse what others have posted, keep a watchlist and manage
their own listings.

This module provides a function to create and configure the Flask
application. Extensions (SQLAlchemy, Migrate, JWT) are initialised
here, the storage object and services are built and registered on
``app.extensions["reliefhub"]``, and the API blueprints are mounted
under ``/api``.

Environment variables control the database connection, the token
secret and the log level. In production set ``DATABASE_URL`` and
``JWT_SECRET_KEY``. A default configuration is provided for
development, using SQLite when no database URL is available.
"""

from __future__ import annotations

import logging
import os
from datetime import timedelta

from flask import Flask
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager

# instantiate extensions without binding them to an app yet.  They will
# be bound in create_app().
from .db import db
migrate = Migrate()
jwt = JWTManager()


def _configure_logging(app: Flask) -> None:
    level = app.config["LOG_LEVEL"]
    if not logging.getLogger().handlers:
        logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger(__name__).setLevel(level)


def create_app(test_config: dict | None = None) -> Flask:
    """Create and configure a Flask application.

    Parameters
    ----------
    test_config: dict | None, optional
        Optional configuration overrides used when running tests.

    Returns
    -------
    Flask
        A configured Flask application instance.
    """
    app = Flask(__name__)

    # Default configuration. Override using environment variables or
    # by passing a ``test_config`` mapping.
    app.config.update(
        SQLALCHEMY_DATABASE_URI=os.environ.get("DATABASE_URL", "sqlite:///reliefhub.db"),
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        JWT_SECRET_KEY=os.environ.get("JWT_SECRET_KEY", "please-change-this-secret-key-before-deploying"),
        JWT_ACCESS_TOKEN_EXPIRES=timedelta(days=1),
        JWT_TOKEN_LOCATION=["headers", "cookies"],
        JWT_COOKIE_SECURE=os.environ.get("JWT_COOKIE_SECURE", "false").lower() == "true",
        LOG_LEVEL=os.environ.get("LOG_LEVEL", "INFO"),
        MAX_IMAGE_COUNT=5,
        MAX_IMAGE_BYTES=5 * 1024 * 1024,
    )

    if test_config:
        app.config.update(test_config)

    # Room for every image plus the form fields
    if app.config.get("MAX_CONTENT_LENGTH") is None:
        app.config["MAX_CONTENT_LENGTH"] = (
            app.config["MAX_IMAGE_COUNT"] * app.config["MAX_IMAGE_BYTES"] + 1024 * 1024
        )

    _configure_logging(app)

    # Initialise extensions with the app
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    from .sessions import register_session_callbacks
    register_session_callbacks(jwt)

    # Register custom error handlers
    from .errors import register_error_handlers
    register_error_handlers(app)

    from .storage import DatabaseStorage
    from .services import ResourceService, WatchlistService

    storage = DatabaseStorage(db)
    app.extensions["reliefhub"] = {
        "storage": storage,
        "resources": ResourceService(
            storage,
            max_images=app.config["MAX_IMAGE_COUNT"],
            max_image_bytes=app.config["MAX_IMAGE_BYTES"],
        ),
        "watchlist": WatchlistService(storage),
    }

    # Register blueprints. Importing here avoids circular imports.
    from .routes.auth import auth_bp
    from .routes.resources import resources_bp
    from .routes.watchlist import watchlist_bp

    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(resources_bp, url_prefix="/api")
    app.register_blueprint(watchlist_bp, url_prefix="/api")

    @app.route("/api/health")
    def health_check() -> dict[str, str]:
        """Return a simple health check response."""
        return {"status": "ok"}

    return app
