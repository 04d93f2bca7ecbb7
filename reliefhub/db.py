"""Database setup utilities.

This module owns the shared Flask-SQLAlchemy ``db`` object used by
the models and by :class:`reliefhub.storage.DatabaseStorage`. The
application factory binds it to the Flask app.
"""
from __future__ import annotations

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
