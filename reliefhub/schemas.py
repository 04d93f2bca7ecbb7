"""
Serialization schemas using Marshmallow for ReliefHub.

Output schemas convert SQLAlchemy models into the camelCase JSON the
API exposes. Input schemas validate request payloads in a single pass
and either return a clean ``dict`` or raise
:class:`reliefhub.errors.ValidationError` carrying the per-field
messages. Password hashes are never serialised.
"""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, EXCLUDE, fields, validate, pre_load
from marshmallow import ValidationError as MarshmallowValidationError
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema, auto_field

from .errors import ValidationError
from .models import User, Resource, RESOURCE_TYPES
from .util.sanitization import strip_tags


class UserSchema(SQLAlchemyAutoSchema):
    """Public projection of a ``User``: id and username only."""

    class Meta:
        model = User
        fields = ("id", "username")


class ResourceSchema(SQLAlchemyAutoSchema):
    """Schema for serialising ``Resource`` objects."""

    user_id = auto_field(data_key="userId")
    types = fields.List(fields.String())
    image_urls = fields.List(fields.String(), allow_none=True, data_key="imageUrls")
    created_at = auto_field(data_key="createdAt")

    class Meta:
        model = Resource
        include_fk = True


class ResourcePayloadSchema(Schema):
    """Validates the fields a client may submit for a resource.

    Loaded with ``partial=True`` for full updates, so only the fields
    present in the request are validated and returned.
    """

    types = fields.List(
        fields.String(validate=validate.OneOf(RESOURCE_TYPES)),
        required=True,
        validate=validate.Length(min=1, error="At least one resource type is required"),
    )
    title = fields.String(required=True, validate=validate.Length(min=1))
    description = fields.String(required=True, validate=validate.Length(min=1))
    location = fields.String(required=True, validate=validate.Length(min=1))
    latitude = fields.String(allow_none=True, load_default=None)
    longitude = fields.String(allow_none=True, load_default=None)
    capacity = fields.Integer(allow_none=True, load_default=None, validate=validate.Range(min=0))
    email = fields.Email(allow_none=True, load_default=None)
    phone = fields.String(allow_none=True, load_default=None)
    image_urls = fields.List(fields.String(), allow_none=True, load_default=None, data_key="imageUrls")
    available = fields.Boolean(load_default=True)

    class Meta:
        unknown = EXCLUDE

    NULLABLE = ("latitude", "longitude", "capacity", "email", "phone")
    TEXT = ("title", "description", "location")

    @pre_load
    def normalise(self, data: dict, **kwargs) -> dict:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        # A lone type arrives as a plain string from single-value form posts
        if isinstance(data.get("types"), str):
            data["types"] = [data["types"]]
        for name in self.TEXT:
            if isinstance(data.get(name), str):
                data[name] = strip_tags(data[name])
        for name in self.NULLABLE:
            value = data.get(name)
            if isinstance(value, str):
                value = value.strip()
                data[name] = value or None
        return data


class AvailabilitySchema(Schema):
    """Body of an availability-only update."""

    available = fields.Boolean(required=True)


class CredentialsSchema(Schema):
    """Username and password submitted to register or log in."""

    username = fields.String(required=True, validate=validate.Length(min=1, max=80))
    password = fields.String(required=True, validate=validate.Length(min=1))

    class Meta:
        unknown = EXCLUDE

    @pre_load
    def strip_username(self, data: dict, **kwargs) -> dict:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if isinstance(data.get("username"), str):
            data["username"] = data["username"].strip()
        return data


def load_or_raise(schema: Schema, data: Any, **kwargs) -> dict:
    """Load ``data`` with ``schema`` or raise a ``ValidationError``."""
    try:
        return schema.load(data, **kwargs)
    except MarshmallowValidationError as err:
        raise ValidationError("Invalid request data.", fields=err.messages) from err
