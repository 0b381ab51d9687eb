"""Base schema configuration for all Pydantic models.

Stored documents and API payloads both use camelCase field names
(``authorId``, ``createdAt``); Python code uses snake_case attributes.

Usage:
    - APIRequest: incoming request bodies and caller-built payloads
    - APIResponse: outgoing response bodies
    - StoredDocument: documents read back from the store
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _BaseSchema(BaseModel):
    """Private base schema with common configuration.

    Do not use directly - inherit from one of the public subclasses.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        serialize_by_alias=True,
    )


class APIRequest(_BaseSchema):
    """Base class for incoming payloads.

    Extra fields are ignored so older clients keep working.
    """

    model_config = ConfigDict(
        extra="ignore",
        validate_default=True,
    )


class APIResponse(_BaseSchema):
    """Base class for outgoing response bodies; unknown fields are rejected."""

    model_config = ConfigDict(
        extra="forbid",
    )


class StoredDocument(_BaseSchema):
    """Base class for documents loaded from the store.

    Extra fields are ignored: documents written by other clients may carry
    properties this service does not model.
    """

    model_config = ConfigDict(
        extra="ignore",
    )
