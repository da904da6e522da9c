"""Base schemas for the application."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema class with common configuration.

    Field names are snake_case in Python and camelCase on the wire.
    """
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class BaseModelSchema(BaseSchema):
    """Base schema for database models."""
    id: int
    created_at: Optional[datetime] = None


class ErrorSchema(BaseSchema):
    """Structured error payload (REST 400 bodies, relay error events)."""
    message: str
    field: Optional[str] = None
