"""Common Pydantic schemas and base classes."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class TimestampSchema(BaseSchema):
    """Schema with timestamp fields."""

    created_at: datetime
    updated_at: datetime


class MessageResponse(BaseSchema):
    """Generic action response."""

    success: bool = True
    message: str
    data: Optional[dict] = None


class ErrorResponse(BaseSchema):
    """Body returned for every rejected ledger operation."""

    error: str
    detail: str
    details: dict = {}
