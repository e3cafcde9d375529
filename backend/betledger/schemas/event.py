"""Event Pydantic schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from betledger.models import EventStatus, Outcome
from betledger.schemas.common import BaseSchema, TimestampSchema


class EventCreate(BaseSchema):
    """
    Event creation schema.

    Odds are passed through unvalidated so that missing or out-of-range
    values are rejected by the event service with its own error code.
    """

    name: str
    odds: dict[str, Any]


class EventUpdate(BaseSchema):
    name: str


class EventClose(BaseSchema):
    """Close an event with its final result."""

    final_result: str


class EventResponse(TimestampSchema):
    """Event response schema."""

    id: UUID
    name: str
    odds: dict[str, Decimal]
    status: EventStatus
    final_result: Optional[Outcome]
    closed_at: Optional[datetime]


class EventStatusResponse(BaseSchema):
    event_id: UUID
    status: EventStatus
    is_open: bool
    final_result: Optional[Outcome]
