"""Events API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from betledger.database.dependencies import get_db
from betledger.schemas import EventResponse, EventStatusResponse
from betledger.services import event_service

router = APIRouter(prefix="/events", tags=["Events"])


@router.get("/", response_model=list[EventResponse])
async def list_open_events(db: AsyncSession = Depends(get_db)):
    """List events currently accepting bets."""
    events = await event_service.list_open_events(db)
    return [EventResponse.model_validate(e) for e in events]


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: UUID, db: AsyncSession = Depends(get_db)):
    event = await event_service.require_event(db, event_id)
    return EventResponse.model_validate(event)


@router.get("/{event_id}/status", response_model=EventStatusResponse)
async def get_event_status(event_id: UUID, db: AsyncSession = Depends(get_db)):
    event = await event_service.require_event(db, event_id)
    return EventStatusResponse(
        event_id=event.id,
        status=event.status,
        is_open=event.is_open,
        final_result=event.final_result,
    )
