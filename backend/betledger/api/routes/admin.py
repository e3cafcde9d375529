"""Admin API routes."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from betledger.api.dependencies import require_admin
from betledger.config import settings
from betledger.database.dependencies import get_db
from betledger.exceptions import LedgerError
from betledger.schemas import (
    BalanceUpdate,
    BetDetailResponse,
    CloseEventResponse,
    EventClose,
    EventCreate,
    EventResponse,
    EventUpdate,
    MessageResponse,
    SettlementResponse,
    UserCreate,
    UserResponse,
    UserUpdate,
)
from betledger.services import (
    balance_service,
    bet_service,
    event_service,
    settlement_service,
    user_service,
)

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)

# ============================================================================
# Users
# ============================================================================

@router.get("/users", response_model=list[UserResponse])
async def list_users(
    limit: int = Query(
        settings.pagination_default_limit, ge=1, le=settings.pagination_max_limit
    ),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    users = await user_service.list_users(db, limit=limit, offset=offset)
    return [UserResponse.model_validate(u) for u in users]


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(request: UserCreate, db: AsyncSession = Depends(get_db)):
    """Create a player or admin account."""
    user = await user_service.create_user(
        db,
        request.username,
        request.password,
        role=request.role,
        balance=request.balance,
    )
    return UserResponse.model_validate(user)


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(user_id: UUID, db: AsyncSession = Depends(get_db)):
    user = await user_service.require_user(db, user_id)
    return UserResponse.model_validate(user)


@router.patch("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    request: UserUpdate,
    db: AsyncSession = Depends(get_db),
):
    user = await user_service.update_user(db, user_id, request.role)
    return UserResponse.model_validate(user)


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: UUID, db: AsyncSession = Depends(get_db)):
    await user_service.delete_user(db, user_id)
    return MessageResponse(message=f"Deleted user {user_id}")


@router.put("/users/{user_id}/balance", response_model=UserResponse)
async def set_user_balance(
    user_id: UUID,
    request: BalanceUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Override a user's balance."""
    try:
        await balance_service.set_balance(db, user_id, request.balance)
        await db.commit()
    except LedgerError:
        await db.rollback()
        raise

    user = await user_service.require_user(db, user_id)
    await db.refresh(user)
    return UserResponse.model_validate(user)


# ============================================================================
# Events
# ============================================================================

@router.get("/events", response_model=list[EventResponse])
async def list_events(
    limit: int = Query(
        settings.pagination_default_limit, ge=1, le=settings.pagination_max_limit
    ),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """List all events, open and closed, newest first."""
    events = await event_service.list_events(db, limit=limit, offset=offset)
    return [EventResponse.model_validate(e) for e in events]


@router.post("/events", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(request: EventCreate, db: AsyncSession = Depends(get_db)):
    event = await event_service.create_event(db, request.name, request.odds)
    return EventResponse.model_validate(event)


@router.patch("/events/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: UUID,
    request: EventUpdate,
    db: AsyncSession = Depends(get_db),
):
    event = await event_service.update_event(db, event_id, request.name)
    return EventResponse.model_validate(event)


@router.delete("/events/{event_id}", response_model=MessageResponse)
async def delete_event(event_id: UUID, db: AsyncSession = Depends(get_db)):
    await event_service.delete_event(db, event_id)
    return MessageResponse(message=f"Deleted event {event_id}")


@router.put("/events/{event_id}/close", response_model=CloseEventResponse)
async def close_event(
    event_id: UUID,
    request: EventClose,
    db: AsyncSession = Depends(get_db),
):
    """Close an event with its final result and settle every pending bet."""
    event, result = await settlement_service.close_and_settle(
        db, event_id, request.final_result
    )
    return CloseEventResponse(
        event=EventResponse.model_validate(event),
        settlement=SettlementResponse.model_validate(result),
    )


@router.post("/events/{event_id}/settle", response_model=SettlementResponse)
async def settle_event(event_id: UUID, db: AsyncSession = Depends(get_db)):
    """Re-run settlement for a closed event. Already-settled bets are skipped."""
    result = await settlement_service.settle_event(db, event_id)
    return SettlementResponse.model_validate(result)


@router.post("/settlements/retry", response_model=list[SettlementResponse])
async def retry_settlements(db: AsyncSession = Depends(get_db)):
    """Settle every closed event that still has pending bets."""
    results = await settlement_service.settle_closed_events(db)
    return [SettlementResponse.model_validate(r) for r in results]


@router.get("/events/{event_id}/bets", response_model=list[BetDetailResponse])
async def get_event_bets(event_id: UUID, db: AsyncSession = Depends(get_db)):
    bets = await bet_service.get_event_bets(db, event_id)
    return [BetDetailResponse.from_bet(b) for b in bets]


# ============================================================================
# Bets
# ============================================================================

@router.get("/bets", response_model=list[BetDetailResponse])
async def list_bets(
    user_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_db),
):
    """List every bet, or one user's bets."""
    if user_id is not None:
        bets = await bet_service.get_user_bets(db, user_id)
    else:
        bets = await bet_service.get_all_bets(db)
    return [BetDetailResponse.from_bet(b) for b in bets]


@router.delete("/bets/{bet_id}", response_model=MessageResponse)
async def delete_bet(bet_id: UUID, db: AsyncSession = Depends(get_db)):
    """Delete a pending bet and refund the stake."""
    await bet_service.delete_bet(db, bet_id)
    return MessageResponse(message=f"Deleted bet {bet_id}")
