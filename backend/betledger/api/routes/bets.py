"""Bets API routes for players."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from betledger.api.dependencies import get_current_user, require_player
from betledger.database.dependencies import get_db
from betledger.models import User
from betledger.schemas import BetCreate, BetDetailResponse, BetResponse, BetStatsResponse
from betledger.services import bet_service

router = APIRouter(prefix="/bets", tags=["Bets"])


@router.post("/", response_model=BetResponse, status_code=status.HTTP_201_CREATED)
async def place_bet(
    request: BetCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_player),
):
    """
    Place a bet on an open event.

    The stake is debited and the event's current odds are locked in.
    """
    bet = await bet_service.place_bet(
        db,
        user_id=current_user.id,
        event_id=request.event_id,
        chosen_option=request.chosen_option,
        amount=request.amount,
    )
    return BetResponse.model_validate(bet)


@router.get("/my-bets", response_model=list[BetDetailResponse])
async def get_my_bets(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Betting history for the authenticated user, newest first."""
    bets = await bet_service.get_user_bets(db, current_user.id)
    return [BetDetailResponse.from_bet(b) for b in bets]


@router.get("/my-stats", response_model=BetStatsResponse)
async def get_my_stats(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    stats = await bet_service.get_user_bet_stats(db, current_user.id)
    return BetStatsResponse(**stats)
