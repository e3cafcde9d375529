"""User account and balance API routes."""

from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from betledger.api.dependencies import get_current_user
from betledger.database.dependencies import get_db
from betledger.models import User
from betledger.schemas import (
    AuthResponse,
    BalanceCheckResponse,
    BalanceResponse,
    LoginRequest,
    RegisterRequest,
    UserResponse,
)
from betledger.services import auth_service, balance_service, to_money, user_service

router = APIRouter(prefix="/users", tags=["Users"])


def _ensure_self_or_admin(current_user: User, user_id: UUID) -> None:
    if current_user.id != user_id and not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed")


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Create a player account with the starting balance."""
    user, token = await auth_service.register(db, request.username, request.password)
    return AuthResponse(access_token=token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, db: AsyncSession = Depends(get_db)):
    user, token = await auth_service.login(db, request.username, request.password)
    return AuthResponse(access_token=token, user=UserResponse.model_validate(user))


@router.get("/profile", response_model=UserResponse)
async def get_profile(current_user: User = Depends(get_current_user)):
    """Get the authenticated user, including the current balance."""
    return UserResponse.model_validate(current_user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _ensure_self_or_admin(current_user, user_id)
    user = await user_service.require_user(db, user_id)
    return UserResponse.model_validate(user)


@router.get("/{user_id}/balance", response_model=BalanceResponse)
async def get_balance(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _ensure_self_or_admin(current_user, user_id)
    balance = await balance_service.get_balance(db, user_id)
    return BalanceResponse(user_id=user_id, balance=balance)


@router.get("/{user_id}/balance/check", response_model=BalanceCheckResponse)
async def check_balance(
    user_id: UUID,
    amount: Decimal = Query(...),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Whether the user could currently cover a stake of ``amount``."""
    _ensure_self_or_admin(current_user, user_id)
    amount = to_money(amount)
    sufficient = await balance_service.check_sufficient_balance(db, user_id, amount)
    return BalanceCheckResponse(user_id=user_id, amount=amount, sufficient=sufficient)
