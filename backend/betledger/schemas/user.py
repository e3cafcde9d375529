"""User Pydantic schemas."""

from decimal import Decimal
from uuid import UUID

from pydantic import Field

from betledger.models import UserRole
from betledger.schemas.common import BaseSchema, TimestampSchema


class UserResponse(TimestampSchema):
    """Public view of a user. Never carries the password hash."""

    id: UUID
    username: str
    role: UserRole
    balance: Decimal


class UserCreate(BaseSchema):
    """Admin user creation schema."""

    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=6, max_length=72)
    role: UserRole = UserRole.PLAYER
    balance: Decimal | None = Field(default=None, ge=0)


class UserUpdate(BaseSchema):
    role: UserRole


class BalanceUpdate(BaseSchema):
    """Administrative balance override."""

    balance: Decimal


class BalanceResponse(BaseSchema):
    user_id: UUID
    balance: Decimal


class BalanceCheckResponse(BaseSchema):
    user_id: UUID
    amount: Decimal
    sufficient: bool
