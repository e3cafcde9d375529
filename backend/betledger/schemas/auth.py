"""Authentication Pydantic schemas."""

from pydantic import Field

from betledger.schemas.common import BaseSchema
from betledger.schemas.user import UserResponse


class RegisterRequest(BaseSchema):
    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=6, max_length=72)


class LoginRequest(BaseSchema):
    username: str
    password: str


class AuthResponse(BaseSchema):
    """Issued bearer token with the authenticated user."""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse
