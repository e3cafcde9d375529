"""Password hashing, access tokens and credential checks."""

import logging
from datetime import timedelta
from uuid import UUID

import bcrypt
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from betledger.config import settings
from betledger.database.repositories import user_repository
from betledger.exceptions import InvalidCredentials
from betledger.models import User
from betledger.models.base import utcnow

logger = logging.getLogger(__name__)


def _encode_password(password: str) -> bytes:
    # bcrypt only reads the first 72 bytes
    return password.encode("utf-8")[:72]


class AuthService:
    """
    Issues and verifies bearer tokens for registered users.

    Tokens are signed JWTs carrying the user id in ``sub`` plus the username
    and role at issue time. Authorization re-reads the user on every request,
    so a role change takes effect without re-issuing tokens.
    """

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
        return bcrypt.hashpw(_encode_password(password), salt).decode("utf-8")

    def verify_password(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(_encode_password(password), password_hash.encode("utf-8"))
        except ValueError:
            # Malformed hash
            return False

    def create_access_token(self, user: User) -> str:
        expire = utcnow() + timedelta(minutes=settings.access_token_expire_minutes)
        payload = {
            "sub": str(user.id),
            "username": user.username,
            "role": user.role,
            "exp": expire,
        }
        return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)

    def decode_access_token(self, token: str) -> UUID:
        """Validate a token and return the user id it was issued for."""
        try:
            payload = jwt.decode(
                token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
            )
            return UUID(payload["sub"])
        except (JWTError, KeyError, ValueError):
            raise InvalidCredentials("Invalid or expired token")

    async def register(
        self,
        db: AsyncSession,
        username: str,
        password: str,
    ) -> tuple[User, str]:
        """Create a player account and return it with a fresh token."""
        # Deferred: user_service imports this module for hashing
        from betledger.services.user_service import user_service

        user = await user_service.create_user(db, username, password, role="player")
        return user, self.create_access_token(user)

    async def login(
        self,
        db: AsyncSession,
        username: str,
        password: str,
    ) -> tuple[User, str]:
        user = await user_repository.find_by_username(db, username)
        if not user or not self.verify_password(password, user.password_hash):
            logger.info(f"Failed login for {username}")
            raise InvalidCredentials("Invalid username or password")

        logger.info(f"User logged in: {username}")
        return user, self.create_access_token(user)


# Singleton instance
auth_service = AuthService()
