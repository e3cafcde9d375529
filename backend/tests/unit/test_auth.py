"""
Unit Tests: Auth and Users

Test cases:
- Password hashing and token round trip
- Registration and login
- Admin user management guards
"""

from decimal import Decimal
from uuid import uuid4

import pytest
from jose import jwt

from betledger.config import settings
from betledger.exceptions import (
    InvalidCredentials,
    InvalidRole,
    UserHasPendingBets,
    UsernameTaken,
    UserNotFound,
)
from betledger.services import auth_service, bet_service, user_service


def test_password_hash_round_trip():
    hashed = auth_service.hash_password("hunter22")

    assert hashed != "hunter22"
    assert auth_service.verify_password("hunter22", hashed)
    assert not auth_service.verify_password("hunter23", hashed)
    assert not auth_service.verify_password("hunter22", "not-a-bcrypt-hash")


@pytest.mark.asyncio
async def test_token_round_trip(make_user):
    user = await make_user()

    token = auth_service.create_access_token(user)
    claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])

    assert auth_service.decode_access_token(token) == user.id
    assert claims["username"] == "alice"
    assert claims["role"] == "player"


@pytest.mark.asyncio
async def test_tampered_and_expired_tokens_are_rejected(make_user, monkeypatch):
    user = await make_user()
    token = auth_service.create_access_token(user)

    with pytest.raises(InvalidCredentials):
        auth_service.decode_access_token(token[:-2] + "xx")

    forged = jwt.encode({"sub": str(user.id)}, "other-secret", algorithm="HS256")
    with pytest.raises(InvalidCredentials):
        auth_service.decode_access_token(forged)

    monkeypatch.setattr(settings, "access_token_expire_minutes", -1)
    expired = auth_service.create_access_token(user)
    with pytest.raises(InvalidCredentials):
        auth_service.decode_access_token(expired)


@pytest.mark.asyncio
async def test_register_creates_player_with_initial_balance(db):
    user, token = await auth_service.register(db, "carol", "secret123")

    assert user.role == "player"
    assert user.balance == settings.initial_balance
    assert auth_service.decode_access_token(token) == user.id


@pytest.mark.asyncio
async def test_register_duplicate_username(db):
    await auth_service.register(db, "carol", "secret123")

    with pytest.raises(UsernameTaken):
        await auth_service.register(db, "carol", "different")


@pytest.mark.asyncio
async def test_login(db):
    registered, _ = await auth_service.register(db, "dave", "secret123")

    user, token = await auth_service.login(db, "dave", "secret123")
    assert user.id == registered.id
    assert token

    with pytest.raises(InvalidCredentials):
        await auth_service.login(db, "dave", "wrong")
    with pytest.raises(InvalidCredentials):
        await auth_service.login(db, "nobody", "secret123")


@pytest.mark.asyncio
async def test_update_user_role(db, make_user):
    user = await make_user()

    updated = await user_service.update_user(db, user.id, "admin")
    assert updated.is_admin

    with pytest.raises(InvalidRole):
        await user_service.update_user(db, user.id, "superuser")
    with pytest.raises(UserNotFound):
        await user_service.update_user(db, uuid4(), "player")


@pytest.mark.asyncio
async def test_delete_user_with_pending_bets_is_refused(db, make_user, make_event):
    user = await make_user(balance=Decimal("100.00"))
    event = await make_event()
    bet = await bet_service.place_bet(db, user.id, event.id, "draw", Decimal("10"))

    with pytest.raises(UserHasPendingBets):
        await user_service.delete_user(db, user.id)

    await bet_service.delete_bet(db, bet.id)
    await user_service.delete_user(db, user.id)
    assert await user_service.get_user(db, user.id) is None


@pytest.mark.asyncio
async def test_ensure_admin_is_idempotent(db):
    first = await user_service.ensure_admin(db, "root", "secret123")
    second = await user_service.ensure_admin(db, "root", "secret123")

    assert first.id == second.id
    assert first.is_admin
    assert len(await user_service.list_users(db)) == 1
