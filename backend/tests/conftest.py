"""Pytest configuration shared across the test suite."""

import os

# Settings are read once at import time
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["LOGFIRE_TOKEN"] = ""
os.environ["ADMIN_USERNAME"] = ""

from decimal import Decimal
from uuid import UUID

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from betledger.database import close_db, configure_engine, get_db_session, init_db
from betledger.models import Event, User
from betledger.services import balance_service, event_service, user_service

DEFAULT_ODDS = {"home_win": "2.5", "draw": "3.0", "away_win": "2.8"}


@pytest_asyncio.fixture
async def engine(tmp_path):
    """Fresh SQLite file database per test."""
    engine = configure_engine(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}", echo=False)
    await init_db()
    yield engine
    await close_db()


@pytest_asyncio.fixture
async def db(engine):
    async with get_db_session() as session:
        yield session


@pytest.fixture
def make_user(db):
    async def _make_user(
        username: str = "alice",
        balance: Decimal = Decimal("10000.00"),
        role: str = "player",
        password: str = "secret123",
    ) -> User:
        return await user_service.create_user(
            db, username, password, role=role, balance=balance
        )

    return _make_user


@pytest.fixture
def make_event(db):
    async def _make_event(name: str = "Arsenal vs Chelsea", odds: dict = None) -> Event:
        return await event_service.create_event(db, name, odds or DEFAULT_ODDS)

    return _make_event


@pytest.fixture
def balance_of(engine):
    """Read a balance through a separate session so identity-map state cannot mask it."""

    async def _balance_of(user_id: UUID) -> Decimal:
        async with get_db_session() as session:
            return await balance_service.get_balance(session, user_id)

    return _balance_of


@pytest_asyncio.fixture
async def client(engine):
    from betledger.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
