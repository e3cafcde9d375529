"""
Unit Tests: Settlement

Test cases:
- Payout to winners at the snapshotted odds, losers untouched
- Re-running settlement is a no-op
- A failing bet is isolated, stays pending and is picked up on retry
- Recovery pass over closed events with pending bets
"""

from decimal import Decimal
from unittest.mock import patch
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from betledger.database import get_db_session
from betledger.exceptions import AlreadyClosed, EventNotFound, EventNotResolvable
from betledger.services import (
    balance_service,
    bet_service,
    event_service,
    settlement_service,
)
from betledger.services.settlement_service import _PendingBet


@pytest.mark.asyncio
async def test_settle_pays_winners_only(db, make_user, make_event, balance_of):
    alice = await make_user("alice", balance=Decimal("10000.00"))
    bob = await make_user("bob", balance=Decimal("10000.00"))
    event = await make_event(odds={"home_win": "2.5", "draw": "3.0", "away_win": "2.8"})

    winner = await bet_service.place_bet(db, alice.id, event.id, "home_win", Decimal("1000"))
    loser = await bet_service.place_bet(db, bob.id, event.id, "draw", Decimal("500"))

    closed, result = await settlement_service.close_and_settle(db, event.id, "home_win")

    assert closed.status == "closed"
    assert result.processed_count == 2
    assert result.won_count == 1
    assert result.lost_count == 1
    assert result.total_paid == Decimal("2500.00")
    assert result.failures == []

    assert await balance_of(alice.id) == Decimal("11500.00")
    assert await balance_of(bob.id) == Decimal("9500.00")

    async with get_db_session() as session:
        won = await bet_service.get_bet(session, winner.id)
        lost = await bet_service.get_bet(session, loser.id)
    assert (won.status, won.winnings) == ("won", Decimal("2500.00"))
    assert (lost.status, lost.winnings) == ("lost", Decimal("0.00"))
    assert won.settled_at is not None


@pytest.mark.asyncio
async def test_settle_is_idempotent(db, make_user, make_event, balance_of):
    user = await make_user(balance=Decimal("100.00"))
    event = await make_event()
    await bet_service.place_bet(db, user.id, event.id, "away_win", Decimal("10"))
    await settlement_service.close_and_settle(db, event.id, "away_win")

    again = await settlement_service.settle_event(db, event.id)

    assert again.processed_count == 0
    assert again.total_paid == Decimal("0.00")
    assert await balance_of(user.id) == Decimal("118.00")


@pytest.mark.asyncio
async def test_stale_snapshot_is_not_paid_twice(db, make_user, make_event, balance_of):
    user = await make_user(balance=Decimal("100.00"))
    event = await make_event()
    bet = await bet_service.place_bet(db, user.id, event.id, "draw", Decimal("10"))
    snapshot = _PendingBet(bet.id, bet.user_id, bet.chosen_option, bet.amount, bet.odds)
    await settlement_service.close_and_settle(db, event.id, "draw")

    # A second pass that read the bet while it was still pending
    assert await settlement_service._settle_bet(db, snapshot, "draw") is None
    await db.commit()

    assert await balance_of(user.id) == Decimal("120.00")


@pytest.mark.asyncio
async def test_settle_open_event_is_not_resolvable(db, make_event):
    event = await make_event()

    with pytest.raises(EventNotResolvable):
        await settlement_service.settle_event(db, event.id)


@pytest.mark.asyncio
async def test_settle_unknown_event(db):
    with pytest.raises(EventNotFound):
        await settlement_service.settle_event(db, uuid4())


@pytest.mark.asyncio
async def test_settle_event_without_bets(db, make_event):
    event = await make_event()

    _, result = await settlement_service.close_and_settle(db, event.id, "draw")

    assert result.processed_count == 0
    assert result.final_result == "draw"


@pytest.mark.asyncio
async def test_close_and_settle_twice_is_rejected(db, make_event):
    event = await make_event()
    await settlement_service.close_and_settle(db, event.id, "draw")

    with pytest.raises(AlreadyClosed):
        await settlement_service.close_and_settle(db, event.id, "home_win")


@pytest.mark.asyncio
async def test_failing_bet_is_isolated_and_retried(db, make_user, make_event, balance_of):
    alice = await make_user("alice", balance=Decimal("1000.00"))
    bob = await make_user("bob", balance=Decimal("1000.00"))
    alice_id, bob_id = alice.id, bob.id
    event = await make_event(odds={"home_win": "2.0", "draw": "3.0", "away_win": "4.0"})
    event_id = event.id

    await bet_service.place_bet(db, alice_id, event_id, "home_win", Decimal("100"))
    bob_bet = await bet_service.place_bet(db, bob_id, event_id, "home_win", Decimal("200"))
    bob_bet_id = bob_bet.id

    original_credit = balance_service.credit

    async def flaky_credit(session, user_id, amount):
        if user_id == bob_id:
            raise OperationalError("UPDATE users", {}, Exception("disk I/O error"))
        return await original_credit(session, user_id, amount)

    with patch.object(balance_service, "credit", side_effect=flaky_credit):
        _, result = await settlement_service.close_and_settle(db, event_id, "home_win")

    assert result.processed_count == 1
    assert result.won_count == 1
    assert [f.bet_id for f in result.failures] == [bob_bet_id]
    assert result.failures[0].user_id == bob_id
    assert await balance_of(alice_id) == Decimal("1100.00")
    assert await balance_of(bob_id) == Decimal("800.00")

    async with get_db_session() as session:
        assert (await bet_service.get_bet(session, bob_bet_id)).status == "pending"

    retry = await settlement_service.settle_event(db, event_id)

    assert retry.processed_count == 1
    assert retry.total_paid == Decimal("400.00")
    assert retry.failures == []
    assert await balance_of(bob_id) == Decimal("1200.00")


@pytest.mark.asyncio
async def test_settle_closed_events_recovers_pending(db, make_user, make_event, balance_of):
    user = await make_user(balance=Decimal("100.00"))
    event = await make_event()
    await bet_service.place_bet(db, user.id, event.id, "home_win", Decimal("20"))

    # Closed without settling, as if the process stopped in between
    await event_service.close(db, event.id, "home_win")

    results = await settlement_service.settle_closed_events(db)

    assert [r.event_id for r in results] == [event.id]
    assert results[0].processed_count == 1
    assert await balance_of(user.id) == Decimal("130.00")
    assert await settlement_service.settle_closed_events(db) == []
