"""
Unit Tests: Bet Placement

Test cases:
- Stake debit and odds snapshot on placement
- Rejection order and no debit on rejection
- Winnings calculation
- Betting history, stats and pending-bet refunds
- Staking the exact remaining balance
- Bet details when user and event are or are not loaded
"""

import asyncio
from decimal import Decimal
from types import SimpleNamespace
from uuid import uuid4

import pytest

from betledger.database import get_db_session
from betledger.exceptions import (
    BetAlreadySettled,
    BetNotFound,
    EventClosed,
    InsufficientBalance,
    InvalidAmount,
    InvalidOption,
)
from betledger.schemas import BetDetailResponse
from betledger.services import bet_service, event_service, settlement_service


@pytest.mark.asyncio
async def test_place_bet_debits_and_snapshots_odds(db, make_user, make_event, balance_of):
    user = await make_user(balance=Decimal("10000.00"))
    event = await make_event(odds={"home_win": "2.5", "draw": "3.0", "away_win": "2.8"})

    bet = await bet_service.place_bet(db, user.id, event.id, "home_win", Decimal("1000"))

    assert bet.status == "pending"
    assert bet.winnings == Decimal("0.00")
    assert bet.amount == Decimal("1000.00")
    assert bet.odds == Decimal("2.5")
    assert await balance_of(user.id) == Decimal("9000.00")


@pytest.mark.asyncio
async def test_multiple_bets_on_same_event(db, make_user, make_event, balance_of):
    user = await make_user(balance=Decimal("100.00"))
    event = await make_event()

    await bet_service.place_bet(db, user.id, event.id, "home_win", Decimal("40"))
    await bet_service.place_bet(db, user.id, event.id, "draw", Decimal("60"))

    assert await balance_of(user.id) == Decimal("0.00")
    assert len(await bet_service.get_user_bets(db, user.id)) == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5"), "abc"])
async def test_invalid_amount_is_rejected(db, make_user, make_event, balance_of, amount):
    user = await make_user(balance=Decimal("100.00"))
    event = await make_event()

    with pytest.raises(InvalidAmount):
        await bet_service.place_bet(db, user.id, event.id, "draw", amount)

    assert await balance_of(user.id) == Decimal("100.00")


@pytest.mark.asyncio
async def test_invalid_option_is_rejected(db, make_user, make_event):
    user = await make_user()
    event = await make_event()

    with pytest.raises(InvalidOption):
        await bet_service.place_bet(db, user.id, event.id, "over_2_5", Decimal("10"))


@pytest.mark.asyncio
async def test_insufficient_balance_creates_no_bet(db, make_user, make_event, balance_of):
    user = await make_user(balance=Decimal("50.00"))
    event = await make_event()

    with pytest.raises(InsufficientBalance):
        await bet_service.place_bet(db, user.id, event.id, "draw", Decimal("50.01"))

    assert await balance_of(user.id) == Decimal("50.00")
    assert await bet_service.get_user_bets(db, user.id) == []


@pytest.mark.asyncio
async def test_balance_is_checked_before_event_status(db, make_user, make_event):
    user = await make_user(balance=Decimal("5.00"))
    event = await make_event()
    await event_service.close(db, event.id, "draw")

    with pytest.raises(InsufficientBalance):
        await bet_service.place_bet(db, user.id, event.id, "draw", Decimal("10"))


@pytest.mark.asyncio
async def test_bet_on_closed_event_is_rejected(db, make_user, make_event, balance_of):
    user = await make_user(balance=Decimal("100.00"))
    event = await make_event()
    await event_service.close(db, event.id, "away_win")

    with pytest.raises(EventClosed):
        await bet_service.place_bet(db, user.id, event.id, "away_win", Decimal("10"))

    assert await balance_of(user.id) == Decimal("100.00")


@pytest.mark.asyncio
async def test_bet_on_unknown_event_is_rejected(db, make_user):
    user = await make_user()

    with pytest.raises(EventClosed):
        await bet_service.place_bet(db, user.id, uuid4(), "draw", Decimal("10"))


@pytest.mark.asyncio
async def test_unknown_user_fails_balance_check(db, make_event):
    event = await make_event()

    with pytest.raises(InsufficientBalance):
        await bet_service.place_bet(db, uuid4(), event.id, "draw", Decimal("10"))


@pytest.mark.parametrize(
    "chosen, result, expected",
    [
        ("home_win", "home_win", Decimal("2500.00")),
        ("draw", "home_win", Decimal("0.00")),
        ("away_win", "away_win", Decimal("28.00")),
    ],
)
def test_calculate_winnings(chosen, result, expected):
    odds = {"home_win": Decimal("2.5"), "away_win": Decimal("2.8"), "draw": Decimal("3.0")}
    amount = Decimal("1000") if chosen == "home_win" else Decimal("10")
    bet = SimpleNamespace(chosen_option=chosen, amount=amount, odds=odds[chosen])

    assert bet_service.calculate_winnings(bet, result) == expected


@pytest.mark.asyncio
async def test_user_bet_stats(db, make_user, make_event):
    user = await make_user(balance=Decimal("1000.00"))
    settled = await make_event("Milan vs Inter")
    open_event = await make_event("Porto vs Benfica")

    await bet_service.place_bet(db, user.id, settled.id, "home_win", Decimal("100"))
    await bet_service.place_bet(db, user.id, settled.id, "draw", Decimal("100"))
    await bet_service.place_bet(db, user.id, open_event.id, "draw", Decimal("50"))
    await settlement_service.close_and_settle(db, settled.id, "home_win")

    stats = await bet_service.get_user_bet_stats(db, user.id)

    assert stats["total"] == 3
    assert stats["won"] == 1
    assert stats["lost"] == 1
    assert stats["pending"] == 1
    assert stats["total_winnings"] == Decimal("250.00")
    assert stats["win_rate"] == Decimal("50.00")


@pytest.mark.asyncio
async def test_get_event_bets_loads_users(db, make_user, make_event):
    alice = await make_user("alice")
    bob = await make_user("bob")
    event = await make_event()
    await bet_service.place_bet(db, alice.id, event.id, "draw", Decimal("10"))
    await bet_service.place_bet(db, bob.id, event.id, "away_win", Decimal("20"))

    bets = await bet_service.get_event_bets(db, event.id)

    assert {b.user.username for b in bets} == {"alice", "bob"}


@pytest.mark.asyncio
async def test_delete_pending_bet_refunds_stake(db, make_user, make_event, balance_of):
    user = await make_user(balance=Decimal("100.00"))
    event = await make_event()
    bet = await bet_service.place_bet(db, user.id, event.id, "draw", Decimal("30"))

    await bet_service.delete_bet(db, bet.id)

    assert await balance_of(user.id) == Decimal("100.00")
    assert await bet_service.get_bet(db, bet.id) is None


@pytest.mark.asyncio
async def test_delete_settled_bet_is_refused(db, make_user, make_event):
    user = await make_user()
    event = await make_event()
    bet = await bet_service.place_bet(db, user.id, event.id, "draw", Decimal("30"))
    await settlement_service.close_and_settle(db, event.id, "draw")

    with pytest.raises(BetAlreadySettled):
        await bet_service.delete_bet(db, bet.id)


@pytest.mark.asyncio
async def test_delete_unknown_bet(db):
    with pytest.raises(BetNotFound):
        await bet_service.delete_bet(db, uuid4())


@pytest.mark.asyncio
async def test_concurrent_placements_never_overdraw(make_user, make_event, balance_of):
    user = await make_user(balance=Decimal("1000.00"))
    event = await make_event()
    user_id, event_id = user.id, event.id

    async def place() -> bool:
        async with get_db_session() as session:
            try:
                await bet_service.place_bet(session, user_id, event_id, "draw", Decimal("300"))
                return True
            except InsufficientBalance:
                return False

    results = await asyncio.gather(*(place() for _ in range(5)))

    assert results.count(True) == 3
    assert await balance_of(user_id) == Decimal("100.00")
    async with get_db_session() as session:
        assert len(await bet_service.get_user_bets(session, user_id)) == 3


@pytest.mark.asyncio
async def test_bet_of_entire_reported_balance(db, make_user, make_event, balance_of):
    user = await make_user(balance=Decimal("0.30"))
    event = await make_event()
    await bet_service.place_bet(db, user.id, event.id, "draw", Decimal("0.10"))

    remaining = await balance_of(user.id)
    assert remaining == Decimal("0.20")

    await bet_service.place_bet(db, user.id, event.id, "home_win", remaining)
    assert await balance_of(user.id) == Decimal("0.00")


@pytest.mark.asyncio
async def test_sub_cent_stake_is_rejected(db, make_user, make_event, balance_of):
    user = await make_user(balance=Decimal("100.00"))
    event = await make_event()

    with pytest.raises(InvalidAmount):
        await bet_service.place_bet(db, user.id, event.id, "draw", Decimal("10.004"))

    assert await balance_of(user.id) == Decimal("100.00")


@pytest.mark.asyncio
async def test_bet_detail_with_loaded_relations(db, make_user, make_event):
    user = await make_user()
    event = await make_event("Celtic vs Rangers")
    await bet_service.place_bet(db, user.id, event.id, "draw", Decimal("10"))

    async with get_db_session() as session:
        event_bets = await bet_service.get_event_bets(session, event.id)
        history = await bet_service.get_user_bets(session, user.id)

        event_detail = BetDetailResponse.from_bet(event_bets[0])
        history_detail = BetDetailResponse.from_bet(history[0])

    assert event_detail.username == "alice"
    assert history_detail.event_name == "Celtic vs Rangers"
    assert history_detail.username == "alice"


@pytest.mark.asyncio
async def test_bet_detail_skips_unloaded_relations(db, make_user, make_event):
    user = await make_user()
    event = await make_event()
    bet = await bet_service.place_bet(db, user.id, event.id, "draw", Decimal("10"))
    bet_id = bet.id

    async with get_db_session() as session:
        detail = BetDetailResponse.from_bet(await bet_service.get_bet(session, bet_id))

    assert detail.id == bet_id
    assert detail.username is None
    assert detail.event_name is None
