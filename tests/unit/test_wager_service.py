"""Unit tests for WagerApplicationService (bet placement)."""

import asyncio
from collections.abc import Callable
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from src.sb_common.errors import (
    BetNotFoundError,
    EventNotAvailableError,
    InsufficientFundsError,
    InvalidInputError,
    NoOddsForOutcomeError,
    PlacementFailedError,
)
from src.sb_realtime.messages import BalanceUpdateMessage
from src.sb_wager.application.service import WagerApplicationService
from src.sb_wager.domain.models import Bet
from tests.unit.factories import BET_ID, EVENT_ID, USER_ID, make_bet, make_event


def _mock_db() -> MagicMock:
    db = MagicMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    return db


def _service(
    balance: int | None = 100000,
    event: object = None,
    new_balance: int | None = 90000,
) -> tuple[WagerApplicationService, AsyncMock, AsyncMock, AsyncMock]:
    repo = AsyncMock()
    repo.get_balance.return_value = balance
    repo.debit_balance.return_value = new_balance
    repo.insert_bet.return_value = make_bet()
    events = AsyncMock()
    events.get_event_by_id.return_value = event if event is not None else make_event()
    notifier = AsyncMock()
    svc = WagerApplicationService(repo=repo, events=events, notifier=notifier)
    return svc, repo, events, notifier


class TestPlaceBetSuccess:
    async def test_debits_records_and_commits(self) -> None:
        svc, repo, _, notifier = _service()
        db = _mock_db()

        result = await svc.place_bet(db, USER_ID, EVENT_ID, 10000, "home")

        repo.debit_balance.assert_awaited_once_with(db, USER_ID, 10000)
        _, user, event, amount, odds, prediction, potential = repo.insert_bet.call_args.args
        assert (user, event, amount, odds, prediction, potential) == (
            USER_ID, EVENT_ID, 10000, Decimal("2.50"), "home", 25000,
        )
        tx_args = repo.insert_bet_transaction.call_args.args
        assert tx_args[1:5] == (USER_ID, BET_ID, 10000, 90000)
        db.commit.assert_awaited_once()
        db.rollback.assert_not_awaited()

        assert result.new_balance_cents == 90000
        assert result.bet.event_title == "Manchester United vs Liverpool"
        message = notifier.publish.call_args.args[0]
        assert isinstance(message, BalanceUpdateMessage)
        assert message.new_balance_cents == 90000
        assert message.room == f"user:{USER_ID}"

    async def test_payout_uses_odds_at_placement(self) -> None:
        svc, repo, _, _ = _service(event=make_event(away="1.85"))
        await svc.place_bet(_mock_db(), USER_ID, EVENT_ID, 333, "away")
        assert repo.insert_bet.call_args.args[-1] == 616

    async def test_live_event_accepts_bets(self) -> None:
        svc, _, _, _ = _service(event=make_event(status="live"))
        await svc.place_bet(_mock_db(), USER_ID, EVENT_ID, 100, "draw")

    async def test_broadcast_failure_does_not_fail_placement(self) -> None:
        svc, _, _, notifier = _service()
        notifier.publish.side_effect = RuntimeError("socket gone")
        db = _mock_db()

        result = await svc.place_bet(db, USER_ID, EVENT_ID, 10000, "home")

        assert result.new_balance_cents == 90000
        db.commit.assert_awaited_once()


class TestPlaceBetPreconditions:
    @pytest.mark.parametrize("amount", [0, -5])
    async def test_non_positive_stake(self, amount: int) -> None:
        svc, repo, _, _ = _service()
        with pytest.raises(InvalidInputError):
            await svc.place_bet(_mock_db(), USER_ID, EVENT_ID, amount, "home")
        repo.get_balance.assert_not_awaited()

    async def test_unknown_prediction(self) -> None:
        svc, repo, _, _ = _service()
        with pytest.raises(InvalidInputError):
            await svc.place_bet(_mock_db(), USER_ID, EVENT_ID, 100, "banana")
        repo.get_balance.assert_not_awaited()

    async def test_insufficient_funds_touches_nothing(self) -> None:
        svc, repo, _, notifier = _service(balance=500)
        db = _mock_db()
        with pytest.raises(InsufficientFundsError):
            await svc.place_bet(db, USER_ID, EVENT_ID, 1000, "home")
        repo.debit_balance.assert_not_awaited()
        repo.insert_bet.assert_not_awaited()
        db.commit.assert_not_awaited()
        notifier.publish.assert_not_awaited()

    async def test_funds_checked_before_event(self) -> None:
        svc, _, events, _ = _service(balance=500, event=make_event(status="completed"))
        with pytest.raises(InsufficientFundsError):
            await svc.place_bet(_mock_db(), USER_ID, EVENT_ID, 1000, "home")
        events.get_event_by_id.assert_not_awaited()

    @pytest.mark.parametrize("status", ["completed", "cancelled"])
    async def test_closed_event_rejected(self, status: str) -> None:
        svc, repo, _, _ = _service(event=make_event(status=status))
        with pytest.raises(EventNotAvailableError):
            await svc.place_bet(_mock_db(), USER_ID, EVENT_ID, 100, "home")
        repo.debit_balance.assert_not_awaited()

    async def test_unknown_event_rejected(self) -> None:
        svc, _, events, _ = _service()
        events.get_event_by_id.return_value = None
        with pytest.raises(EventNotAvailableError):
            await svc.place_bet(_mock_db(), USER_ID, EVENT_ID, 100, "home")

    async def test_draw_without_draw_market(self) -> None:
        svc, repo, _, _ = _service(event=make_event(draw=None))
        with pytest.raises(NoOddsForOutcomeError):
            await svc.place_bet(_mock_db(), USER_ID, EVENT_ID, 100, "draw")
        repo.debit_balance.assert_not_awaited()


class TestPlaceBetAtomicity:
    async def test_guarded_debit_miss_rolls_back(self) -> None:
        svc, repo, _, notifier = _service(new_balance=None)
        db = _mock_db()
        with pytest.raises(InsufficientFundsError):
            await svc.place_bet(db, USER_ID, EVENT_ID, 10000, "home")
        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()
        repo.insert_bet.assert_not_awaited()
        notifier.publish.assert_not_awaited()

    async def test_database_error_becomes_placement_failed(self) -> None:
        svc, repo, _, notifier = _service()
        repo.insert_bet_transaction.side_effect = OperationalError("INSERT", {}, Exception("boom"))
        db = _mock_db()
        with pytest.raises(PlacementFailedError):
            await svc.place_bet(db, USER_ID, EVENT_ID, 10000, "home")
        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()
        notifier.publish.assert_not_awaited()


# ---------------------------------------------------------------------------
# In-memory ledger: checks conservation across concurrent placements
# ---------------------------------------------------------------------------


class _Ledger:
    def __init__(self, balance: int) -> None:
        self.balance = balance
        self.bets: list[Bet] = []
        self.transactions: list[dict[str, int]] = []


class _FakeSession:
    def __init__(self) -> None:
        self._undo: list[Callable[[], None]] = []

    def on_rollback(self, fn: Callable[[], None]) -> None:
        self._undo.append(fn)

    async def commit(self) -> None:
        self._undo.clear()

    async def rollback(self) -> None:
        for fn in reversed(self._undo):
            fn()
        self._undo.clear()


class _FakeWagerRepo:
    def __init__(self, ledger: _Ledger) -> None:
        self.ledger = ledger

    async def get_balance(self, db: _FakeSession, user_id: str) -> int:
        balance = self.ledger.balance
        await asyncio.sleep(0)  # let a concurrent placement read the same balance
        return balance

    async def debit_balance(self, db: _FakeSession, user_id: str, amount: int) -> int | None:
        if self.ledger.balance < amount:
            return None
        self.ledger.balance -= amount

        def undo() -> None:
            self.ledger.balance += amount

        db.on_rollback(undo)
        return self.ledger.balance

    async def insert_bet(self, db: _FakeSession, *args: object) -> Bet:
        user_id, event_id, amount, odds, prediction, potential = args
        bet = make_bet(amount=int(amount), odds=str(odds), prediction=str(prediction))
        self.ledger.bets.append(bet)
        db.on_rollback(lambda: self.ledger.bets.remove(bet))
        return bet

    async def insert_bet_transaction(
        self, db: _FakeSession, user_id: str, bet_id: str, amount: int,
        balance_after: int, description: str,
    ) -> None:
        row = {"amount": -amount, "before": balance_after + amount, "after": balance_after}
        self.ledger.transactions.append(row)
        db.on_rollback(lambda: self.ledger.transactions.remove(row))


class TestConservation:
    async def test_concurrent_placements_never_overdraw(self) -> None:
        ledger = _Ledger(balance=1000)
        events = AsyncMock()
        events.get_event_by_id.return_value = make_event()
        svc = WagerApplicationService(repo=_FakeWagerRepo(ledger), events=events)

        results = await asyncio.gather(
            svc.place_bet(_FakeSession(), USER_ID, EVENT_ID, 700, "home"),  # type: ignore[arg-type]
            svc.place_bet(_FakeSession(), USER_ID, EVENT_ID, 700, "home"),  # type: ignore[arg-type]
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, InsufficientFundsError)]
        assert len(failures) == 1
        assert ledger.balance == 300
        assert len(ledger.bets) == 1
        assert ledger.transactions == [{"amount": -700, "before": 1000, "after": 300}]

    async def test_balance_plus_stakes_is_constant(self) -> None:
        ledger = _Ledger(balance=5000)
        events = AsyncMock()
        events.get_event_by_id.return_value = make_event()
        svc = WagerApplicationService(repo=_FakeWagerRepo(ledger), events=events)

        for stake in (1000, 250, 3000):
            await svc.place_bet(_FakeSession(), USER_ID, EVENT_ID, stake, "away")  # type: ignore[arg-type]

        assert ledger.balance + sum(b.amount for b in ledger.bets) == 5000
        for row in ledger.transactions:
            assert row["after"] == row["before"] + row["amount"]


class TestReads:
    async def test_get_foreign_bet_is_not_found(self) -> None:
        svc, repo, _, _ = _service()
        repo.get_bet.return_value = None
        with pytest.raises(BetNotFoundError):
            await svc.get_bet(MagicMock(), USER_ID, BET_ID)
        repo.get_bet.assert_awaited_once()
        assert repo.get_bet.call_args.args[1:] == (BET_ID, USER_ID)

    async def test_list_bets_paginates(self) -> None:
        svc, repo, _, _ = _service()
        repo.list_bets.return_value = ([make_bet()], 11)
        result = await svc.list_bets(MagicMock(), USER_ID, "pending", page=2, limit=10)
        assert result.pagination.total_pages == 2
        assert repo.list_bets.call_args.args[2:] == ("pending", 10, 10)
