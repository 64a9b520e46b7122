"""Unit tests for AccountApplicationService using a mock repository."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from src.sb_account.application.service import AccountApplicationService
from src.sb_account.domain.models import AccountHolder, BetStats, Transaction
from src.sb_common.errors import (
    EmailExistsError,
    InsufficientFundsError,
    InvalidInputError,
    UserNotFoundError,
)
from src.sb_realtime.messages import BalanceUpdateMessage
from tests.unit.factories import USER_ID


def _make_holder(balance: int = 100000, **kwargs: object) -> AccountHolder:
    fields: dict[str, object] = {
        "id": USER_ID,
        "email": "alice@example.com",
        "username": "alice",
        "first_name": "Alice",
        "last_name": "Smith",
        "balance": balance,
        "role": "user",
        "created_at": datetime.now(UTC),
    }
    fields.update(kwargs)
    return AccountHolder(**fields)  # type: ignore[arg-type]


def _make_tx(tx_id: int = 1, amount: int = 5000, balance_after: int = 105000) -> Transaction:
    return Transaction(
        id=tx_id,
        user_id=USER_ID,
        type="deposit" if amount > 0 else "withdrawal",
        amount=amount,
        description="Deposit",
        balance_before=balance_after - amount,
        balance_after=balance_after,
        created_at=datetime.now(UTC),
    )


def _mock_db() -> MagicMock:
    db = MagicMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    return db


class TestBetStats:
    def test_win_rate_rounded(self) -> None:
        assert BetStats(total_bets=3, won_bets=1, total_winnings=0).win_rate == 33.33

    def test_win_rate_no_bets(self) -> None:
        assert BetStats(total_bets=0, won_bets=0, total_winnings=0).win_rate == 0.0


class TestProfile:
    async def test_includes_stats(self) -> None:
        repo = AsyncMock()
        repo.get_holder.return_value = _make_holder()
        repo.get_bet_stats.return_value = BetStats(total_bets=4, won_bets=1, total_winnings=25000)
        svc = AccountApplicationService(repo=repo)

        result = await svc.get_profile(MagicMock(), USER_ID)

        assert result.balance_display == "$1,000.00"
        assert result.stats is not None
        assert result.stats.win_rate == 25.0
        assert result.stats.total_winnings_cents == 25000

    async def test_missing_user(self) -> None:
        repo = AsyncMock()
        repo.get_holder.return_value = None
        with pytest.raises(UserNotFoundError):
            await AccountApplicationService(repo=repo).get_profile(MagicMock(), USER_ID)


class TestUpdateProfile:
    async def test_zero_fields_rejected(self) -> None:
        repo = AsyncMock()
        with pytest.raises(InvalidInputError):
            await AccountApplicationService(repo=repo).update_profile(_mock_db(), USER_ID, {})
        repo.update_profile.assert_not_awaited()

    async def test_only_supplied_fields_change(self) -> None:
        repo = AsyncMock()
        repo.update_profile.return_value = _make_holder(first_name="Alicia")
        db = _mock_db()

        result = await AccountApplicationService(repo=repo).update_profile(
            db, USER_ID, {"first_name": "Alicia"}
        )

        assert repo.update_profile.call_args.args[2] == {"first_name": "Alicia"}
        assert result.first_name == "Alicia"
        repo.email_taken.assert_not_awaited()
        db.commit.assert_awaited_once()

    async def test_email_conflict(self) -> None:
        repo = AsyncMock()
        repo.email_taken.return_value = True
        db = _mock_db()
        with pytest.raises(EmailExistsError):
            await AccountApplicationService(repo=repo).update_profile(
                db, USER_ID, {"email": "bob@example.com"}
            )
        repo.update_profile.assert_not_awaited()
        db.rollback.assert_awaited_once()

    async def test_email_race_maps_to_conflict(self) -> None:
        repo = AsyncMock()
        repo.email_taken.return_value = False
        repo.update_profile.side_effect = IntegrityError("UPDATE", {}, Exception("uq_users_email"))
        with pytest.raises(EmailExistsError):
            await AccountApplicationService(repo=repo).update_profile(
                _mock_db(), USER_ID, {"email": "bob@example.com"}
            )


class TestFundsMovement:
    async def test_deposit_appends_ledger_and_notifies(self) -> None:
        repo = AsyncMock()
        repo.credit.return_value = 105000
        repo.insert_transaction.return_value = _make_tx(7, 5000, 105000)
        notifier = AsyncMock()
        db = _mock_db()
        svc = AccountApplicationService(repo=repo, notifier=notifier)

        result = await svc.deposit(db, USER_ID, 5000)

        assert result.balance_cents == 105000
        assert result.transaction_id == 7
        assert repo.insert_transaction.call_args.args[2:5] == ("deposit", 5000, 105000)
        db.commit.assert_awaited_once()
        message = notifier.publish.call_args.args[0]
        assert isinstance(message, BalanceUpdateMessage)
        assert message.new_balance_cents == 105000

    async def test_withdraw_records_negative_amount(self) -> None:
        repo = AsyncMock()
        repo.debit.return_value = 95000
        repo.insert_transaction.return_value = _make_tx(8, -5000, 95000)
        svc = AccountApplicationService(repo=repo)

        result = await svc.withdraw(_mock_db(), USER_ID, 5000)

        assert result.balance_cents == 95000
        assert repo.insert_transaction.call_args.args[2:5] == ("withdrawal", -5000, 95000)

    async def test_withdraw_insufficient(self) -> None:
        repo = AsyncMock()
        repo.debit.return_value = None
        repo.get_holder.return_value = _make_holder(balance=100)
        db = _mock_db()
        with pytest.raises(InsufficientFundsError):
            await AccountApplicationService(repo=repo).withdraw(db, USER_ID, 5000)
        repo.insert_transaction.assert_not_awaited()
        db.rollback.assert_awaited_once()


class TestTransactions:
    async def test_list_paginates(self) -> None:
        repo = AsyncMock()
        repo.list_transactions.return_value = ([_make_tx()], 41)
        svc = AccountApplicationService(repo=repo)

        result = await svc.list_transactions(MagicMock(), USER_ID, "deposit", page=1, limit=20)

        assert result.pagination.total_pages == 3
        assert result.items[0].balance_before_cents == 100000
        assert repo.list_transactions.call_args.args[2:] == ("deposit", 20, 0)
