"""AccountApplicationService — profile, balance and the transaction ledger.

Deposit, withdraw and profile update commit or roll back here; the session
arrives already in a transaction (autobegun by the authentication lookup),
so ``db.begin()`` is not used.
"""

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_account.application.schemas import (
    BalanceResponse,
    FundsMovementResponse,
    ProfileResponse,
    TransactionItem,
    TransactionListResponse,
)
from src.sb_account.domain.repository import AccountRepositoryProtocol
from src.sb_account.infrastructure.persistence import AccountRepository
from src.sb_common.cents import cents_to_display
from src.sb_common.enums import TransactionType
from src.sb_common.errors import (
    EmailExistsError,
    InsufficientFundsError,
    InvalidInputError,
    UserNotFoundError,
)
from src.sb_common.pagination import PageMeta, clamp_limit, page_offset
from src.sb_realtime.hub import Notifier, publish_quietly
from src.sb_realtime.messages import BalanceUpdateMessage

logger = logging.getLogger(__name__)


class AccountApplicationService:
    def __init__(
        self,
        repo: AccountRepositoryProtocol | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self._repo: AccountRepositoryProtocol = repo or AccountRepository()
        self._notifier = notifier

    async def get_profile(self, db: AsyncSession, user_id: str) -> ProfileResponse:
        holder = await self._repo.get_holder(db, user_id)
        if holder is None:
            raise UserNotFoundError(user_id)
        stats = await self._repo.get_bet_stats(db, user_id)
        return ProfileResponse.from_domain(holder, stats)

    async def update_profile(
        self, db: AsyncSession, user_id: str, changes: dict[str, Any]
    ) -> ProfileResponse:
        columns = {k: v for k, v in changes.items() if v is not None}
        if not columns:
            raise InvalidInputError("No fields to update")

        try:
            if "email" in columns and await self._repo.email_taken(db, columns["email"], user_id):
                raise EmailExistsError()
            holder = await self._repo.update_profile(db, user_id, columns)
            if holder is None:
                raise UserNotFoundError(user_id)
            await db.commit()
        except IntegrityError as exc:
            await db.rollback()
            # Lost a race with another account claiming the same email.
            raise EmailExistsError() from exc
        except Exception:
            await db.rollback()
            raise
        return ProfileResponse.from_domain(holder)

    async def get_balance(self, db: AsyncSession, user_id: str) -> BalanceResponse:
        holder = await self._repo.get_holder(db, user_id)
        if holder is None:
            raise UserNotFoundError(user_id)
        return BalanceResponse(
            user_id=user_id,
            balance_cents=holder.balance,
            balance_display=cents_to_display(holder.balance),
        )

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: str,
        tx_type: str | None,
        page: int,
        limit: int,
    ) -> TransactionListResponse:
        page = max(page, 1)
        limit = clamp_limit(limit)
        items, total = await self._repo.list_transactions(
            db, user_id, tx_type, limit, page_offset(page, limit)
        )
        return TransactionListResponse(
            items=[TransactionItem.from_domain(t) for t in items],
            pagination=PageMeta.build(page, limit, total),
        )

    async def deposit(
        self, db: AsyncSession, user_id: str, amount_cents: int
    ) -> FundsMovementResponse:
        try:
            balance = await self._repo.credit(db, user_id, amount_cents)
            if balance is None:
                raise UserNotFoundError(user_id)
            tx = await self._repo.insert_transaction(
                db, user_id, TransactionType.DEPOSIT.value, amount_cents, balance, "Deposit"
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Deposit user=%s amount=%d balance=%d", user_id, amount_cents, balance)
        await publish_quietly(self._notifier, BalanceUpdateMessage.for_balance(user_id, balance))
        return _movement(balance, amount_cents, tx.id)

    async def withdraw(
        self, db: AsyncSession, user_id: str, amount_cents: int
    ) -> FundsMovementResponse:
        try:
            balance = await self._repo.debit(db, user_id, amount_cents)
            if balance is None:
                holder = await self._repo.get_holder(db, user_id)
                if holder is None:
                    raise UserNotFoundError(user_id)
                raise InsufficientFundsError(amount_cents, holder.balance)
            tx = await self._repo.insert_transaction(
                db,
                user_id,
                TransactionType.WITHDRAWAL.value,
                -amount_cents,
                balance,
                "Withdrawal",
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Withdrawal user=%s amount=%d balance=%d", user_id, amount_cents, balance)
        await publish_quietly(self._notifier, BalanceUpdateMessage.for_balance(user_id, balance))
        return _movement(balance, amount_cents, tx.id)


def _movement(balance: int, amount: int, tx_id: int) -> FundsMovementResponse:
    return FundsMovementResponse(
        balance_cents=balance,
        balance_display=cents_to_display(balance),
        amount_cents=amount,
        amount_display=cents_to_display(amount),
        transaction_id=tx_id,
    )
