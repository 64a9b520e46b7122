"""WagerRepository Protocol — interface contract for persistence layer."""

from decimal import Decimal
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_wager.domain.models import Bet


class WagerRepositoryProtocol(Protocol):
    async def get_balance(self, db: AsyncSession, user_id: str) -> int | None: ...

    async def debit_balance(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> int | None:
        """Guarded debit; returns the new balance, or None when funds are short."""
        ...

    async def insert_bet(
        self,
        db: AsyncSession,
        user_id: str,
        event_id: str,
        amount: int,
        odds: Decimal,
        prediction: str,
        potential_winnings: int,
    ) -> Bet: ...

    async def insert_bet_transaction(
        self,
        db: AsyncSession,
        user_id: str,
        bet_id: str,
        amount: int,
        balance_after: int,
        description: str,
    ) -> None: ...

    async def list_bets(
        self,
        db: AsyncSession,
        user_id: str,
        status: str | None,
        limit: int,
        offset: int,
    ) -> tuple[list[Bet], int]: ...

    async def get_bet(
        self, db: AsyncSession, bet_id: str, user_id: str
    ) -> Bet | None: ...
