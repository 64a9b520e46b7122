"""AccountRepository Protocol — interface contract for persistence layer."""

from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_account.domain.models import AccountHolder, BetStats, Transaction


class AccountRepositoryProtocol(Protocol):
    async def get_holder(self, db: AsyncSession, user_id: str) -> AccountHolder | None: ...

    async def get_bet_stats(self, db: AsyncSession, user_id: str) -> BetStats: ...

    async def email_taken(
        self, db: AsyncSession, email: str, exclude_user_id: str
    ) -> bool: ...

    async def update_profile(
        self, db: AsyncSession, user_id: str, columns: dict[str, Any]
    ) -> AccountHolder | None: ...

    async def credit(self, db: AsyncSession, user_id: str, amount: int) -> int | None: ...

    async def debit(self, db: AsyncSession, user_id: str, amount: int) -> int | None: ...

    async def insert_transaction(
        self,
        db: AsyncSession,
        user_id: str,
        tx_type: str,
        amount: int,
        balance_after: int,
        description: str,
    ) -> Transaction: ...

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: str,
        tx_type: str | None,
        limit: int,
        offset: int,
    ) -> tuple[list[Transaction], int]: ...
