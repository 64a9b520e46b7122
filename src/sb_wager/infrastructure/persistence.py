"""WagerRepository — concrete implementation of WagerRepositoryProtocol.

The debit is a single conditional UPDATE ... RETURNING: two concurrent
placements for the same user serialize on the row lock, and the second one
sees the already-reduced balance. Zero rows returned means funds are short.

Transaction ownership: the CALLER (WagerApplicationService) commits or
rolls back. Nothing here commits.
"""

from decimal import Decimal
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_common.enums import TransactionType
from src.sb_wager.domain.models import Bet

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_GET_BALANCE_SQL = text("""
    SELECT balance FROM users WHERE id = :user_id AND is_active = TRUE
""")

_DEBIT_SQL = text("""
    UPDATE users
    SET balance = balance - :amount,
        updated_at = NOW()
    WHERE id = :user_id AND balance >= :amount
    RETURNING balance
""")

_BET_COLUMNS = """
    b.id, b.user_id, b.event_id, b.amount, b.odds, b.prediction, b.status,
    b.potential_winnings, b.actual_winnings, b.placed_at, b.settled_at
"""

_INSERT_BET_SQL = text("""
    INSERT INTO bets
        (user_id, event_id, amount, odds, prediction, potential_winnings)
    VALUES
        (:user_id, :event_id, :amount, :odds, :prediction, :potential_winnings)
    RETURNING id, user_id, event_id, amount, odds, prediction, status,
              potential_winnings, actual_winnings, placed_at, settled_at
""")

_INSERT_TRANSACTION_SQL = text("""
    INSERT INTO transactions
        (user_id, type, amount, description, balance_before, balance_after,
         reference_type, reference_id)
    VALUES
        (:user_id, :type, :amount, :description, :balance_before, :balance_after,
         'bet', :reference_id)
""")

_BET_FILTER = """
    WHERE b.user_id = :user_id
      AND (CAST(:status AS TEXT) IS NULL OR b.status = CAST(:status AS TEXT))
"""

_COUNT_BETS_SQL = text(f"SELECT COUNT(*) FROM bets b {_BET_FILTER}")

_LIST_BETS_SQL = text(f"""
    SELECT {_BET_COLUMNS}, e.title AS event_title
    FROM bets b
    JOIN events e ON e.id = b.event_id
    {_BET_FILTER}
    ORDER BY b.placed_at DESC, b.id DESC
    LIMIT :limit OFFSET :offset
""")

_GET_BET_SQL = text(f"""
    SELECT {_BET_COLUMNS}, e.title AS event_title
    FROM bets b
    JOIN events e ON e.id = b.event_id
    WHERE b.id = :bet_id AND b.user_id = :user_id
""")

# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_bet(row: Any) -> Bet:
    return Bet(
        id=str(row.id),
        user_id=str(row.user_id),
        event_id=str(row.event_id),
        amount=row.amount,
        odds=Decimal(row.odds),
        prediction=row.prediction,
        status=row.status,
        potential_winnings=row.potential_winnings,
        actual_winnings=row.actual_winnings,
        placed_at=row.placed_at,
        settled_at=row.settled_at,
        event_title=getattr(row, "event_title", None),
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class WagerRepository:
    async def get_balance(self, db: AsyncSession, user_id: str) -> int | None:
        result = await db.execute(_GET_BALANCE_SQL, {"user_id": user_id})
        row = result.fetchone()
        return row.balance if row else None

    async def debit_balance(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> int | None:
        result = await db.execute(_DEBIT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        return row.balance if row else None

    async def insert_bet(
        self,
        db: AsyncSession,
        user_id: str,
        event_id: str,
        amount: int,
        odds: Decimal,
        prediction: str,
        potential_winnings: int,
    ) -> Bet:
        result = await db.execute(
            _INSERT_BET_SQL,
            {
                "user_id": user_id,
                "event_id": event_id,
                "amount": amount,
                "odds": odds,
                "prediction": prediction,
                "potential_winnings": potential_winnings,
            },
        )
        return _row_to_bet(result.fetchone())

    async def insert_bet_transaction(
        self,
        db: AsyncSession,
        user_id: str,
        bet_id: str,
        amount: int,
        balance_after: int,
        description: str,
    ) -> None:
        await db.execute(
            _INSERT_TRANSACTION_SQL,
            {
                "user_id": user_id,
                "type": TransactionType.BET.value,
                "amount": -amount,
                "description": description,
                "balance_before": balance_after + amount,
                "balance_after": balance_after,
                "reference_id": bet_id,
            },
        )

    async def list_bets(
        self,
        db: AsyncSession,
        user_id: str,
        status: str | None,
        limit: int,
        offset: int,
    ) -> tuple[list[Bet], int]:
        params = {"user_id": user_id, "status": status}
        total = (await db.execute(_COUNT_BETS_SQL, params)).scalar_one()
        result = await db.execute(
            _LIST_BETS_SQL, {**params, "limit": limit, "offset": offset}
        )
        return [_row_to_bet(row) for row in result.fetchall()], int(total)

    async def get_bet(
        self, db: AsyncSession, bet_id: str, user_id: str
    ) -> Bet | None:
        result = await db.execute(_GET_BET_SQL, {"bet_id": bet_id, "user_id": user_id})
        row = result.fetchone()
        return _row_to_bet(row) if row else None
