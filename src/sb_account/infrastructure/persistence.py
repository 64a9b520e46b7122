"""AccountRepository — concrete implementation of AccountRepositoryProtocol.

All balance-mutating operations use atomic PostgreSQL UPDATE ... RETURNING.
A result of 0 rows from ``debit`` means funds are short.

Transaction ownership: the CALLER (application service) commits or rolls back.
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_account.domain.models import AccountHolder, BetStats, Transaction

# ---------------------------------------------------------------------------
# SQL: users
# ---------------------------------------------------------------------------

_HOLDER_COLUMNS = """
    id, email, username, first_name, last_name, balance, role, created_at, updated_at
"""

_GET_HOLDER_SQL = text(f"""
    SELECT {_HOLDER_COLUMNS}
    FROM users
    WHERE id = :user_id AND is_active = TRUE
""")

_EMAIL_TAKEN_SQL = text("""
    SELECT 1 FROM users WHERE email = :email AND id <> :user_id
""")

_CREDIT_SQL = text("""
    UPDATE users
    SET balance = balance + :amount,
        updated_at = NOW()
    WHERE id = :user_id
    RETURNING balance
""")

_DEBIT_SQL = text("""
    UPDATE users
    SET balance = balance - :amount,
        updated_at = NOW()
    WHERE id = :user_id AND balance >= :amount
    RETURNING balance
""")

PROFILE_COLUMNS: frozenset[str] = frozenset({"first_name", "last_name", "email"})

# ---------------------------------------------------------------------------
# SQL: bets / transactions
# ---------------------------------------------------------------------------

_BET_STATS_SQL = text("""
    SELECT
        COUNT(*) AS total_bets,
        COUNT(*) FILTER (WHERE status = 'won') AS won_bets,
        COALESCE(SUM(actual_winnings) FILTER (WHERE status = 'won'), 0) AS total_winnings
    FROM bets
    WHERE user_id = :user_id
""")

_TX_COLUMNS = """
    id, user_id, type, amount, description, balance_before, balance_after,
    reference_type, reference_id, created_at
"""

_INSERT_TX_SQL = text(f"""
    INSERT INTO transactions
        (user_id, type, amount, description, balance_before, balance_after)
    VALUES
        (:user_id, :type, :amount, :description, :balance_before, :balance_after)
    RETURNING {_TX_COLUMNS}
""")

_TX_FILTER = """
    WHERE user_id = :user_id
      AND (CAST(:type AS TEXT) IS NULL OR type = CAST(:type AS TEXT))
"""

_COUNT_TX_SQL = text(f"SELECT COUNT(*) FROM transactions {_TX_FILTER}")

_LIST_TX_SQL = text(f"""
    SELECT {_TX_COLUMNS}
    FROM transactions
    {_TX_FILTER}
    ORDER BY created_at DESC, id DESC
    LIMIT :limit OFFSET :offset
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_holder(row: Any) -> AccountHolder:
    return AccountHolder(
        id=str(row.id),
        email=row.email,
        username=row.username,
        first_name=row.first_name,
        last_name=row.last_name,
        balance=row.balance,
        role=row.role,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_transaction(row: Any) -> Transaction:
    return Transaction(
        id=row.id,
        user_id=str(row.user_id),
        type=row.type,
        amount=row.amount,
        description=row.description,
        balance_before=row.balance_before,
        balance_after=row.balance_after,
        reference_type=row.reference_type,
        reference_id=str(row.reference_id) if row.reference_id is not None else None,
        created_at=row.created_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class AccountRepository:
    async def get_holder(self, db: AsyncSession, user_id: str) -> AccountHolder | None:
        result = await db.execute(_GET_HOLDER_SQL, {"user_id": user_id})
        row = result.fetchone()
        return _row_to_holder(row) if row else None

    async def get_bet_stats(self, db: AsyncSession, user_id: str) -> BetStats:
        row = (await db.execute(_BET_STATS_SQL, {"user_id": user_id})).fetchone()
        return BetStats(
            total_bets=int(row.total_bets),
            won_bets=int(row.won_bets),
            total_winnings=int(row.total_winnings),
        )

    async def email_taken(
        self, db: AsyncSession, email: str, exclude_user_id: str
    ) -> bool:
        result = await db.execute(
            _EMAIL_TAKEN_SQL, {"email": email, "user_id": exclude_user_id}
        )
        return result.fetchone() is not None

    async def update_profile(
        self, db: AsyncSession, user_id: str, columns: dict[str, Any]
    ) -> AccountHolder | None:
        unknown = set(columns) - PROFILE_COLUMNS
        if unknown:
            raise ValueError(f"Not updatable: {sorted(unknown)}")
        if not columns:
            raise ValueError("No columns to update")

        assignments = ", ".join(f"{col} = :{col}" for col in sorted(columns))
        sql = text(f"""
            UPDATE users
            SET {assignments}, updated_at = NOW()
            WHERE id = :user_id AND is_active = TRUE
            RETURNING {_HOLDER_COLUMNS}
        """)
        result = await db.execute(sql, {**columns, "user_id": user_id})
        row = result.fetchone()
        return _row_to_holder(row) if row else None

    async def credit(self, db: AsyncSession, user_id: str, amount: int) -> int | None:
        result = await db.execute(_CREDIT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        return row.balance if row else None

    async def debit(self, db: AsyncSession, user_id: str, amount: int) -> int | None:
        result = await db.execute(_DEBIT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        return row.balance if row else None

    async def insert_transaction(
        self,
        db: AsyncSession,
        user_id: str,
        tx_type: str,
        amount: int,
        balance_after: int,
        description: str,
    ) -> Transaction:
        result = await db.execute(
            _INSERT_TX_SQL,
            {
                "user_id": user_id,
                "type": tx_type,
                "amount": amount,
                "description": description,
                "balance_before": balance_after - amount,
                "balance_after": balance_after,
            },
        )
        return _row_to_transaction(result.fetchone())

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: str,
        tx_type: str | None,
        limit: int,
        offset: int,
    ) -> tuple[list[Transaction], int]:
        params = {"user_id": user_id, "type": tx_type}
        total = (await db.execute(_COUNT_TX_SQL, params)).scalar_one()
        result = await db.execute(
            _LIST_TX_SQL, {**params, "limit": limit, "offset": offset}
        )
        return [_row_to_transaction(row) for row in result.fetchall()], int(total)
