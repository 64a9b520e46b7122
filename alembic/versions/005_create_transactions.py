"""005: create transactions table

Revision ID: 005
Revises: 004
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE transactions (
            id              BIGSERIAL       PRIMARY KEY,
            user_id         UUID            NOT NULL REFERENCES users (id) ON DELETE CASCADE,
            type            VARCHAR(20)     NOT NULL,
            amount          BIGINT          NOT NULL,
            description     TEXT,
            balance_before  BIGINT          NOT NULL,
            balance_after   BIGINT          NOT NULL,
            reference_type  VARCHAR(20),
            reference_id    VARCHAR(64),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_transactions_type CHECK (
                type IN ('deposit', 'withdrawal', 'bet', 'win', 'refund')
            ),
            CONSTRAINT ck_transactions_balance CHECK (balance_after = balance_before + amount)
        );
    """)
    op.execute(
        "CREATE INDEX idx_transactions_user_created ON transactions (user_id, created_at DESC, id DESC);"
    )
    op.execute("COMMENT ON TABLE transactions IS 'Append-only wallet ledger';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS transactions CASCADE;")
