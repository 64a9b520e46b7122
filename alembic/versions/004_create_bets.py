"""004: create bets table

Revision ID: 004
Revises: 003
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE bets (
            id                  UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id             UUID            NOT NULL REFERENCES users (id) ON DELETE CASCADE,
            event_id            UUID            NOT NULL REFERENCES events (id) ON DELETE CASCADE,
            amount              BIGINT          NOT NULL,
            odds                NUMERIC(6,2)    NOT NULL,
            prediction          VARCHAR(10)     NOT NULL,
            status              VARCHAR(20)     NOT NULL DEFAULT 'pending',
            potential_winnings  BIGINT          NOT NULL,
            actual_winnings     BIGINT,
            placed_at           TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            settled_at          TIMESTAMPTZ,
            CONSTRAINT ck_bets_amount     CHECK (amount > 0),
            CONSTRAINT ck_bets_odds       CHECK (odds > 0),
            CONSTRAINT ck_bets_prediction CHECK (prediction IN ('home', 'away', 'draw')),
            CONSTRAINT ck_bets_status     CHECK (status IN ('pending', 'won', 'lost', 'cancelled'))
        );
    """)
    op.execute("CREATE INDEX idx_bets_user_placed ON bets (user_id, placed_at DESC);")
    op.execute("CREATE INDEX idx_bets_event ON bets (event_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS bets CASCADE;")
