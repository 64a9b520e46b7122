"""006: create odds_history table

Revision ID: 006
Revises: 005
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE odds_history (
            id              BIGSERIAL       PRIMARY KEY,
            event_id        UUID            NOT NULL REFERENCES events (id) ON DELETE CASCADE,
            home_odds       NUMERIC(6,2)    NOT NULL,
            away_odds       NUMERIC(6,2)    NOT NULL,
            draw_odds       NUMERIC(6,2),
            recorded_at     TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)
    op.execute(
        "CREATE INDEX idx_odds_history_event ON odds_history (event_id, recorded_at DESC);"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS odds_history CASCADE;")
