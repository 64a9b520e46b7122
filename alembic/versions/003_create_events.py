"""003: create events table

Revision ID: 003
Revises: 002
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE events (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            title           VARCHAR(200)    NOT NULL,
            description     TEXT,
            sport           VARCHAR(20)     NOT NULL,
            start_time      TIMESTAMPTZ     NOT NULL,
            end_time        TIMESTAMPTZ,
            status          VARCHAR(20)     NOT NULL DEFAULT 'upcoming',
            home_odds       NUMERIC(6,2)    NOT NULL,
            away_odds       NUMERIC(6,2)    NOT NULL,
            draw_odds       NUMERIC(6,2),
            home_score      INTEGER,
            away_score      INTEGER,
            winner          VARCHAR(10),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_events_sport CHECK (sport IN (
                'football', 'basketball', 'tennis', 'baseball',
                'hockey', 'soccer', 'cricket'
            )),
            CONSTRAINT ck_events_status CHECK (
                status IN ('upcoming', 'live', 'completed', 'cancelled')
            ),
            CONSTRAINT ck_events_odds_positive CHECK (
                home_odds > 0 AND away_odds > 0
                AND (draw_odds IS NULL OR draw_odds > 0)
            ),
            CONSTRAINT ck_events_winner CHECK (
                winner IS NULL OR winner IN ('home', 'away', 'draw')
            ),
            CONSTRAINT ck_events_result_iff_completed CHECK (
                (status = 'completed')
                = (winner IS NOT NULL AND home_score IS NOT NULL AND away_score IS NOT NULL)
            ),
            CONSTRAINT ck_events_schedule CHECK (end_time IS NULL OR end_time > start_time)
        );
    """)
    op.execute("CREATE INDEX idx_events_start_time ON events (start_time DESC, id DESC);")
    op.execute("CREATE INDEX idx_events_sport_status ON events (sport, status);")
    op.execute("""
        CREATE TRIGGER trg_events_updated_at
            BEFORE UPDATE ON events
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS events CASCADE;")
