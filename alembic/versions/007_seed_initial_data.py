"""007: seed admin account and sample events

Revision ID: 007
Revises: 006
Create Date: 2026-10-18
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

from src.sb_gateway.auth.password import hash_password

revision: str = "007"
down_revision: Union[str, None] = "006"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ADMIN_EMAIL = "admin@sportsbetting.com"
ADMIN_BALANCE_CENTS = 1_000_000  # 10,000.00


def upgrade() -> None:
    bind = op.get_bind()
    admin_id = bind.execute(
        sa.text("""
            INSERT INTO users
                (email, username, password_hash, first_name, last_name, balance, role)
            VALUES
                (:email, 'admin', :password_hash, 'Admin', 'User', :balance, 'admin')
            RETURNING id
        """),
        {
            "email": ADMIN_EMAIL,
            "password_hash": hash_password("admin123"),
            "balance": ADMIN_BALANCE_CENTS,
        },
    ).scalar_one()
    bind.execute(
        sa.text("""
            INSERT INTO transactions
                (user_id, type, amount, description, balance_before, balance_after)
            VALUES
                (:user_id, 'deposit', :amount, 'Opening balance', 0, :amount)
        """),
        {"user_id": admin_id, "amount": ADMIN_BALANCE_CENTS},
    )

    op.execute("""
        INSERT INTO events
            (title, description, sport, start_time, end_time,
             home_odds, away_odds, draw_odds)
        VALUES
            ('Manchester United vs Liverpool',
             'Premier League fixture at Old Trafford',
             'football', NOW() + INTERVAL '1 day', NOW() + INTERVAL '1 day 2 hours',
             2.50, 2.80, 3.20),
            ('Lakers vs Warriors',
             'NBA regular season game',
             'basketball', NOW() + INTERVAL '2 days', NOW() + INTERVAL '2 days 3 hours',
             1.80, 2.10, NULL),
            ('Djokovic vs Nadal',
             'Grand Slam semi-final',
             'tennis', NOW() + INTERVAL '3 days', NULL,
             1.90, 1.90, NULL);
    """)
    op.execute("""
        INSERT INTO odds_history (event_id, home_odds, away_odds, draw_odds)
        SELECT id, home_odds, away_odds, draw_odds FROM events;
    """)


def downgrade() -> None:
    op.execute("""
        DELETE FROM events WHERE title IN (
            'Manchester United vs Liverpool', 'Lakers vs Warriors', 'Djokovic vs Nadal'
        );
    """)
    op.execute(f"DELETE FROM users WHERE email = '{ADMIN_EMAIL}';")
