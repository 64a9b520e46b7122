"""Bet domain model — pure dataclass, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class Bet:
    id: str
    user_id: str
    event_id: str
    amount: int                      # stake in cents, > 0
    odds: Decimal                    # frozen at placement
    prediction: str                  # home / away / draw
    status: str                      # pending / won / lost / cancelled
    potential_winnings: int          # floor(amount * odds), frozen at placement
    actual_winnings: int | None = None
    placed_at: datetime | None = None
    settled_at: datetime | None = None
    event_title: str | None = None   # populated by list/get queries (JOIN events)
