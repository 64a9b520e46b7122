"""Domain models for sb_event — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class EventResult:
    home_score: int
    away_score: int
    winner: str                      # Prediction value: home / away / draw


@dataclass
class Event:
    id: str
    title: str
    description: str | None
    sport: str
    start_time: datetime
    end_time: datetime | None
    status: str
    home_odds: Decimal
    away_odds: Decimal
    draw_odds: Decimal | None        # None = no draw market
    result: EventResult | None       # present iff status == completed
    created_at: datetime
    updated_at: datetime

    def odds_for(self, prediction: str) -> Decimal | None:
        """Odds posted for a predicted outcome, or None when that market is absent."""
        return {
            "home": self.home_odds,
            "away": self.away_odds,
            "draw": self.draw_odds,
        }.get(prediction)


@dataclass
class OddsSnapshot:
    id: int                          # BIGSERIAL
    event_id: str
    home_odds: Decimal
    away_odds: Decimal
    draw_odds: Decimal | None
    recorded_at: datetime
