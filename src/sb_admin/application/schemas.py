"""Pydantic schemas for the admin API."""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from src.sb_common.datetime_utils import as_utc
from src.sb_common.enums import EventStatus, Prediction, Sport

# NUMERIC(6,2): up to 9999.99
OddsValue = Decimal


def _odds_field(default: Any = ...) -> Any:
    return Field(default, gt=0, max_digits=6, decimal_places=2)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class OddsIn(BaseModel):
    home: OddsValue = _odds_field()
    away: OddsValue = _odds_field()
    draw: OddsValue | None = _odds_field(None)


class CreateEventRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=2000)
    sport: Sport
    start_time: datetime
    end_time: datetime | None = None
    odds: OddsIn

    @field_validator("start_time", "end_time")
    @classmethod
    def naive_is_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)

    @model_validator(mode="after")
    def end_after_start(self) -> "CreateEventRequest":
        if self.end_time is not None and self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class OddsPatch(BaseModel):
    """Any subset of the three prices. ``draw: null`` withdraws the draw market."""

    home: OddsValue | None = _odds_field(None)
    away: OddsValue | None = _odds_field(None)
    draw: OddsValue | None = _odds_field(None)


class ResultIn(BaseModel):
    home_score: int = Field(..., ge=0)
    away_score: int = Field(..., ge=0)
    winner: Prediction


class UpdateEventRequest(BaseModel):
    """Partial update: only fields present in the body are applied."""

    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=2000)
    start_time: datetime | None = None
    end_time: datetime | None = None
    status: EventStatus | None = None
    odds: OddsPatch | None = None
    result: ResultIn | None = None

    @field_validator("start_time", "end_time")
    @classmethod
    def naive_is_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class RecentBet(BaseModel):
    type: str = "bet_placed"
    bet_id: str
    user_id: str
    username: str
    event_id: str
    event_title: str
    amount_cents: int
    timestamp: str


class PlatformStats(BaseModel):
    total_users: int
    total_events: int
    total_bets: int
    total_volume_cents: int
    total_volume_display: str
    active_events: int
    recent_activity: list[RecentBet]
    realtime: dict[str, Any] | None = None
