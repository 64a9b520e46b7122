"""Pydantic schemas for sb_wager request/response."""

import uuid
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, model_validator

from src.sb_common.cents import cents_to_display, units_to_cents
from src.sb_common.enums import Prediction
from src.sb_common.pagination import PageMeta
from src.sb_wager.domain.models import Bet


class PlaceBetRequest(BaseModel):
    """Bet slip. ``amount`` (currency units) is accepted in place of ``amount_cents``."""

    event_id: uuid.UUID = Field(..., validation_alias=AliasChoices("event_id", "eventId"))
    amount_cents: int = Field(..., gt=0, description="Stake in cents")
    prediction: Prediction

    @model_validator(mode="before")
    @classmethod
    def amount_in_units(cls, data: Any) -> Any:
        if isinstance(data, dict) and "amount_cents" not in data and "amount" in data:
            data = {**data, "amount_cents": units_to_cents(data["amount"])}
        return data


class BetOut(BaseModel):
    id: str
    event_id: str
    event_title: str | None
    amount_cents: int
    amount_display: str
    odds: float
    prediction: str
    status: str
    potential_winnings_cents: int
    potential_winnings_display: str
    actual_winnings_cents: int | None
    placed_at: str | None
    settled_at: str | None

    @classmethod
    def from_domain(cls, b: Bet) -> "BetOut":
        return cls(
            id=b.id,
            event_id=b.event_id,
            event_title=b.event_title,
            amount_cents=b.amount,
            amount_display=cents_to_display(b.amount),
            odds=float(b.odds),
            prediction=b.prediction,
            status=b.status,
            potential_winnings_cents=b.potential_winnings,
            potential_winnings_display=cents_to_display(b.potential_winnings),
            actual_winnings_cents=b.actual_winnings,
            placed_at=b.placed_at.isoformat() if b.placed_at else None,
            settled_at=b.settled_at.isoformat() if b.settled_at else None,
        )


class PlaceBetResponse(BaseModel):
    bet: BetOut
    new_balance_cents: int
    new_balance_display: str


class BetListResponse(BaseModel):
    items: list[BetOut]
    pagination: PageMeta
