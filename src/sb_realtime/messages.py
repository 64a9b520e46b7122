"""Wire messages for the real-time channel.

Outbound (server → client) is a tagged union on ``type``:
  odds_update, event_status_update, balance_update
Inbound (client → server):
  join-user (authenticated), join-event (public), ping
"""

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from src.sb_common.cents import cents_to_display
from src.sb_common.datetime_utils import utc_now
from src.sb_event.domain.models import Event


def user_room(user_id: str) -> str:
    return f"user:{user_id}"


def event_room(event_id: str) -> str:
    return f"event:{event_id}"


# ---------------------------------------------------------------------------
# Outbound
# ---------------------------------------------------------------------------


class OddsPayload(BaseModel):
    home: float
    away: float
    draw: float | None


class ResultPayload(BaseModel):
    home_score: int
    away_score: int
    winner: str


class OddsUpdateMessage(BaseModel):
    type: Literal["odds_update"] = "odds_update"
    event_id: str
    odds: OddsPayload
    timestamp: datetime = Field(default_factory=utc_now)

    @property
    def room(self) -> str:
        return event_room(self.event_id)

    @classmethod
    def for_event(cls, event: Event) -> "OddsUpdateMessage":
        return cls(
            event_id=event.id,
            odds=OddsPayload(
                home=float(event.home_odds),
                away=float(event.away_odds),
                draw=float(event.draw_odds) if event.draw_odds is not None else None,
            ),
        )


class EventStatusUpdateMessage(BaseModel):
    type: Literal["event_status_update"] = "event_status_update"
    event_id: str
    status: str
    result: ResultPayload | None = None
    timestamp: datetime = Field(default_factory=utc_now)

    @property
    def room(self) -> str:
        return event_room(self.event_id)

    @classmethod
    def for_event(cls, event: Event) -> "EventStatusUpdateMessage":
        result = None
        if event.result is not None:
            result = ResultPayload(
                home_score=event.result.home_score,
                away_score=event.result.away_score,
                winner=event.result.winner,
            )
        return cls(event_id=event.id, status=event.status, result=result)


class BalanceUpdateMessage(BaseModel):
    type: Literal["balance_update"] = "balance_update"
    user_id: str
    new_balance_cents: int
    new_balance_display: str
    timestamp: datetime = Field(default_factory=utc_now)

    @property
    def room(self) -> str:
        return user_room(self.user_id)

    @classmethod
    def for_balance(cls, user_id: str, balance_cents: int) -> "BalanceUpdateMessage":
        return cls(
            user_id=user_id,
            new_balance_cents=balance_cents,
            new_balance_display=cents_to_display(balance_cents),
        )


OutboundMessage = Annotated[
    Union[OddsUpdateMessage, EventStatusUpdateMessage, BalanceUpdateMessage],
    Field(discriminator="type"),
]

# ---------------------------------------------------------------------------
# Inbound
# ---------------------------------------------------------------------------


class JoinUserCommand(BaseModel):
    type: Literal["join-user"]
    user_id: str
    token: str


class JoinEventCommand(BaseModel):
    type: Literal["join-event"]
    event_id: str


class PingCommand(BaseModel):
    type: Literal["ping"]


InboundCommand = Annotated[
    Union[JoinUserCommand, JoinEventCommand, PingCommand],
    Field(discriminator="type"),
]

inbound_adapter: TypeAdapter[InboundCommand] = TypeAdapter(InboundCommand)
