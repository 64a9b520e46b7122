"""Pydantic schemas for sb_event API responses.

Odds leave the API as JSON numbers (two decimals); internally they stay Decimal.
"""

from pydantic import BaseModel

from src.sb_common.pagination import PageMeta
from src.sb_event.domain.models import Event, OddsSnapshot


class OddsOut(BaseModel):
    home: float
    away: float
    draw: float | None
    last_updated: str


class EventResultOut(BaseModel):
    home_score: int
    away_score: int
    winner: str
    completed_at: str


class EventDetail(BaseModel):
    id: str
    title: str
    description: str | None
    sport: str
    start_time: str
    end_time: str | None
    status: str
    odds: OddsOut
    result: EventResultOut | None
    created_at: str
    updated_at: str

    @classmethod
    def from_domain(cls, e: Event) -> "EventDetail":
        result = None
        if e.result is not None:
            result = EventResultOut(
                home_score=e.result.home_score,
                away_score=e.result.away_score,
                winner=e.result.winner,
                completed_at=e.updated_at.isoformat(),
            )
        return cls(
            id=e.id,
            title=e.title,
            description=e.description,
            sport=e.sport,
            start_time=e.start_time.isoformat(),
            end_time=e.end_time.isoformat() if e.end_time else None,
            status=e.status,
            odds=OddsOut(
                home=float(e.home_odds),
                away=float(e.away_odds),
                draw=float(e.draw_odds) if e.draw_odds is not None else None,
                last_updated=e.updated_at.isoformat(),
            ),
            result=result,
            created_at=e.created_at.isoformat(),
            updated_at=e.updated_at.isoformat(),
        )


class EventListResponse(BaseModel):
    items: list[EventDetail]
    pagination: PageMeta


class OddsHistoryItem(BaseModel):
    id: int
    home: float
    away: float
    draw: float | None
    recorded_at: str

    @classmethod
    def from_domain(cls, s: OddsSnapshot) -> "OddsHistoryItem":
        return cls(
            id=s.id,
            home=float(s.home_odds),
            away=float(s.away_odds),
            draw=float(s.draw_odds) if s.draw_odds is not None else None,
            recorded_at=s.recorded_at.isoformat(),
        )


class OddsHistoryResponse(BaseModel):
    event_id: str
    items: list[OddsHistoryItem]
