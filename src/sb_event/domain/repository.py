"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_event.domain.models import Event, OddsSnapshot


class EventRepositoryProtocol(Protocol):
    async def list_events(
        self,
        db: AsyncSession,
        sport: str | None,
        status: str | None,
        search: str | None,
        limit: int,
        offset: int,
    ) -> tuple[list[Event], int]: ...

    async def get_event_by_id(
        self, db: AsyncSession, event_id: str
    ) -> Event | None: ...

    async def create_event(
        self,
        db: AsyncSession,
        title: str,
        description: str | None,
        sport: str,
        start_time: datetime,
        end_time: datetime | None,
        home_odds: Decimal,
        away_odds: Decimal,
        draw_odds: Decimal | None,
    ) -> Event: ...

    async def update_event(
        self, db: AsyncSession, event_id: str, columns: dict[str, Any]
    ) -> Event | None: ...

    async def record_odds(self, db: AsyncSession, event: Event) -> None: ...

    async def list_odds_history(
        self, db: AsyncSession, event_id: str, limit: int
    ) -> list[OddsSnapshot]: ...
