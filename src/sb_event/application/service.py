"""EventApplicationService — read side of the event catalog.

All methods are read-only; no commit/rollback needed.
The caller (router) passes db session; service delegates to repository.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_common.errors import EventNotFoundError
from src.sb_common.pagination import PageMeta, clamp_limit, page_offset
from src.sb_event.application.schemas import (
    EventDetail,
    EventListResponse,
    OddsHistoryItem,
    OddsHistoryResponse,
)
from src.sb_event.domain.repository import EventRepositoryProtocol
from src.sb_event.infrastructure.cache import EventCache
from src.sb_event.infrastructure.persistence import EventRepository


class EventApplicationService:
    def __init__(
        self,
        repo: EventRepositoryProtocol | None = None,
        cache: EventCache | None = None,
    ) -> None:
        self._repo: EventRepositoryProtocol = repo or EventRepository()
        self._cache = cache

    async def list_events(
        self,
        db: AsyncSession,
        sport: str | None,
        status: str | None,
        search: str | None,
        page: int,
        limit: int,
    ) -> EventListResponse:
        page = max(page, 1)
        limit = clamp_limit(limit)
        search = search.strip() if search else None
        events, total = await self._repo.list_events(
            db, sport, status, search or None, limit, page_offset(page, limit)
        )
        return EventListResponse(
            items=[EventDetail.from_domain(e) for e in events],
            pagination=PageMeta.build(page, limit, total),
        )

    async def get_event(self, db: AsyncSession, event_id: str) -> EventDetail:
        if self._cache is not None:
            cached = await self._cache.get(event_id)
            if cached is not None:
                return cached

        event = await self._repo.get_event_by_id(db, event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        detail = EventDetail.from_domain(event)

        if self._cache is not None:
            await self._cache.set(detail)
        return detail

    async def get_odds_history(
        self, db: AsyncSession, event_id: str, limit: int
    ) -> OddsHistoryResponse:
        event = await self._repo.get_event_by_id(db, event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        snapshots = await self._repo.list_odds_history(db, event_id, clamp_limit(limit))
        return OddsHistoryResponse(
            event_id=event_id,
            items=[OddsHistoryItem.from_domain(s) for s in snapshots],
        )
