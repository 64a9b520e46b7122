"""sb_event REST endpoints (public — no token required).

GET /events                               — list with filters + page/limit pagination
GET /events/{event_id}                    — full detail
GET /events/{event_id}/odds-history       — posted odds, newest first
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.sb_common.database import get_db_session
from src.sb_common.enums import EventStatus, Sport
from src.sb_common.redis_client import get_redis
from src.sb_common.response import ApiResponse, respond
from src.sb_event.application.service import EventApplicationService
from src.sb_event.infrastructure.cache import EventCache

router = APIRouter(prefix="/events", tags=["events"])


def get_event_service(request: Request) -> EventApplicationService:
    client = get_redis(request)
    cache = EventCache(client, settings.EVENT_CACHE_TTL_SECONDS) if client is not None else None
    return EventApplicationService(cache=cache)


@router.get("")
async def list_events(
    request: Request,
    service: Annotated[EventApplicationService, Depends(get_event_service)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    sport: Sport | None = Query(None),
    status: EventStatus | None = Query(None),
    search: str | None = Query(None, max_length=100, description="Matches title or description"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
) -> ApiResponse:
    result = await service.list_events(
        db,
        sport.value if sport else None,
        status.value if status else None,
        search,
        page,
        limit,
    )
    return respond(request, result.model_dump())


@router.get("/{event_id}")
async def get_event(
    event_id: uuid.UUID,
    request: Request,
    service: Annotated[EventApplicationService, Depends(get_event_service)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await service.get_event(db, str(event_id))
    return respond(request, result.model_dump())


@router.get("/{event_id}/odds-history")
async def get_odds_history(
    event_id: uuid.UUID,
    request: Request,
    service: Annotated[EventApplicationService, Depends(get_event_service)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    limit: int = Query(50, ge=1),
) -> ApiResponse:
    result = await service.get_odds_history(db, str(event_id), limit)
    return respond(request, result.model_dump())
