"""Admin REST API — every endpoint requires the admin role.

POST /admin/events               — create an event with opening odds
PUT  /admin/events/{event_id}    — partial update (schedule, status, odds, result)
GET  /admin/stats                — platform totals and recent betting activity
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.sb_admin.application.schemas import CreateEventRequest, UpdateEventRequest
from src.sb_admin.application.service import AdminService
from src.sb_common.database import get_db_session
from src.sb_common.redis_client import get_redis
from src.sb_common.response import ApiResponse, respond
from src.sb_event.infrastructure.cache import EventCache
from src.sb_gateway.auth.authorization import require_admin
from src.sb_gateway.user.db_models import UserModel
from src.sb_realtime.hub import get_notification_hub

router = APIRouter(prefix="/admin", tags=["admin"])


def get_admin_service(request: Request) -> AdminService:
    client = get_redis(request)
    cache = EventCache(client, settings.EVENT_CACHE_TTL_SECONDS) if client is not None else None
    return AdminService(cache=cache, hub=get_notification_hub(request))


@router.post("/events", status_code=status.HTTP_201_CREATED)
async def create_event(
    body: CreateEventRequest,
    admin: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[AdminService, Depends(get_admin_service)],
    request: Request,
) -> ApiResponse:
    data = await service.create_event(db, body.model_dump())
    return respond(request, data.model_dump(), "Event created successfully")


@router.put("/events/{event_id}")
async def update_event(
    event_id: uuid.UUID,
    body: UpdateEventRequest,
    admin: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[AdminService, Depends(get_admin_service)],
    request: Request,
) -> ApiResponse:
    data = await service.update_event(
        db, str(event_id), body.model_dump(exclude_unset=True)
    )
    return respond(request, data.model_dump(), "Event updated successfully")


@router.get("/stats")
async def get_platform_stats(
    admin: Annotated[UserModel, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[AdminService, Depends(get_admin_service)],
    request: Request,
) -> ApiResponse:
    data = await service.get_platform_stats(db)
    return respond(request, data.model_dump())
