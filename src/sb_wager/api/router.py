"""sb_wager REST API — all endpoints require JWT authentication.

POST /bets              — place a bet
GET  /bets              — caller's bets, newest first
GET  /bets/{bet_id}     — one of the caller's bets
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_common.database import get_db_session
from src.sb_common.enums import BetStatus
from src.sb_common.response import ApiResponse, respond
from src.sb_gateway.auth.dependencies import get_current_user
from src.sb_gateway.user.db_models import UserModel
from src.sb_realtime.hub import get_notification_hub
from src.sb_wager.application.schemas import PlaceBetRequest
from src.sb_wager.application.service import WagerApplicationService

router = APIRouter(prefix="/bets", tags=["bets"])


def get_wager_service(request: Request) -> WagerApplicationService:
    return WagerApplicationService(notifier=get_notification_hub(request))


@router.post("", status_code=status.HTTP_201_CREATED)
async def place_bet(
    body: PlaceBetRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[WagerApplicationService, Depends(get_wager_service)],
    request: Request,
) -> ApiResponse:
    data = await service.place_bet(
        db,
        str(current_user.id),
        str(body.event_id),
        body.amount_cents,
        body.prediction.value,
    )
    return respond(request, data.model_dump(), "Bet placed successfully")


@router.get("")
async def list_bets(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[WagerApplicationService, Depends(get_wager_service)],
    request: Request,
    bet_status: BetStatus | None = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
) -> ApiResponse:
    data = await service.list_bets(
        db,
        str(current_user.id),
        bet_status.value if bet_status else None,
        page,
        limit,
    )
    return respond(request, data.model_dump())


@router.get("/{bet_id}")
async def get_bet(
    bet_id: uuid.UUID,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[WagerApplicationService, Depends(get_wager_service)],
    request: Request,
) -> ApiResponse:
    data = await service.get_bet(db, str(current_user.id), str(bet_id))
    return respond(request, data.model_dump())
