"""sb_account REST API — all endpoints require JWT authentication."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_account.application.schemas import (
    DepositRequest,
    UpdateProfileRequest,
    WithdrawRequest,
)
from src.sb_account.application.service import AccountApplicationService
from src.sb_common.database import get_db_session
from src.sb_common.enums import TransactionType
from src.sb_common.response import ApiResponse, respond
from src.sb_gateway.auth.dependencies import get_current_user
from src.sb_gateway.user.db_models import UserModel
from src.sb_realtime.hub import get_notification_hub

router = APIRouter(prefix="/users", tags=["users"])


def get_account_service(request: Request) -> AccountApplicationService:
    return AccountApplicationService(notifier=get_notification_hub(request))


@router.get("/profile")
async def get_profile(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[AccountApplicationService, Depends(get_account_service)],
    request: Request,
) -> ApiResponse:
    data = await service.get_profile(db, str(current_user.id))
    return respond(request, data.model_dump())


@router.put("/profile")
async def update_profile(
    body: UpdateProfileRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[AccountApplicationService, Depends(get_account_service)],
    request: Request,
) -> ApiResponse:
    data = await service.update_profile(
        db, str(current_user.id), body.model_dump(exclude_unset=True)
    )
    return respond(request, data.model_dump(), "Profile updated successfully")


@router.get("/balance")
async def get_balance(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[AccountApplicationService, Depends(get_account_service)],
    request: Request,
) -> ApiResponse:
    data = await service.get_balance(db, str(current_user.id))
    return respond(request, data.model_dump())


@router.get("/transactions")
async def list_transactions(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[AccountApplicationService, Depends(get_account_service)],
    request: Request,
    tx_type: TransactionType | None = Query(None, alias="type"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
) -> ApiResponse:
    data = await service.list_transactions(
        db,
        str(current_user.id),
        tx_type.value if tx_type else None,
        page,
        limit,
    )
    return respond(request, data.model_dump())


@router.post("/deposit")
async def deposit(
    body: DepositRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[AccountApplicationService, Depends(get_account_service)],
    request: Request,
) -> ApiResponse:
    data = await service.deposit(db, str(current_user.id), body.amount_cents)
    return respond(request, data.model_dump(), "Deposit successful")


@router.post("/withdraw")
async def withdraw(
    body: WithdrawRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[AccountApplicationService, Depends(get_account_service)],
    request: Request,
) -> ApiResponse:
    data = await service.withdraw(db, str(current_user.id), body.amount_cents)
    return respond(request, data.model_dump(), "Withdrawal successful")
