"""Auth API router: register, login, logout, me.

All endpoints return ApiResponse. request_id is read from
request.state (injected by RequestLogMiddleware).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_common.database import get_db_session
from src.sb_common.response import ApiResponse, respond
from src.sb_gateway.auth.dependencies import get_current_user
from src.sb_gateway.auth.jwt_handler import token_lifetime_seconds
from src.sb_gateway.user.db_models import UserModel
from src.sb_gateway.user.schemas import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserInfo,
)
from src.sb_gateway.user.service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])
_service = UserService()


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="User registration",
)
async def register(
    request: Request,
    body: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    async with db.begin():
        user, token = await _service.register(
            body.email,
            body.username,
            body.password,
            body.first_name,
            body.last_name,
            db,
        )
    await db.refresh(user)  # pick up server-side created_at

    data = AuthResponse(
        user=UserInfo.from_model(user),
        token=token,
        expires_in=token_lifetime_seconds(),
    )
    return respond(request, data.model_dump(), "User registered successfully")


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="User login",
)
async def login(
    request: Request,
    body: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    user, token = await _service.login(body.email, body.password, db)

    data = AuthResponse(
        user=UserInfo.from_model(user),
        token=token,
        expires_in=token_lifetime_seconds(),
    )
    return respond(request, data.model_dump(), "Login successful")


@router.post(
    "/logout",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Logout (stateless — the client discards its token)",
)
async def logout(request: Request) -> ApiResponse:
    return respond(request, None, "Logout successful")


@router.get(
    "/me",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Current user",
)
async def me(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
) -> ApiResponse:
    return respond(request, UserInfo.from_model(current_user).model_dump())
