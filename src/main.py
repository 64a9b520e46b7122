"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError

from config.settings import settings
from src.sb_account.api.router import router as account_router
from src.sb_admin.api.router import router as admin_router
from src.sb_common.database import Database
from src.sb_common.errors import AppError, InternalError, InvalidInputError
from src.sb_common.redis_client import close_redis, create_redis
from src.sb_common.response import error_response
from src.sb_event.api.router import router as event_router
from src.sb_gateway.api.router import router as auth_router
from src.sb_gateway.middleware.request_log import RequestLogMiddleware
from src.sb_realtime.api.router import router as realtime_router
from src.sb_realtime.hub import NotificationHub
from src.sb_wager.api.router import router as wager_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("sb.app")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: build DB, Redis and the notification hub. Shutdown: release them."""
    database = Database.from_settings(settings)
    await database.ping()
    app.state.database = database

    redis_client = create_redis(settings.REDIS_URL)
    try:
        await redis_client.ping()
    except RedisError as exc:
        logger.warning("Redis unavailable, event cache disabled: %s", exc)
        await close_redis(redis_client)
        redis_client = None
    app.state.redis = redis_client

    hub = NotificationHub(
        max_connections=settings.WS_MAX_CONNECTIONS,
        send_timeout=settings.WS_SEND_TIMEOUT_SECONDS,
    )
    app.state.hub = hub

    yield

    await hub.close()
    await close_redis(app.state.redis)
    await database.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLogMiddleware)


def _envelope(request: Request, exc: AppError, data: object = None) -> JSONResponse:
    resp = error_response(exc.code, exc.error, exc.message, data)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(status_code=exc.http_status, content=resp.model_dump())


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _envelope(request, exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    return _envelope(request, InvalidInputError("Validation failed"), {"errors": details})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error on [%s] %s %s",
        request.method,
        request.url.path,
        getattr(request.state, "request_id", "-"),
    )
    detail = f"{type(exc).__name__}: {exc}" if settings.DEBUG else "Internal server error"
    return _envelope(request, InternalError(detail))


app.include_router(auth_router, prefix="/api/v1")
app.include_router(account_router, prefix="/api/v1")
app.include_router(event_router, prefix="/api/v1")
app.include_router(wager_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")
app.include_router(realtime_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
