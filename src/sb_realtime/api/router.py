"""WebSocket endpoint for odds, event status and balance pushes.

Client → server (JSON text frames):
  {"type": "join-user", "user_id": "...", "token": "..."}   own balance updates
  {"type": "join-event", "event_id": "..."}                 odds/status for one event
  {"type": "ping"}
"""

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from src.sb_common.errors import AppError
from src.sb_gateway.user.service import UserService
from src.sb_realtime.hub import NotificationHub
from src.sb_realtime.messages import (
    JoinEventCommand,
    JoinUserCommand,
    event_room,
    inbound_adapter,
    user_room,
)

logger = logging.getLogger("sb.realtime")

router = APIRouter()
_users = UserService()


async def _join_user(
    ws: WebSocket, hub: NotificationHub, conn_id: str, cmd: JoinUserCommand
) -> None:
    database = ws.app.state.database
    async with database.session_factory() as db:
        user = await _users.authenticate(cmd.token, db)
    if str(user.id) != cmd.user_id:
        await ws.send_json({
            "type": "error",
            "error": "FORBIDDEN",
            "message": "Token does not belong to this user",
        })
        return
    room = user_room(cmd.user_id)
    await hub.join(conn_id, room)
    await ws.send_json({"type": "joined", "room": room})


async def _join_event(
    ws: WebSocket, hub: NotificationHub, conn_id: str, cmd: JoinEventCommand
) -> None:
    room = event_room(cmd.event_id)
    await hub.join(conn_id, room)
    await ws.send_json({"type": "joined", "room": room})


@router.websocket("/ws")
async def websocket_updates(ws: WebSocket) -> None:
    hub: NotificationHub = ws.app.state.hub

    if hub.is_full:
        await ws.close(code=4002, reason="Too many connections")
        return

    try:
        conn_id = await hub.connect(ws)
    except RuntimeError:
        await ws.close(code=4002, reason="Too many connections")
        return

    try:
        while True:
            raw = await ws.receive_text()
            try:
                cmd = inbound_adapter.validate_json(raw)
            except ValidationError:
                await ws.send_json({
                    "type": "error",
                    "error": "INVALID_INPUT",
                    "message": "Unrecognized message",
                })
                continue

            try:
                if isinstance(cmd, JoinUserCommand):
                    await _join_user(ws, hub, conn_id, cmd)
                elif isinstance(cmd, JoinEventCommand):
                    await _join_event(ws, hub, conn_id, cmd)
                else:
                    await ws.send_json({"type": "pong"})
            except AppError as exc:
                await ws.send_json({"type": "error", "error": exc.error, "message": exc.message})
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WS connection %s failed", conn_id)
    finally:
        await hub.disconnect(conn_id)
