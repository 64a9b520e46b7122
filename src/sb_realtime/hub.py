"""Process-local broadcast hub for the real-time channel.

Connections join rooms (``user:<id>`` for balance updates, ``event:<id>`` for
odds/status updates). Delivery is best-effort: a socket that fails to receive
is dropped and the message is not replayed. A send that does not finish within
``send_timeout`` seconds counts as a failure. Sends into one room are serialized
under that room's lock, so updates for the same event arrive in the order they
were published.

The hub is constructed in the application lifespan (``app.state.hub``) and
handed to services that publish.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol

from fastapi import Request, WebSocket

from src.sb_common.datetime_utils import utc_now
from src.sb_realtime.messages import (
    BalanceUpdateMessage,
    EventStatusUpdateMessage,
    OddsUpdateMessage,
)

logger = logging.getLogger("sb.realtime")

Publishable = OddsUpdateMessage | EventStatusUpdateMessage | BalanceUpdateMessage


class Notifier(Protocol):
    async def publish(self, message: Publishable) -> int: ...


@dataclass
class ManagedConnection:
    connection_id: str
    websocket: WebSocket
    connected_at: datetime
    rooms: set[str] = field(default_factory=set)


class NotificationHub:
    def __init__(self, *, max_connections: int = 1000, send_timeout: float = 5.0) -> None:
        self._max_connections = max(1, int(max_connections))
        self._send_timeout = send_timeout
        self._connections: dict[str, ManagedConnection] = {}
        self._rooms: dict[str, set[str]] = {}
        self._room_locks: dict[str, asyncio.Lock] = {}
        self._lock = asyncio.Lock()
        self._published_total = 0
        self._send_failures = 0

    @property
    def is_full(self) -> bool:
        return len(self._connections) >= self._max_connections

    async def connect(self, websocket: WebSocket) -> str:
        await websocket.accept()
        async with self._lock:
            if len(self._connections) >= self._max_connections:
                raise RuntimeError("max_connections_exceeded")
            connection_id = str(uuid.uuid4())
            self._connections[connection_id] = ManagedConnection(
                connection_id=connection_id,
                websocket=websocket,
                connected_at=utc_now(),
            )
        logger.info("WS client connected %s (%d total)", connection_id, len(self._connections))
        return connection_id

    async def disconnect(self, connection_id: str) -> None:
        async with self._lock:
            conn = self._connections.pop(connection_id, None)
            if conn is None:
                return
            for room in conn.rooms:
                members = self._rooms.get(room)
                if members is None:
                    continue
                members.discard(connection_id)
                if not members:
                    del self._rooms[room]
                    self._room_locks.pop(room, None)
        logger.info("WS client disconnected %s (%d remaining)", connection_id, len(self._connections))

    async def join(self, connection_id: str, room: str) -> None:
        async with self._lock:
            conn = self._connections.get(connection_id)
            if conn is None:
                raise RuntimeError("connection_not_found")
            conn.rooms.add(room)
            self._rooms.setdefault(room, set()).add(connection_id)

    async def publish(self, message: Publishable) -> int:
        """Send ``message`` to every member of its room; return the delivered count."""
        room = message.room
        payload = message.model_dump(mode="json")

        async with self._lock:
            members = [
                self._connections[cid]
                for cid in self._rooms.get(room, ())
                if cid in self._connections
            ]
            room_lock = self._room_locks.setdefault(room, asyncio.Lock())

        delivered = 0
        dead_ids: list[str] = []
        async with room_lock:
            for conn in members:
                try:
                    await asyncio.wait_for(
                        conn.websocket.send_json(payload), timeout=self._send_timeout
                    )
                    delivered += 1
                except Exception as exc:
                    dead_ids.append(conn.connection_id)
                    self._send_failures += 1
                    logger.debug("WS send to %s failed: %s", conn.connection_id, exc)

        for conn_id in dead_ids:
            await self.disconnect(conn_id)

        self._published_total += 1
        return delivered

    async def close(self) -> None:
        """Close every socket; used at shutdown."""
        async with self._lock:
            connections = list(self._connections.values())
            self._connections.clear()
            self._rooms.clear()
            self._room_locks.clear()
        for conn in connections:
            try:
                await conn.websocket.close(code=1001)
            except Exception as exc:
                logger.debug("WS close of %s failed: %s", conn.connection_id, exc)

    def room_size(self, room: str) -> int:
        return len(self._rooms.get(room, ()))

    def stats(self) -> dict[str, Any]:
        return {
            "active_connections": len(self._connections),
            "rooms": len(self._rooms),
            "max_connections": self._max_connections,
            "published_total": self._published_total,
            "send_failures": self._send_failures,
        }


async def publish_quietly(notifier: Notifier | None, message: Publishable) -> None:
    """Fire-and-forget publish: never lets a notification failure reach the caller."""
    if notifier is None:
        return
    try:
        await notifier.publish(message)
    except Exception:
        logger.exception("Failed to publish %s to %s", message.type, message.room)


def get_notification_hub(request: Request) -> NotificationHub | None:
    return getattr(request.app.state, "hub", None)
