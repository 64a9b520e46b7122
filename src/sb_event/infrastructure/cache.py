"""Event detail cache (Redis, cache-aside).

  - Key: f"event:detail:{event_id}", short TTL
  - Read: cache → DB on miss → populate
  - Write: DB first, then invalidate

Redis trouble never fails a request; the catalog falls back to PostgreSQL.
Bet placement never reads odds from here.
"""

import json
import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from src.sb_event.application.schemas import EventDetail

logger = logging.getLogger("sb.event.cache")


def _key(event_id: str) -> str:
    return f"event:detail:{event_id}"


class EventCache:
    def __init__(self, client: aioredis.Redis, ttl_seconds: int) -> None:
        self._client = client
        self._ttl = ttl_seconds

    async def get(self, event_id: str) -> EventDetail | None:
        try:
            raw = await self._client.get(_key(event_id))
        except RedisError as exc:
            logger.warning("Event cache read failed for %s: %s", event_id, exc)
            return None
        if raw is None:
            return None
        return EventDetail.model_validate(json.loads(raw))

    async def set(self, detail: EventDetail) -> None:
        try:
            await self._client.set(
                _key(detail.id), json.dumps(detail.model_dump(mode="json")), ex=self._ttl
            )
        except RedisError as exc:
            logger.warning("Event cache write failed for %s: %s", detail.id, exc)

    async def invalidate(self, event_id: str) -> None:
        try:
            await self._client.delete(_key(event_id))
        except RedisError as exc:
            logger.warning("Event cache invalidate failed for %s: %s", event_id, exc)
