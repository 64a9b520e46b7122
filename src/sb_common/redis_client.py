"""Redis client factory — used for the event detail cache only.

NOT used for balances (those go through PostgreSQL).
The client is created in the application lifespan and kept on app.state.redis.
"""

import redis.asyncio as aioredis
from fastapi import Request


def create_redis(url: str) -> aioredis.Redis:
    """Create the Redis connection pool."""
    return aioredis.from_url(url, decode_responses=True)


async def close_redis(client: aioredis.Redis | None) -> None:
    """Close the Redis connection pool."""
    if client is not None:
        await client.aclose()


def get_redis(request: Request) -> aioredis.Redis | None:
    return getattr(request.app.state, "redis", None)
