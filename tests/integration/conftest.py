"""Integration-test fixtures (need PostgreSQL + Redis, migrated and seeded).

Run with: RUN_INTEGRATION=1 pytest tests/integration

All integration tests share a single event loop and one app lifespan so the
engine pool created at startup stays valid for the whole session.
"""

import os
import uuid

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.main import app

if os.environ.get("RUN_INTEGRATION") != "1":
    collect_ignore_glob = ["test_*.py"]


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped client with the real lifespan (DB, Redis, hub)."""
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac


async def register(client: AsyncClient) -> tuple[str, str]:
    """Register a fresh user; return (user_id, token)."""
    uid = uuid.uuid4().hex[:8]
    resp = await client.post("/api/v1/auth/register", json={
        "email": f"bettor_{uid}@example.com",
        "username": f"bettor_{uid}",
        "password": "TestPass1",
        "first_name": "Test",
        "last_name": "Bettor",
    })
    assert resp.status_code == 201, resp.text
    data = resp.json()["data"]
    return data["user"]["user_id"], data["token"]


async def admin_token(client: AsyncClient) -> str:
    resp = await client.post("/api/v1/auth/login", json={
        "email": "admin@sportsbetting.com",
        "password": "admin123",
    })
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]["token"]
