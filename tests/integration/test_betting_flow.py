"""End-to-end betting flow against a live database.

Pre-condition: alembic upgrade head (schema + seed data).
"""

import pytest
from httpx import AsyncClient

from tests.integration.conftest import admin_token, register

pytestmark = pytest.mark.asyncio(loop_scope="session")


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


async def _create_event(client: AsyncClient, admin: str, draw: str | None = "3.00") -> str:
    resp = await client.post(
        "/api/v1/admin/events",
        headers=_auth(admin),
        json={
            "title": "Integration FC vs Fixture United",
            "sport": "soccer",
            "start_time": "2030-01-01T15:00:00Z",
            "odds": {"home": "2.00", "away": "3.50", "draw": draw},
        },
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]["id"]


async def test_register_login_me_round_trip(client: AsyncClient) -> None:
    user_id, token = await register(client)
    resp = await client.get("/api/v1/auth/me", headers=_auth(token))
    assert resp.status_code == 200
    assert resp.json()["data"]["user_id"] == user_id
    assert resp.json()["data"]["balance_cents"] == 100000


async def test_place_bet_conserves_balance(client: AsyncClient) -> None:
    admin = await admin_token(client)
    event_id = await _create_event(client, admin)
    _, token = await register(client)

    resp = await client.post(
        "/api/v1/bets",
        headers=_auth(token),
        json={"event_id": event_id, "amount_cents": 2500, "prediction": "away"},
    )
    assert resp.status_code == 201, resp.text
    bet = resp.json()["data"]["bet"]
    assert bet["potential_winnings_cents"] == 8750
    assert resp.json()["data"]["new_balance_cents"] == 97500

    ledger = (await client.get(
        "/api/v1/users/transactions", headers=_auth(token), params={"type": "bet"}
    )).json()["data"]
    assert ledger["pagination"]["total"] == 1
    row = ledger["items"][0]
    assert row["amount_cents"] == -2500
    assert row["balance_before_cents"] == 100000
    assert row["balance_after_cents"] == 97500
    assert row["reference_id"] == bet["id"]

    bets = (await client.get("/api/v1/bets", headers=_auth(token))).json()["data"]
    assert bets["items"][0]["event_title"] == "Integration FC vs Fixture United"


async def test_insufficient_funds_leaves_no_rows(client: AsyncClient) -> None:
    admin = await admin_token(client)
    event_id = await _create_event(client, admin)
    _, token = await register(client)

    resp = await client.post(
        "/api/v1/bets",
        headers=_auth(token),
        json={"event_id": event_id, "amount_cents": 100001, "prediction": "home"},
    )
    assert resp.status_code == 422
    assert resp.json()["error"] == "INSUFFICIENT_FUNDS"

    bets = (await client.get("/api/v1/bets", headers=_auth(token))).json()["data"]
    assert bets["pagination"]["total"] == 0
    balance = (await client.get("/api/v1/users/balance", headers=_auth(token))).json()["data"]
    assert balance["balance_cents"] == 100000


async def test_draw_without_market(client: AsyncClient) -> None:
    admin = await admin_token(client)
    event_id = await _create_event(client, admin, draw=None)
    _, token = await register(client)

    resp = await client.post(
        "/api/v1/bets",
        headers=_auth(token),
        json={"event_id": event_id, "amount_cents": 100, "prediction": "draw"},
    )
    assert resp.status_code == 422
    assert resp.json()["error"] == "NO_ODDS_FOR_OUTCOME"


async def test_event_lifecycle_closes_betting(client: AsyncClient) -> None:
    admin = await admin_token(client)
    event_id = await _create_event(client, admin)
    _, token = await register(client)

    resp = await client.put(
        f"/api/v1/admin/events/{event_id}", headers=_auth(admin), json={"status": "live"}
    )
    assert resp.status_code == 200, resp.text

    resp = await client.put(
        f"/api/v1/admin/events/{event_id}",
        headers=_auth(admin),
        json={"odds": {"home": "1.75"}},
    )
    assert resp.json()["data"]["odds"]["home"] == 1.75
    history = (await client.get(f"/api/v1/events/{event_id}/odds-history")).json()["data"]
    assert [item["home"] for item in history["items"]] == [1.75, 2.0]

    resp = await client.put(
        f"/api/v1/admin/events/{event_id}",
        headers=_auth(admin),
        json={"status": "completed", "result": {"home_score": 2, "away_score": 0, "winner": "home"}},
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["data"]["result"]["winner"] == "home"

    resp = await client.post(
        "/api/v1/bets",
        headers=_auth(token),
        json={"event_id": event_id, "amount_cents": 100, "prediction": "home"},
    )
    assert resp.status_code == 422
    assert resp.json()["error"] == "EVENT_NOT_AVAILABLE"

    resp = await client.put(
        f"/api/v1/admin/events/{event_id}", headers=_auth(admin), json={"status": "live"}
    )
    assert resp.status_code == 422
    assert resp.json()["error"] == "INVALID_STATUS_TRANSITION"


async def test_non_admin_cannot_create_events(client: AsyncClient) -> None:
    _, token = await register(client)
    resp = await client.post(
        "/api/v1/admin/events",
        headers=_auth(token),
        json={
            "title": "Nope",
            "sport": "tennis",
            "start_time": "2030-01-01T15:00:00Z",
            "odds": {"home": "1.90", "away": "1.90"},
        },
    )
    assert resp.status_code == 403
