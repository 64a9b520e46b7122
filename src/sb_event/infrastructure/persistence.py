"""EventRepository — concrete implementation of EventRepositoryProtocol.

All queries use raw text() SQL (no ORM).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_event.domain.models import Event, EventResult, OddsSnapshot

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_EVENT_COLUMNS = """
    id, title, description, sport, start_time, end_time, status,
    home_odds, away_odds, draw_odds,
    home_score, away_score, winner,
    created_at, updated_at
"""

_GET_EVENT_SQL = text(f"""
    SELECT {_EVENT_COLUMNS}
    FROM events
    WHERE id = :event_id
""")

_FILTER_CLAUSE = """
    WHERE
        (CAST(:sport AS TEXT) IS NULL OR sport = CAST(:sport AS TEXT))
        AND (CAST(:status AS TEXT) IS NULL OR status = CAST(:status AS TEXT))
        AND (
            CAST(:pattern AS TEXT) IS NULL
            OR title ILIKE CAST(:pattern AS TEXT)
            OR description ILIKE CAST(:pattern AS TEXT)
        )
"""

_COUNT_EVENTS_SQL = text(f"SELECT COUNT(*) AS total FROM events {_FILTER_CLAUSE}")

_LIST_EVENTS_SQL = text(f"""
    SELECT {_EVENT_COLUMNS}
    FROM events
    {_FILTER_CLAUSE}
    ORDER BY start_time DESC, id DESC
    LIMIT :limit OFFSET :offset
""")

_INSERT_EVENT_SQL = text(f"""
    INSERT INTO events
        (title, description, sport, start_time, end_time,
         home_odds, away_odds, draw_odds)
    VALUES
        (:title, :description, :sport, :start_time, :end_time,
         :home_odds, :away_odds, :draw_odds)
    RETURNING {_EVENT_COLUMNS}
""")

_INSERT_ODDS_HISTORY_SQL = text("""
    INSERT INTO odds_history (event_id, home_odds, away_odds, draw_odds)
    VALUES (:event_id, :home_odds, :away_odds, :draw_odds)
""")

_LIST_ODDS_HISTORY_SQL = text("""
    SELECT id, event_id, home_odds, away_odds, draw_odds, recorded_at
    FROM odds_history
    WHERE event_id = :event_id
    ORDER BY recorded_at DESC, id DESC
    LIMIT :limit
""")

# Columns an admin update may touch. Keys are the only identifiers ever
# interpolated into UPDATE SQL; values always travel as bind parameters.
UPDATABLE_COLUMNS: frozenset[str] = frozenset({
    "title", "description", "start_time", "end_time", "status",
    "home_odds", "away_odds", "draw_odds",
    "home_score", "away_score", "winner",
})

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _row_to_event(row: Any) -> Event:
    result = None
    if row.winner is not None:
        result = EventResult(
            home_score=row.home_score,
            away_score=row.away_score,
            winner=row.winner,
        )
    return Event(
        id=str(row.id),
        title=row.title,
        description=row.description,
        sport=row.sport,
        start_time=row.start_time,
        end_time=row.end_time,
        status=row.status,
        home_odds=Decimal(row.home_odds),
        away_odds=Decimal(row.away_odds),
        draw_odds=Decimal(row.draw_odds) if row.draw_odds is not None else None,
        result=result,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_snapshot(row: Any) -> OddsSnapshot:
    return OddsSnapshot(
        id=row.id,
        event_id=str(row.event_id),
        home_odds=Decimal(row.home_odds),
        away_odds=Decimal(row.away_odds),
        draw_odds=Decimal(row.draw_odds) if row.draw_odds is not None else None,
        recorded_at=row.recorded_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class EventRepository:
    """Concrete repository. Writes run inside the caller's transaction."""

    async def get_event_by_id(
        self, db: AsyncSession, event_id: str
    ) -> Event | None:
        result = await db.execute(_GET_EVENT_SQL, {"event_id": event_id})
        row = result.fetchone()
        return _row_to_event(row) if row else None

    async def list_events(
        self,
        db: AsyncSession,
        sport: str | None,
        status: str | None,
        search: str | None,
        limit: int,
        offset: int,
    ) -> tuple[list[Event], int]:
        params: dict[str, Any] = {
            "sport": sport,
            "status": status,
            "pattern": f"%{_escape_like(search)}%" if search else None,
        }
        total = (await db.execute(_COUNT_EVENTS_SQL, params)).scalar_one()
        result = await db.execute(
            _LIST_EVENTS_SQL, {**params, "limit": limit, "offset": offset}
        )
        return [_row_to_event(row) for row in result.fetchall()], int(total)

    async def create_event(
        self,
        db: AsyncSession,
        title: str,
        description: str | None,
        sport: str,
        start_time: datetime,
        end_time: datetime | None,
        home_odds: Decimal,
        away_odds: Decimal,
        draw_odds: Decimal | None,
    ) -> Event:
        result = await db.execute(
            _INSERT_EVENT_SQL,
            {
                "title": title,
                "description": description,
                "sport": sport,
                "start_time": start_time,
                "end_time": end_time,
                "home_odds": home_odds,
                "away_odds": away_odds,
                "draw_odds": draw_odds,
            },
        )
        return _row_to_event(result.fetchone())

    async def update_event(
        self, db: AsyncSession, event_id: str, columns: dict[str, Any]
    ) -> Event | None:
        unknown = set(columns) - UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Not updatable: {sorted(unknown)}")
        if not columns:
            raise ValueError("No columns to update")

        assignments = ", ".join(f"{col} = :{col}" for col in sorted(columns))
        sql = text(f"""
            UPDATE events
            SET {assignments}
            WHERE id = :event_id
            RETURNING {_EVENT_COLUMNS}
        """)
        result = await db.execute(sql, {**columns, "event_id": event_id})
        row = result.fetchone()
        return _row_to_event(row) if row else None

    async def record_odds(self, db: AsyncSession, event: Event) -> None:
        await db.execute(
            _INSERT_ODDS_HISTORY_SQL,
            {
                "event_id": event.id,
                "home_odds": event.home_odds,
                "away_odds": event.away_odds,
                "draw_odds": event.draw_odds,
            },
        )

    async def list_odds_history(
        self, db: AsyncSession, event_id: str, limit: int
    ) -> list[OddsSnapshot]:
        result = await db.execute(
            _LIST_ODDS_HISTORY_SQL, {"event_id": event_id, "limit": limit}
        )
        return [_row_to_snapshot(row) for row in result.fetchall()]
