"""Admin application service: event management and platform statistics.

Writes commit or roll back here. Cache invalidation and real-time pushes run
after the commit and never fail the request.
"""

import logging
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_admin.application.schemas import PlatformStats, RecentBet
from src.sb_common.cents import cents_to_display
from src.sb_common.datetime_utils import as_utc
from src.sb_common.enums import EventStatus, Prediction, Sport
from src.sb_common.errors import EventNotFoundError, InvalidInputError
from src.sb_event.application.schemas import EventDetail
from src.sb_event.domain.models import Event
from src.sb_event.domain.repository import EventRepositoryProtocol
from src.sb_event.domain.transitions import check_transition
from src.sb_event.infrastructure.cache import EventCache
from src.sb_event.infrastructure.persistence import EventRepository
from src.sb_realtime.hub import NotificationHub, publish_quietly
from src.sb_realtime.messages import EventStatusUpdateMessage, OddsUpdateMessage

logger = logging.getLogger(__name__)

_TOTALS_SQL = text("""
    SELECT
        (SELECT COUNT(*) FROM users WHERE is_active = TRUE)      AS total_users,
        (SELECT COUNT(*) FROM events)                            AS total_events,
        (SELECT COUNT(*) FROM bets)                              AS total_bets,
        (SELECT COALESCE(SUM(amount), 0) FROM bets)              AS total_volume,
        (SELECT COUNT(*) FROM events WHERE status = 'live')      AS active_events
""")

_RECENT_BETS_SQL = text("""
    SELECT b.id, b.user_id, u.username, b.event_id, e.title AS event_title,
           b.amount, b.placed_at
    FROM bets b
    JOIN users u ON u.id = b.user_id
    JOIN events e ON e.id = b.event_id
    ORDER BY b.placed_at DESC, b.id DESC
    LIMIT :limit
""")

RECENT_ACTIVITY_LIMIT = 10

_PLAIN_FIELDS = ("title", "description", "start_time", "end_time")


class AdminService:
    def __init__(
        self,
        repo: EventRepositoryProtocol | None = None,
        cache: EventCache | None = None,
        hub: NotificationHub | None = None,
    ) -> None:
        self._repo: EventRepositoryProtocol = repo or EventRepository()
        self._cache = cache
        self._hub = hub

    async def create_event(
        self, db: AsyncSession, body: dict[str, Any]
    ) -> EventDetail:
        odds = body["odds"]
        try:
            event = await self._repo.create_event(
                db,
                title=body["title"],
                description=body.get("description"),
                sport=Sport(body["sport"]).value,
                start_time=body["start_time"],
                end_time=body.get("end_time"),
                home_odds=odds["home"],
                away_odds=odds["away"],
                draw_odds=odds.get("draw"),
            )
            await self._repo.record_odds(db, event)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Event created id=%s sport=%s title=%r", event.id, event.sport, event.title)
        return EventDetail.from_domain(event)

    async def update_event(
        self, db: AsyncSession, event_id: str, changes: dict[str, Any]
    ) -> EventDetail:
        """Apply a partial update. ``changes`` holds only the fields the client sent."""
        if not changes:
            raise InvalidInputError("No fields to update")

        try:
            current = await self._repo.get_event_by_id(db, event_id)
            if current is None:
                raise EventNotFoundError(event_id)

            columns = _plan_update(current, changes)
            if not columns:
                # Everything sent matches what is stored.
                return EventDetail.from_domain(current)
            odds_changed = any(
                k in columns for k in ("home_odds", "away_odds", "draw_odds")
            )
            status_changed = columns.get("status", current.status) != current.status

            updated = await self._repo.update_event(db, event_id, columns)
            if updated is None:
                raise EventNotFoundError(event_id)
            if odds_changed:
                await self._repo.record_odds(db, updated)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info("Event updated id=%s fields=%s", event_id, sorted(columns))
        if self._cache is not None:
            await self._cache.invalidate(event_id)
        if odds_changed:
            await publish_quietly(self._hub, OddsUpdateMessage.for_event(updated))
        if status_changed:
            await publish_quietly(self._hub, EventStatusUpdateMessage.for_event(updated))
        return EventDetail.from_domain(updated)

    async def get_platform_stats(self, db: AsyncSession) -> PlatformStats:
        totals = (await db.execute(_TOTALS_SQL)).fetchone()
        rows = (
            await db.execute(_RECENT_BETS_SQL, {"limit": RECENT_ACTIVITY_LIMIT})
        ).fetchall()
        recent = [
            RecentBet(
                bet_id=str(r.id),
                user_id=str(r.user_id),
                username=r.username,
                event_id=str(r.event_id),
                event_title=r.event_title,
                amount_cents=r.amount,
                timestamp=r.placed_at.isoformat(),
            )
            for r in rows
        ]
        volume = int(totals.total_volume)
        return PlatformStats(
            total_users=int(totals.total_users),
            total_events=int(totals.total_events),
            total_bets=int(totals.total_bets),
            total_volume_cents=volume,
            total_volume_display=cents_to_display(volume),
            active_events=int(totals.active_events),
            recent_activity=recent,
            realtime=self._hub.stats() if self._hub is not None else None,
        )


def _plan_update(current: Event, changes: dict[str, Any]) -> dict[str, Any]:
    """Translate a partial update into column assignments, enforcing event rules.

    Rules:
      - status moves only along the event state machine
      - a result may be recorded only when the resulting status is completed
      - moving to completed requires a result in the same update
      - home/away odds can be changed but never removed
    """
    columns: dict[str, Any] = {}

    for name in _PLAIN_FIELDS:
        if name in changes:
            columns[name] = changes[name]
    if "title" in columns and columns["title"] is None:
        raise InvalidInputError("title cannot be cleared")
    if "start_time" in columns and columns["start_time"] is None:
        raise InvalidInputError("start_time cannot be cleared")

    for name in ("start_time", "end_time"):
        if columns.get(name) is not None:
            columns[name] = as_utc(columns[name])

    start = as_utc(columns.get("start_time", current.start_time))
    end = as_utc(columns.get("end_time", current.end_time))
    if end is not None and end <= start:
        raise InvalidInputError("end_time must be after start_time")

    target = current.status
    if changes.get("status") is not None:
        target = EventStatus(changes["status"]).value
        check_transition(current.status, target)
        if target != current.status:
            columns["status"] = target
    elif "status" in changes:
        raise InvalidInputError("status cannot be cleared")

    if "result" in changes:
        result = changes["result"]
        if result is None:
            raise InvalidInputError("result cannot be cleared")
        if target != EventStatus.COMPLETED.value:
            raise InvalidInputError("A result can only be recorded for a completed event")
        columns["home_score"] = result["home_score"]
        columns["away_score"] = result["away_score"]
        columns["winner"] = Prediction(result["winner"]).value
    elif target == EventStatus.COMPLETED.value and current.status != target:
        raise InvalidInputError("Completing an event requires a result")

    if "odds" in changes:
        patch = changes["odds"]
        if patch is None:
            raise InvalidInputError("odds cannot be cleared")
        for side in ("home", "away"):
            if side in patch:
                if patch[side] is None:
                    raise InvalidInputError(f"{side} odds cannot be removed")
                if patch[side] != getattr(current, f"{side}_odds"):
                    columns[f"{side}_odds"] = patch[side]
        if "draw" in patch and patch["draw"] != current.draw_odds:
            columns["draw_odds"] = patch["draw"]

    return columns
