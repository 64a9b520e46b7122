"""Event status state machine.

    upcoming ──▶ live ──▶ completed
        │          │
        └────┬─────┘
             ▼
         cancelled

completed and cancelled are terminal. Re-asserting the current status is a no-op.
"""

from src.sb_common.enums import EventStatus
from src.sb_common.errors import InvalidStatusTransitionError

_ALLOWED: dict[EventStatus, frozenset[EventStatus]] = {
    EventStatus.UPCOMING: frozenset({EventStatus.LIVE, EventStatus.CANCELLED}),
    EventStatus.LIVE: frozenset({EventStatus.COMPLETED, EventStatus.CANCELLED}),
    EventStatus.COMPLETED: frozenset(),
    EventStatus.CANCELLED: frozenset(),
}

BETTABLE_STATUSES: frozenset[str] = frozenset(
    {EventStatus.UPCOMING.value, EventStatus.LIVE.value}
)


def can_transition(current: str, target: str) -> bool:
    if current == target:
        return True
    return EventStatus(target) in _ALLOWED[EventStatus(current)]


def check_transition(current: str, target: str) -> None:
    if not can_transition(current, target):
        raise InvalidStatusTransitionError(current, target)


def is_bettable(status: str) -> bool:
    return status in BETTABLE_STATUSES
