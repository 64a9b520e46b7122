"""Unit tests for the event status state machine."""

import pytest

from src.sb_common.errors import InvalidStatusTransitionError
from src.sb_event.domain.transitions import can_transition, check_transition, is_bettable


@pytest.mark.parametrize(
    ("current", "target"),
    [
        ("upcoming", "live"),
        ("upcoming", "cancelled"),
        ("live", "completed"),
        ("live", "cancelled"),
        ("live", "live"),
    ],
)
def test_allowed(current: str, target: str) -> None:
    assert can_transition(current, target)
    check_transition(current, target)


@pytest.mark.parametrize(
    ("current", "target"),
    [
        ("upcoming", "completed"),
        ("live", "upcoming"),
        ("completed", "live"),
        ("completed", "cancelled"),
        ("cancelled", "upcoming"),
    ],
)
def test_rejected(current: str, target: str) -> None:
    assert not can_transition(current, target)
    with pytest.raises(InvalidStatusTransitionError):
        check_transition(current, target)


def test_bettable_statuses() -> None:
    assert is_bettable("upcoming")
    assert is_bettable("live")
    assert not is_bettable("completed")
    assert not is_bettable("cancelled")
