"""Unit tests for EventApplicationService using a mock repository."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.sb_common.errors import EventNotFoundError
from src.sb_event.application.schemas import EventDetail
from src.sb_event.application.service import EventApplicationService
from tests.unit.factories import EVENT_ID, make_event


class TestListEvents:
    async def test_pagination_meta(self) -> None:
        repo = AsyncMock()
        repo.list_events.return_value = ([make_event()] * 10, 25)
        svc = EventApplicationService(repo=repo)

        result = await svc.list_events(MagicMock(), None, None, None, page=2, limit=10)

        assert len(result.items) == 10
        assert result.pagination.total == 25
        assert result.pagination.total_pages == 3
        repo.list_events.assert_awaited_once()
        args = repo.list_events.call_args.args
        assert args[-2:] == (10, 10)  # limit, offset

    async def test_limit_capped_at_100(self) -> None:
        repo = AsyncMock()
        repo.list_events.return_value = ([], 0)
        svc = EventApplicationService(repo=repo)

        result = await svc.list_events(MagicMock(), None, None, None, page=1, limit=1000)

        assert result.pagination.limit == 100
        assert result.pagination.total_pages == 0

    async def test_blank_search_means_no_filter(self) -> None:
        repo = AsyncMock()
        repo.list_events.return_value = ([], 0)
        svc = EventApplicationService(repo=repo)

        await svc.list_events(MagicMock(), "football", "live", "   ", page=1, limit=10)

        _, sport, status, search, _, _ = repo.list_events.call_args.args
        assert (sport, status, search) == ("football", "live", None)


class TestGetEvent:
    async def test_not_found(self) -> None:
        repo = AsyncMock()
        repo.get_event_by_id.return_value = None
        with pytest.raises(EventNotFoundError):
            await EventApplicationService(repo=repo).get_event(MagicMock(), EVENT_ID)

    async def test_detail_shape(self) -> None:
        repo = AsyncMock()
        repo.get_event_by_id.return_value = make_event(draw=None)
        detail = await EventApplicationService(repo=repo).get_event(MagicMock(), EVENT_ID)
        assert detail.odds.home == 2.5
        assert detail.odds.draw is None
        assert detail.result is None

    async def test_cache_hit_skips_repository(self) -> None:
        repo = AsyncMock()
        cache = AsyncMock()
        cache.get.return_value = EventDetail.from_domain(make_event())
        svc = EventApplicationService(repo=repo, cache=cache)

        detail = await svc.get_event(MagicMock(), EVENT_ID)

        assert detail.id == EVENT_ID
        repo.get_event_by_id.assert_not_awaited()

    async def test_cache_miss_populates(self) -> None:
        repo = AsyncMock()
        repo.get_event_by_id.return_value = make_event()
        cache = AsyncMock()
        cache.get.return_value = None
        svc = EventApplicationService(repo=repo, cache=cache)

        await svc.get_event(MagicMock(), EVENT_ID)

        cache.set.assert_awaited_once()

    async def test_repeated_reads_are_identical(self) -> None:
        repo = AsyncMock()
        repo.get_event_by_id.return_value = make_event()
        svc = EventApplicationService(repo=repo)
        first = await svc.get_event(MagicMock(), EVENT_ID)
        second = await svc.get_event(MagicMock(), EVENT_ID)
        assert first == second


class TestOddsHistory:
    async def test_unknown_event(self) -> None:
        repo = AsyncMock()
        repo.get_event_by_id.return_value = None
        with pytest.raises(EventNotFoundError):
            await EventApplicationService(repo=repo).get_odds_history(MagicMock(), EVENT_ID, 10)
