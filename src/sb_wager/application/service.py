"""WagerApplicationService — bet placement and the caller's bet history.

place_bet checks, in order:
  1. stake is a positive integer               → InvalidInputError
  2. prediction is home / away / draw          → InvalidInputError
  3. balance covers the stake                  → InsufficientFundsError
  4. event exists and is upcoming or live      → EventNotAvailableError
  5. odds posted for the predicted outcome     → NoOddsForOutcomeError

then debits, inserts the bet and appends the ledger row in ONE transaction.
Any database failure inside that unit rolls everything back and surfaces as
PlacementFailedError. The balance push happens after commit and never fails
the request.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_common.cents import calculate_payout, cents_to_display
from src.sb_common.enums import Prediction
from src.sb_common.errors import (
    AppError,
    BetNotFoundError,
    EventNotAvailableError,
    InsufficientFundsError,
    InvalidInputError,
    NoOddsForOutcomeError,
    PlacementFailedError,
    UserNotFoundError,
)
from src.sb_common.pagination import PageMeta, clamp_limit, page_offset
from src.sb_event.domain.repository import EventRepositoryProtocol
from src.sb_event.domain.transitions import is_bettable
from src.sb_event.infrastructure.persistence import EventRepository
from src.sb_realtime.hub import Notifier, publish_quietly
from src.sb_realtime.messages import BalanceUpdateMessage
from src.sb_wager.application.schemas import (
    BetListResponse,
    BetOut,
    PlaceBetResponse,
)
from src.sb_wager.domain.repository import WagerRepositoryProtocol
from src.sb_wager.infrastructure.persistence import WagerRepository

logger = logging.getLogger(__name__)

_PREDICTIONS = frozenset(p.value for p in Prediction)


class WagerApplicationService:
    def __init__(
        self,
        repo: WagerRepositoryProtocol | None = None,
        events: EventRepositoryProtocol | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self._repo: WagerRepositoryProtocol = repo or WagerRepository()
        self._events: EventRepositoryProtocol = events or EventRepository()
        self._notifier = notifier

    async def place_bet(
        self,
        db: AsyncSession,
        user_id: str,
        event_id: str,
        amount_cents: int,
        prediction: str,
    ) -> PlaceBetResponse:
        if isinstance(amount_cents, bool) or not isinstance(amount_cents, int) or amount_cents <= 0:
            raise InvalidInputError("Stake must be a positive whole number of cents")
        if prediction not in _PREDICTIONS:
            raise InvalidInputError(f"Prediction must be one of {sorted(_PREDICTIONS)}")

        balance = await self._repo.get_balance(db, user_id)
        if balance is None:
            raise UserNotFoundError(user_id)
        if balance < amount_cents:
            raise InsufficientFundsError(amount_cents, balance)

        event = await self._events.get_event_by_id(db, event_id)
        if event is None:
            raise EventNotAvailableError(event_id, "unknown")
        if not is_bettable(event.status):
            raise EventNotAvailableError(event_id, event.status)

        odds = event.odds_for(prediction)
        if odds is None or odds <= 0:
            raise NoOddsForOutcomeError(event_id, prediction)
        potential = calculate_payout(amount_cents, odds)

        try:
            new_balance = await self._repo.debit_balance(db, user_id, amount_cents)
            if new_balance is None:
                # Lost a race with a concurrent placement for the same user.
                raise InsufficientFundsError(amount_cents, balance)
            bet = await self._repo.insert_bet(
                db, user_id, event_id, amount_cents, odds, prediction, potential
            )
            await self._repo.insert_bet_transaction(
                db,
                user_id,
                bet.id,
                amount_cents,
                new_balance,
                f"Bet on {event.title} ({prediction})",
            )
            await db.commit()
        except AppError:
            await db.rollback()
            raise
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.error("Bet placement failed user=%s event=%s: %s", user_id, event_id, exc)
            raise PlacementFailedError() from exc

        bet.event_title = event.title
        logger.info(
            "Bet placed id=%s user=%s event=%s stake=%d odds=%s",
            bet.id, user_id, event_id, amount_cents, odds,
        )
        await publish_quietly(
            self._notifier, BalanceUpdateMessage.for_balance(user_id, new_balance)
        )
        return PlaceBetResponse(
            bet=BetOut.from_domain(bet),
            new_balance_cents=new_balance,
            new_balance_display=cents_to_display(new_balance),
        )

    async def list_bets(
        self,
        db: AsyncSession,
        user_id: str,
        status: str | None,
        page: int,
        limit: int,
    ) -> BetListResponse:
        page = max(page, 1)
        limit = clamp_limit(limit)
        bets, total = await self._repo.list_bets(
            db, user_id, status, limit, page_offset(page, limit)
        )
        return BetListResponse(
            items=[BetOut.from_domain(b) for b in bets],
            pagination=PageMeta.build(page, limit, total),
        )

    async def get_bet(self, db: AsyncSession, user_id: str, bet_id: str) -> BetOut:
        bet = await self._repo.get_bet(db, bet_id, user_id)
        if bet is None:
            raise BetNotFoundError(bet_id)
        return BetOut.from_domain(bet)
