"""Domain models for sb_account — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class AccountHolder:
    id: str
    email: str
    username: str
    first_name: str
    last_name: str
    balance: int                     # cents, never negative (DB CHECK)
    role: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Transaction:
    """Append-only ledger row. Invariant: balance_after == balance_before + amount."""

    id: int                          # BIGSERIAL
    user_id: str
    type: str                        # deposit / withdrawal / bet / win / refund
    amount: int                      # signed cents
    description: str | None
    balance_before: int
    balance_after: int
    reference_type: str | None = None
    reference_id: str | None = None
    created_at: datetime | None = None


@dataclass
class BetStats:
    total_bets: int
    won_bets: int
    total_winnings: int              # sum of actual_winnings over won bets, cents

    @property
    def win_rate(self) -> float:
        """Won bets as a percentage of all bets, two decimals."""
        if self.total_bets == 0:
            return 0.0
        return round(self.won_bets / self.total_bets * 100, 2)
