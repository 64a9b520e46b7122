"""Pydantic schemas for sb_account API."""

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.sb_account.domain.models import AccountHolder, BetStats, Transaction
from src.sb_common.cents import cents_to_display
from src.sb_common.pagination import PageMeta

# Single deposit ceiling: 100,000.00
MAX_DEPOSIT_CENTS = 10_000_000

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class UpdateProfileRequest(BaseModel):
    """Partial update: only fields present in the body are changed."""

    first_name: str | None = Field(None, min_length=1, max_length=50)
    last_name: str | None = Field(None, min_length=1, max_length=50)
    email: EmailStr | None = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str | None) -> str | None:
        return v.strip().lower() if v is not None else None


class DepositRequest(BaseModel):
    amount_cents: int = Field(..., gt=0, le=MAX_DEPOSIT_CENTS, description="Amount to deposit in cents")


class WithdrawRequest(BaseModel):
    amount_cents: int = Field(..., gt=0, description="Amount to withdraw in cents")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ProfileStats(BaseModel):
    total_bets: int
    total_winnings_cents: int
    total_winnings_display: str
    win_rate: float

    @classmethod
    def from_domain(cls, s: BetStats) -> "ProfileStats":
        return cls(
            total_bets=s.total_bets,
            total_winnings_cents=s.total_winnings,
            total_winnings_display=cents_to_display(s.total_winnings),
            win_rate=s.win_rate,
        )


class ProfileResponse(BaseModel):
    user_id: str
    email: str
    username: str
    first_name: str
    last_name: str
    balance_cents: int
    balance_display: str
    role: str
    created_at: str | None
    stats: ProfileStats | None = None

    @classmethod
    def from_domain(cls, h: AccountHolder, stats: BetStats | None = None) -> "ProfileResponse":
        return cls(
            user_id=h.id,
            email=h.email,
            username=h.username,
            first_name=h.first_name,
            last_name=h.last_name,
            balance_cents=h.balance,
            balance_display=cents_to_display(h.balance),
            role=h.role,
            created_at=h.created_at.isoformat() if h.created_at else None,
            stats=ProfileStats.from_domain(stats) if stats is not None else None,
        )


class BalanceResponse(BaseModel):
    user_id: str
    balance_cents: int
    balance_display: str


class TransactionItem(BaseModel):
    id: int
    type: str
    amount_cents: int
    amount_display: str
    description: str | None
    balance_before_cents: int
    balance_after_cents: int
    balance_after_display: str
    reference_type: str | None
    reference_id: str | None
    created_at: str

    @classmethod
    def from_domain(cls, t: Transaction) -> "TransactionItem":
        return cls(
            id=t.id,
            type=t.type,
            amount_cents=t.amount,
            amount_display=cents_to_display(t.amount),
            description=t.description,
            balance_before_cents=t.balance_before,
            balance_after_cents=t.balance_after,
            balance_after_display=cents_to_display(t.balance_after),
            reference_type=t.reference_type,
            reference_id=t.reference_id,
            created_at=t.created_at.isoformat() if t.created_at else "",
        )


class TransactionListResponse(BaseModel):
    items: list[TransactionItem]
    pagination: PageMeta


class FundsMovementResponse(BaseModel):
    """Result of a deposit or withdrawal."""

    balance_cents: int
    balance_display: str
    amount_cents: int
    amount_display: str
    transaction_id: int
