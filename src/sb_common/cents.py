"""Integer arithmetic utilities for cents-based balances.

All stakes, payouts and balances use int (cents). Odds are the only
fractional quantity and are carried as Decimal with two places.
"""

from decimal import ROUND_DOWN, Decimal, InvalidOperation


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 6500 -> '$65.00', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"


def calculate_payout(stake_cents: int, odds: Decimal) -> int:
    """Potential payout for a stake at the given decimal odds.

    Fractional cents are truncated (house never over-pays).
    """
    if stake_cents <= 0:
        raise ValueError(f"Stake must be positive, got {stake_cents}")
    if odds <= 0:
        raise ValueError(f"Odds must be positive, got {odds}")
    payout = (Decimal(stake_cents) * odds).quantize(Decimal("1"), rounding=ROUND_DOWN)
    return int(payout)


def units_to_cents(amount: object) -> int:
    """Convert a currency amount such as 25 or "12.50" to cents.

    Raises ValueError for non-numeric input or more than two decimal places.
    """
    if isinstance(amount, bool):
        raise ValueError("Amount must be a number")
    try:
        value = Decimal(str(amount))
    except InvalidOperation as exc:
        raise ValueError("Amount must be a number") from exc
    if not value.is_finite():
        raise ValueError("Amount must be a number")
    cents = value * 100
    if cents != cents.to_integral_value():
        raise ValueError("Amount cannot have more than two decimal places")
    return int(cents)
