"""American odds payout math."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

CENT = Decimal("0.01")
HUNDRED = Decimal("100")

# Largest value a Numeric(12, 2) money column holds
MAX_AMOUNT = Decimal("9999999999.99")

Number = Union[Decimal, int, float, str]


def to_money(value: Number) -> Decimal:
    """Coerce to a two-decimal currency amount."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_payout(amount: Number, odds: Optional[Number]) -> Decimal:
    """
    Total returned to a winning bettor, stake included.

    Positive odds pay `odds` per 100 staked; negative odds pay 100 per
    `abs(odds)` staked. Odds are truncated to an integer first. Without
    odds (or with zero odds) the stake is simply returned.
    """
    stake = to_money(amount)
    if odds is None:
        return stake

    line = int(Decimal(str(odds)))
    if line == 0:
        return stake
    if line > 0:
        profit = stake * Decimal(line) / HUNDRED
    else:
        profit = stake * HUNDRED / Decimal(abs(line))
    return to_money(stake + profit)
