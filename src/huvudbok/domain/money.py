"""Currency rounding helpers.

Amounts are kept as Decimal and rounded to öre (two decimals) with
round-half-away-from-zero after every summation step.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

CENT = Decimal("0.01")
BALANCE_TOLERANCE = Decimal("0.01")


def round_amount(amount: Decimal) -> Decimal:
    """Round an amount to two decimals, halves away from zero."""
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def add(total: Decimal, amount: Decimal) -> Decimal:
    """Add amount to a running total and round the result."""
    return round_amount(total + amount)


def sum_amounts(amounts: Iterable[Decimal]) -> Decimal:
    """Sum amounts, rounding after each addition."""
    total = round_amount(Decimal(0))
    for amount in amounts:
        total = add(total, amount)
    return total


def is_within_tolerance(difference: Decimal) -> bool:
    """Exclusive tolerance check: 0.01 itself is not balanced."""
    return abs(difference) < BALANCE_TOLERANCE
