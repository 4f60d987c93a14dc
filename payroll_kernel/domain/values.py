"""
Money helpers for Brazilian real amounts.

Payroll lines are plain ``Decimal`` values in BRL.  Every computed line and
sub-total is rounded to centavos with ROUND_HALF_UP; intermediate products
keep full precision until that point.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENTS = Decimal("0.01")


def round_money(amount: Decimal) -> Decimal:
    """Round an amount to centavos (ROUND_HALF_UP)."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def percent_of(rate: Decimal) -> Decimal:
    """Express a fractional rate (0.075) as a percentage (7.5).

    Trailing zeros are stripped so 0.14 reads as 14, not 14.00.
    """
    result = rate * HUNDRED
    if result == result.to_integral_value():
        return result.quantize(Decimal("1"))
    return result.normalize()


def non_negative(amount: Decimal) -> Decimal:
    """Clamp an amount at zero."""
    return amount if amount > ZERO else ZERO
