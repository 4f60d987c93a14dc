"""
Bracket Calculator (``payroll_engines.brackets``).

Evaluates a progressive table in the "rate minus fixed deduction" form the
Brazilian tax authorities publish: the first bracket whose upper limit is at
least the base applies, and the amount is ``base x rate - deduction``.  The
last bracket is a catch-all for bases above every finite limit.

The amount is returned unclamped and unrounded; INSS and IRRF decide how to
clamp and round it.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from payroll_engines.tables import Bracket
from payroll_kernel.domain.values import ZERO


@dataclass(frozen=True)
class BracketEvaluation:
    """Outcome of evaluating one base against one table."""

    base: Decimal
    amount: Decimal  # may be negative
    rate_percent: Decimal  # nominal rate of the matched bracket
    bracket: Bracket | None = None  # None when base <= 0

    @property
    def is_taxable(self) -> bool:
        return self.bracket is not None


def find_bracket(base: Decimal, brackets: Sequence[Bracket]) -> Bracket:
    """First bracket covering ``base``; the last bracket otherwise."""
    for bracket in brackets:
        if bracket.covers(base):
            return bracket
    return brackets[-1]


def evaluate_brackets(base: Decimal, brackets: Sequence[Bracket]) -> BracketEvaluation:
    """
    Evaluate ``base`` against a progressive table.

    Preconditions:
        - ``brackets`` is non-empty and ordered by ascending limit.
    Postconditions:
        - base <= 0 -> zero amount, zero rate, no bracket.
        - otherwise amount = base x rate - deduction of the matched bracket.
    """
    if base <= ZERO:
        return BracketEvaluation(base=base, amount=ZERO, rate_percent=ZERO)

    bracket = find_bracket(base, brackets)
    return BracketEvaluation(
        base=base,
        amount=base * bracket.rate - bracket.deduction,
        rate_percent=bracket.rate_percent,
        bracket=bracket,
    )
