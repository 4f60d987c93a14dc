"""
Social Security Contribution Calculator (``payroll_engines.inss``).

Employee INSS follows the progressive table with one deliberate deviation
from plain bracket evaluation: once the base passes the top bracket limit
the contribution is pinned to the published ceiling amount, and the
reported rate is the top bracket's nominal rate.

Partners on pro-labore pay a flat rate on the base, capped at the same
ceiling amount.
"""

from __future__ import annotations

from decimal import Decimal

from payroll_engines.brackets import evaluate_brackets
from payroll_engines.tables import InssTable
from payroll_engines.tracer import traced_engine
from payroll_engines.types import ContributorKind, TaxKind, TaxLine
from payroll_kernel.domain.values import ZERO, non_negative, percent_of, round_money
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.inss")


@traced_engine("inss", "1.0", fingerprint_fields=("base", "contributor_kind"))
def calculate_inss(
    base: Decimal,
    table: InssTable,
    contributor_kind: ContributorKind = ContributorKind.EMPLOYEE,
) -> TaxLine:
    """
    Calculate the INSS contribution on a social-security base.

    Postconditions:
        - base <= 0 -> zero amount and zero rate.
        - amount is never negative and is rounded to centavos.
    """
    if base <= ZERO:
        return TaxLine.zero(TaxKind.INSS, base)

    if contributor_kind == ContributorKind.PARTNER:
        return _partner_contribution(base, table)

    top_limit = table.top_limit
    if top_limit is not None and base > top_limit:
        logger.debug("inss_ceiling_applied", extra={
            "base": str(base),
            "top_limit": str(top_limit),
            "ceiling_amount": str(table.ceiling_amount),
        })
        return TaxLine(
            kind=TaxKind.INSS,
            taxable_base=base,
            amount=table.ceiling_amount,
            rate_percent=table.top_bracket.rate_percent,
        )

    evaluation = evaluate_brackets(base, table.brackets)
    return TaxLine(
        kind=TaxKind.INSS,
        taxable_base=base,
        amount=round_money(non_negative(evaluation.amount)),
        rate_percent=evaluation.rate_percent,
    )


def _partner_contribution(base: Decimal, table: InssTable) -> TaxLine:
    amount = min(base * table.partner_rate, table.ceiling_amount)
    return TaxLine(
        kind=TaxKind.INSS,
        taxable_base=base,
        amount=round_money(amount),
        rate_percent=percent_of(table.partner_rate),
    )
