"""
Income Tax Withholding Calculator (``payroll_engines.irrf``).

Two independent candidates are computed against the same table and the
taxpayer pays the lesser:

* STANDARD   -- base minus the per-dependent deduction for each dependent.
* SIMPLIFIED -- base minus the fixed simplified deduction; dependents are
  ignored.

The final amount is ``max(0, min(standard, simplified))`` rounded to
centavos.  The reported nominal rate is the selected candidate's; a tie
selects STANDARD.

Usage:
    from payroll_engines.irrf import calculate_irrf

    calc = calculate_irrf(Decimal("3500.00"), dependents=1, table=tables.irrf)
    calc.tax_line.amount   # withheld amount
    calc.selected          # DeductionMethod.STANDARD or SIMPLIFIED
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from payroll_engines.brackets import evaluate_brackets
from payroll_engines.tables import IrrfTable
from payroll_engines.tracer import traced_engine
from payroll_engines.types import TaxKind, TaxLine
from payroll_kernel.domain.values import ZERO, non_negative, round_money
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.irrf")


class DeductionMethod(str, Enum):
    STANDARD = "standard"
    SIMPLIFIED = "simplified"


@dataclass(frozen=True)
class IrrfCandidate:
    """One deduction method evaluated on its own."""

    method: DeductionMethod
    deduction: Decimal
    taxable_base: Decimal
    amount: Decimal  # unclamped, unrounded
    rate_percent: Decimal


@dataclass(frozen=True)
class IrrfCalculation:
    """Withholding plus both candidates it was chosen from."""

    tax_line: TaxLine
    standard: IrrfCandidate
    simplified: IrrfCandidate
    selected: DeductionMethod

    @property
    def amount(self) -> Decimal:
        return self.tax_line.amount

    @property
    def rate_percent(self) -> Decimal:
        return self.tax_line.rate_percent


def evaluate_candidate(
    base: Decimal,
    method: DeductionMethod,
    deduction: Decimal,
    table: IrrfTable,
) -> IrrfCandidate:
    taxable = base - deduction
    evaluation = evaluate_brackets(taxable, table.brackets)
    return IrrfCandidate(
        method=method,
        deduction=deduction,
        taxable_base=taxable,
        amount=evaluation.amount,
        rate_percent=evaluation.rate_percent,
    )


@traced_engine("irrf", "1.0", fingerprint_fields=("base", "dependents"))
def calculate_irrf(
    base: Decimal,
    dependents: int,
    table: IrrfTable,
) -> IrrfCalculation:
    """
    Calculate IRRF on a base already net of the INSS contribution.

    Postconditions:
        - 0 <= amount <= each candidate's amount (when that is positive).
        - base <= 0 -> zero amount, zero rate.
    """
    if base <= ZERO:
        return IrrfCalculation(
            tax_line=TaxLine.zero(TaxKind.IRRF, base),
            standard=evaluate_candidate(base, DeductionMethod.STANDARD, ZERO, table),
            simplified=evaluate_candidate(base, DeductionMethod.SIMPLIFIED, ZERO, table),
            selected=DeductionMethod.STANDARD,
        )

    standard = evaluate_candidate(
        base,
        DeductionMethod.STANDARD,
        table.dependent_deduction * dependents,
        table,
    )
    simplified = evaluate_candidate(
        base,
        DeductionMethod.SIMPLIFIED,
        table.simplified_deduction,
        table,
    )

    chosen = standard if standard.amount <= simplified.amount else simplified

    logger.debug("irrf_method_selected", extra={
        "base": str(base),
        "dependents": dependents,
        "standard_amount": str(standard.amount),
        "simplified_amount": str(simplified.amount),
        "selected": chosen.method.value,
    })

    return IrrfCalculation(
        tax_line=TaxLine(
            kind=TaxKind.IRRF,
            taxable_base=base,
            amount=round_money(non_negative(chosen.amount)),
            rate_percent=chosen.rate_percent,
        ),
        standard=standard,
        simplified=simplified,
        selected=chosen.method,
    )
