"""
13th Salary Calculator (``payroll_engines.thirteenth``).

Gross = salary / 12 x months of the year with at least 15 days worked
(counted up to the calculation date).  The gross is paid in two
installments or at once:

* first   -- half the gross, no withholding (due by 30 November).
* second  -- the full gross, with the first installment deducted as an
             advance; INSS on the full gross and IRRF on gross - INSS
             (due by 20 December).
* single  -- the full gross, taxed as the second installment, no advance.

The 13th is taxed exclusively at source: IRRF here never mixes with the
month's ordinary payroll base.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from payroll_engines._helpers import (
    deduction_line,
    earning_line,
    employee_errors,
    tax_line,
    twelfths_reference,
)
from payroll_engines.inss import calculate_inss
from payroll_engines.irrf import calculate_irrf
from payroll_engines.periods import months_worked_in_year
from payroll_engines.tables import StatutoryTables
from payroll_engines.tracer import traced_engine
from payroll_engines.types import (
    Employee,
    SettlementLine,
    SettlementTotals,
    TaxKind,
    TaxLine,
)
from payroll_kernel.domain.dtos import CalculationOutcome
from payroll_kernel.domain.validation import check_non_negative_amount, collect
from payroll_kernel.domain.values import ZERO, round_money
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.thirteenth")

MONTHS_PER_YEAR = Decimal("12")


class Installment(str, Enum):
    FIRST = "first"
    SECOND = "second"
    SINGLE = "single"

    @property
    def is_taxed(self) -> bool:
        return self is not Installment.FIRST


@dataclass(frozen=True)
class ThirteenthSalaryResult:
    """Itemized 13th salary installment."""

    lines: tuple[SettlementLine, ...]
    total_earnings: Decimal
    total_deductions: Decimal
    net_pay: Decimal
    year: int
    installment: Installment
    months_worked: int
    gross: Decimal  # full-year entitlement so far, not this installment
    installment_amount: Decimal
    advance_deducted: Decimal
    inss: TaxLine
    irrf: TaxLine


_EARNING_DESCRIPTIONS = {
    Installment.FIRST: "13º Salário - 1ª Parcela",
    Installment.SECOND: "13º Salário - 2ª Parcela",
    Installment.SINGLE: "13º Salário - Parcela Única",
}


@traced_engine(
    "thirteenth_salary",
    "1.0",
    fingerprint_fields=("employee", "year", "installment", "calculation_date", "advance_paid"),
)
def calculate_thirteenth_salary(
    employee: Employee,
    year: int,
    installment: Installment,
    calculation_date: date,
    tables: StatutoryTables,
    advance_paid: Decimal | None = None,
) -> CalculationOutcome[ThirteenthSalaryResult]:
    """
    Calculate one installment of the 13th salary.

    Args:
        employee: Employee being paid.
        year: Reference year.
        installment: Which installment to pay.
        calculation_date: Months are counted up to this date.
        tables: Statutory tables effective on ``calculation_date``.
        advance_paid: First installment actually paid; defaults to half
            the gross.  Only read for the second installment.
    """
    t0 = time.monotonic()
    logger.info("thirteenth_calculation_started", extra={
        "base_salary": str(employee.base_salary),
        "year": year,
        "installment": installment.value,
        "calculation_date": calculation_date.isoformat(),
    })

    checks = []
    if advance_paid is not None:
        checks.append(check_non_negative_amount(advance_paid, "advance_paid"))
    errors = employee_errors(employee) + collect(*checks)
    if errors:
        logger.warning("thirteenth_calculation_rejected", extra={
            "error_codes": [e.code for e in errors],
        })
        return CalculationOutcome.failure(*errors)

    months = months_worked_in_year(employee.admission_date, year, calculation_date)
    gross = round_money(employee.base_salary / MONTHS_PER_YEAR * months)
    half = round_money(gross / 2)

    installment_amount = half if installment == Installment.FIRST else gross
    lines: list[SettlementLine] = [earning_line(
        _EARNING_DESCRIPTIONS[installment],
        installment_amount,
        twelfths_reference(months),
    )]

    advance_deducted = ZERO
    if installment == Installment.SECOND:
        advance_deducted = half if advance_paid is None else round_money(advance_paid)
        lines.append(deduction_line(
            "Adiantamento 13º Salário - 1ª Parcela", advance_deducted
        ))

    inss = TaxLine.zero(TaxKind.INSS)
    irrf = TaxLine.zero(TaxKind.IRRF)
    if installment.is_taxed:
        inss = calculate_inss(gross, tables.inss, employee.contributor_kind)
        irrf = calculate_irrf(
            gross - inss.amount, employee.dependents, tables.irrf
        ).tax_line
        lines.extend(
            tax_line(f"{tax.kind.value.upper()} sobre 13º Salário", tax)
            for tax in (inss, irrf)
            if not tax.is_zero
        )

    all_lines = tuple(lines)
    totals = SettlementTotals.of(all_lines)
    result = ThirteenthSalaryResult(
        lines=all_lines,
        total_earnings=totals.total_earnings,
        total_deductions=totals.total_deductions,
        net_pay=totals.net_pay,
        year=year,
        installment=installment,
        months_worked=months,
        gross=gross,
        installment_amount=installment_amount,
        advance_deducted=advance_deducted,
        inss=inss,
        irrf=irrf,
    )

    logger.info("thirteenth_calculation_completed", extra={
        "months_worked": months,
        "gross": str(gross),
        "net_pay": str(result.net_pay),
        "inss": str(inss.amount),
        "irrf": str(irrf.amount),
        "duration_ms": round((time.monotonic() - t0) * 1000, 2),
    })
    return CalculationOutcome.success(result)
