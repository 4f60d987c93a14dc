"""
Ordinary Payroll Aggregator (``payroll_engines.payroll``).

Responsibility
--------------
Turn a month's resolved payroll lines into taxable bases, statutory taxes
and totals:

1. FGTS base   -- earnings flagged severance-fund; deposit = base x 8%
                  (employer cost, informational, never deducted).
2. INSS base   -- earnings flagged social-security; INSS computed on it.
3. IRRF base   -- earnings flagged income-tax, minus the INSS amount;
                  IRRF computed with the employee's dependents.
4. Totals      -- every earning; every manual deduction except stale
                  statutory-tax lines, plus the fresh INSS and IRRF.
5. Net pay     -- total earnings - total deductions.

Invariants enforced
-------------------
* net_pay == total_earnings - total_deductions, exactly.
* Every sub-total is rounded to centavos.
* Tax amounts are never negative.

Failure modes
-------------
* Negative salary, dependents or line amounts -> ``CalculationOutcome``
  failure with one ``ValidationError`` per offending field.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from payroll_engines._helpers import employee_errors
from payroll_engines.inss import calculate_inss
from payroll_engines.irrf import IrrfCalculation, calculate_irrf
from payroll_engines.tables import StatutoryTables
from payroll_engines.tracer import traced_engine
from payroll_engines.types import (
    Employee,
    PayItemCategory,
    PayItemDefinition,
    PayrollLineEntry,
    TaxKind,
    TaxLine,
)
from payroll_kernel.domain.dtos import CalculationOutcome, ValidationError
from payroll_kernel.domain.validation import check_non_negative_amount, collect
from payroll_kernel.domain.values import ZERO, round_money
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.payroll")

INSS_ITEM = PayItemDefinition(
    item_id=TaxKind.INSS.value,
    code="901",
    description="INSS SOBRE SALÁRIO",
    category=PayItemCategory.DEDUCTION,
)

IRRF_ITEM = PayItemDefinition(
    item_id=TaxKind.IRRF.value,
    code="902",
    description="IRRF SOBRE SALÁRIO",
    category=PayItemCategory.DEDUCTION,
)


@dataclass(frozen=True)
class PayrollCalculationResult:
    """Gross-to-net result of an ordinary monthly payroll."""

    total_earnings: Decimal
    total_deductions: Decimal
    net_pay: Decimal
    social_security_base: Decimal
    income_tax_gross_base: Decimal
    income_tax_base: Decimal  # gross base minus INSS
    severance_fund_base: Decimal
    severance_fund_deposit: Decimal  # employer FGTS, not deducted
    inss: TaxLine
    irrf: TaxLine
    irrf_calculation: IrrfCalculation
    lines: tuple[PayrollLineEntry, ...]


def _sum_earnings(entries: Sequence[PayrollLineEntry], predicate) -> Decimal:
    return round_money(sum((e.earning for e in entries if predicate(e)), ZERO))


def _entry_errors(entries: Sequence[PayrollLineEntry]) -> list[ValidationError]:
    errors: list[ValidationError] = []
    for i, entry in enumerate(entries):
        errors.extend(collect(
            check_non_negative_amount(entry.earning, f"entries[{i}].earning"),
            check_non_negative_amount(entry.deduction, f"entries[{i}].deduction"),
        ))
    return errors


def _tax_entry(item: PayItemDefinition, tax: TaxLine) -> PayrollLineEntry:
    return PayrollLineEntry(
        item=item,
        reference=tax.rate_percent,
        deduction=tax.amount,
    )


@traced_engine("payroll", "1.0", fingerprint_fields=("employee", "entries"))
def calculate_payroll(
    employee: Employee,
    entries: Sequence[PayrollLineEntry],
    tables: StatutoryTables,
) -> CalculationOutcome[PayrollCalculationResult]:
    """
    Calculate an ordinary monthly payroll.

    Args:
        employee: Employee the payroll belongs to.
        entries: Resolved payroll lines (amounts already filled in).
        tables: Statutory tables of the payroll's tax year.

    Returns:
        CalculationOutcome holding a PayrollCalculationResult, or the
        validation errors that prevented it.
    """
    t0 = time.monotonic()
    logger.info("payroll_calculation_started", extra={
        "base_salary": str(employee.base_salary),
        "dependents": employee.dependents,
        "entry_count": len(entries),
        "tables_version": tables.version,
    })

    errors = employee_errors(employee) + _entry_errors(entries)
    if errors:
        logger.warning("payroll_calculation_rejected", extra={
            "error_codes": [e.code for e in errors],
            "fields": [e.field for e in errors],
        })
        return CalculationOutcome.failure(*errors)

    severance_fund_base = _sum_earnings(entries, PayrollLineEntry.feeds_severance_fund)
    severance_fund_deposit = round_money(
        severance_fund_base * tables.severance_fund.deposit_rate
    )

    social_security_base = _sum_earnings(entries, PayrollLineEntry.feeds_social_security)
    inss = calculate_inss(social_security_base, tables.inss, employee.contributor_kind)

    income_tax_gross_base = _sum_earnings(entries, PayrollLineEntry.feeds_income_tax)
    income_tax_base = income_tax_gross_base - inss.amount
    irrf_calculation = calculate_irrf(income_tax_base, employee.dependents, tables.irrf)
    irrf = irrf_calculation.tax_line

    kept = tuple(e for e in entries if not e.item.is_statutory_tax)
    total_earnings = round_money(sum((e.earning for e in entries), ZERO))
    manual_deductions = round_money(sum((e.deduction for e in kept), ZERO))
    total_deductions = manual_deductions + inss.amount + irrf.amount

    lines = kept + tuple(
        _tax_entry(item, tax)
        for item, tax in ((INSS_ITEM, inss), (IRRF_ITEM, irrf))
        if not tax.is_zero
    )

    result = PayrollCalculationResult(
        total_earnings=total_earnings,
        total_deductions=total_deductions,
        net_pay=total_earnings - total_deductions,
        social_security_base=social_security_base,
        income_tax_gross_base=income_tax_gross_base,
        income_tax_base=income_tax_base,
        severance_fund_base=severance_fund_base,
        severance_fund_deposit=severance_fund_deposit,
        inss=inss,
        irrf=irrf,
        irrf_calculation=irrf_calculation,
        lines=lines,
    )

    duration_ms = round((time.monotonic() - t0) * 1000, 2)
    logger.info("payroll_calculation_completed", extra={
        "total_earnings": str(result.total_earnings),
        "total_deductions": str(result.total_deductions),
        "net_pay": str(result.net_pay),
        "inss": str(inss.amount),
        "irrf": str(irrf.amount),
        "irrf_method": irrf_calculation.selected.value,
        "severance_fund_deposit": str(severance_fund_deposit),
        "duration_ms": duration_ms,
    })
    return CalculationOutcome.success(result)
