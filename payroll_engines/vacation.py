"""
Vacation Settlement Calculator (``payroll_engines.vacation``).

Earnings
--------
* Vacation pay           salary / 30 x vacation days
* Constitutional 1/3     vacation pay / 3
* Abono pecuniário       10 days sold back (salary / 30 x 10) plus its 1/3
* 13th advance           half a month's salary, when requested

Deductions
----------
* INSS on the vacation pay alone.  Abono and the 13th advance are not
  taxed here.
* IRRF on (vacation pay + 1/3) - INSS, with dependents, under the
  standard / simplified lesser-tax rule.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from payroll_engines._helpers import (
    days_reference,
    earning_line,
    employee_errors,
    tax_line,
)
from payroll_engines.inss import calculate_inss
from payroll_engines.irrf import calculate_irrf
from payroll_engines.tables import StatutoryTables
from payroll_engines.tracer import traced_engine
from payroll_engines.types import (
    Employee,
    SettlementLine,
    SettlementTotals,
    TaxLine,
)
from payroll_kernel.domain.dtos import CalculationOutcome
from payroll_kernel.domain.validation import check_day_count, collect
from payroll_kernel.domain.values import ZERO, round_money
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.vacation")

DAYS_PER_MONTH = Decimal("30")
MAX_VACATION_DAYS = 30
CASH_OUT_DAYS = 10


@dataclass(frozen=True)
class VacationResult:
    """Itemized vacation settlement."""

    lines: tuple[SettlementLine, ...]
    total_earnings: Decimal
    total_deductions: Decimal
    net_pay: Decimal
    start_date: date
    return_date: date
    vacation_days: int
    vacation_pay: Decimal
    vacation_bonus: Decimal
    cash_out_pay: Decimal
    cash_out_bonus: Decimal
    thirteenth_advance: Decimal
    inss: TaxLine
    irrf: TaxLine


@traced_engine(
    "vacation",
    "1.0",
    fingerprint_fields=("employee", "start_date", "vacation_days", "cash_out", "advance_thirteenth"),
)
def calculate_vacation(
    employee: Employee,
    start_date: date,
    vacation_days: int,
    tables: StatutoryTables,
    cash_out: bool = False,
    advance_thirteenth: bool = False,
) -> CalculationOutcome[VacationResult]:
    """
    Calculate a vacation settlement.

    Day counts outside 1-30, or above 20 with cash-out, fail with
    INVALID_DAY_COUNT; zero days is rejected too, not only negative counts.

    Args:
        employee: Employee going on vacation.
        start_date: First vacation day.
        vacation_days: Days of rest taken (1-30, at most 20 with cash-out).
        tables: Statutory tables effective on ``start_date``.
        cash_out: Sell 10 days back (abono pecuniário).
        advance_thirteenth: Pay the 13th salary's first installment now.
    """
    t0 = time.monotonic()
    logger.info("vacation_calculation_started", extra={
        "base_salary": str(employee.base_salary),
        "start_date": start_date.isoformat(),
        "vacation_days": vacation_days,
        "cash_out": cash_out,
        "advance_thirteenth": advance_thirteenth,
    })

    max_days = MAX_VACATION_DAYS - CASH_OUT_DAYS if cash_out else MAX_VACATION_DAYS
    errors = employee_errors(employee) + collect(
        check_day_count(vacation_days, "vacation_days", 1, max_days),
    )
    if errors:
        logger.warning("vacation_calculation_rejected", extra={
            "error_codes": [e.code for e in errors],
        })
        return CalculationOutcome.failure(*errors)

    daily_rate = employee.base_salary / DAYS_PER_MONTH
    vacation_pay = round_money(daily_rate * vacation_days)
    vacation_bonus = round_money(vacation_pay / 3)

    earnings: list[SettlementLine] = [
        earning_line("Férias", vacation_pay, days_reference(vacation_days)),
        earning_line("1/3 Constitucional de Férias", vacation_bonus),
    ]

    cash_out_pay = cash_out_bonus = ZERO
    if cash_out:
        cash_out_pay = round_money(daily_rate * CASH_OUT_DAYS)
        cash_out_bonus = round_money(cash_out_pay / 3)
        earnings.append(earning_line(
            "Abono Pecuniário", cash_out_pay, days_reference(CASH_OUT_DAYS)
        ))
        earnings.append(earning_line("1/3 sobre Abono Pecuniário", cash_out_bonus))

    thirteenth_advance = ZERO
    if advance_thirteenth:
        thirteenth_advance = round_money(employee.base_salary / 2)
        earnings.append(earning_line(
            "Adiantamento 1ª Parcela 13º Salário", thirteenth_advance
        ))

    inss = calculate_inss(vacation_pay, tables.inss, employee.contributor_kind)
    irrf = calculate_irrf(
        vacation_pay + vacation_bonus - inss.amount,
        employee.dependents,
        tables.irrf,
    ).tax_line

    deductions = [
        tax_line(f"{tax.kind.value.upper()} sobre Férias", tax)
        for tax in (inss, irrf)
        if not tax.is_zero
    ]

    lines = tuple(earnings + deductions)
    totals = SettlementTotals.of(lines)

    result = VacationResult(
        lines=lines,
        total_earnings=totals.total_earnings,
        total_deductions=totals.total_deductions,
        net_pay=totals.net_pay,
        start_date=start_date,
        return_date=start_date + timedelta(days=vacation_days),
        vacation_days=vacation_days,
        vacation_pay=vacation_pay,
        vacation_bonus=vacation_bonus,
        cash_out_pay=cash_out_pay,
        cash_out_bonus=cash_out_bonus,
        thirteenth_advance=thirteenth_advance,
        inss=inss,
        irrf=irrf,
    )

    logger.info("vacation_calculation_completed", extra={
        "total_earnings": str(result.total_earnings),
        "total_deductions": str(result.total_deductions),
        "net_pay": str(result.net_pay),
        "inss": str(inss.amount),
        "irrf": str(irrf.amount),
        "duration_ms": round((time.monotonic() - t0) * 1000, 2),
    })
    return CalculationOutcome.success(result)
