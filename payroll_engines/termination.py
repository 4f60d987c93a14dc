"""
Termination Settlement Calculator (``payroll_engines.termination``).

Responsibility
--------------
Compute the rescission amounts owed when an employment ends, in order:

1. Salary balance        salary / days in month x day of month
2. Indemnified notice    (without cause + indemnified only)
                         30 days + 3 per full year of tenure, max 90;
                         salary / 30 x notice days.  Projects the
                         termination date forward by the notice's whole
                         months for items 3 and 4.
3. Proportional vacation salary / 12 x accrued months, plus 1/3
4. Proportional 13th     salary / 12 x months of the projected year
5. FGTS fine             (without cause) 40% x (balance + 8% x
                         (salary balance + proportional 13th))

Deductions: INSS on the salary balance and, separately, on the
proportional 13th -- two independent evaluations, each using its own
component as the base.

Known gaps
----------
* IRRF is not withheld.  The result lists it in ``pending_rules`` and a
  warning is logged for every settlement.
* The FGTS fine is paid through the GRRF guide, not this settlement.  It is
  reported in ``severance_fund_fine`` and left out of the totals unless
  ``include_fine_in_totals`` asks for the legacy behavior of counting it as
  an earning.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from payroll_engines._helpers import (
    days_reference,
    earning_line,
    employee_errors,
    tax_line,
    twelfths_reference,
)
from payroll_engines.inss import calculate_inss
from payroll_engines.periods import (
    days_in_month,
    notice_days,
    project_date,
    proportional_thirteenth_months,
    proportional_vacation_months,
)
from payroll_engines.tables import StatutoryTables
from payroll_engines.tracer import traced_engine
from payroll_engines.types import (
    Employee,
    LineKind,
    PendingRule,
    SettlementLine,
    SettlementTotals,
    TaxLine,
)
from payroll_kernel.domain.dtos import CalculationOutcome
from payroll_kernel.domain.validation import (
    check_non_negative_amount,
    check_not_before,
    collect,
)
from payroll_kernel.domain.values import ZERO, percent_of, round_money
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.termination")

DAYS_PER_MONTH = Decimal("30")
MONTHS_PER_YEAR = Decimal("12")

IRRF_NOT_COMPUTED = PendingRule(
    code="IRRF",
    reason="Income-tax withholding on termination settlements is not computed",
)


class TerminationReason(str, Enum):
    WITHOUT_CAUSE = "without_cause"  # dispensa sem justa causa
    EMPLOYEE_RESIGNATION = "employee_resignation"  # pedido de demissão

    @property
    def grants_indemnified_notice(self) -> bool:
        return self is TerminationReason.WITHOUT_CAUSE

    @property
    def incurs_severance_fund_fine(self) -> bool:
        return self is TerminationReason.WITHOUT_CAUSE


class NoticeType(str, Enum):
    INDEMNIFIED = "indemnified"
    WORKED = "worked"


@dataclass(frozen=True)
class TerminationResult:
    """Itemized termination settlement."""

    lines: tuple[SettlementLine, ...]
    total_earnings: Decimal
    total_deductions: Decimal
    net_pay: Decimal
    termination_date: date
    projected_date: date
    worked_days: int
    salary_balance: Decimal
    notice_days: int  # entitlement by tenure, paid or not
    notice_pay: Decimal
    vacation_months: int
    proportional_vacation: Decimal
    proportional_vacation_bonus: Decimal
    thirteenth_months: int
    proportional_thirteenth: Decimal
    severance_fund_fine: Decimal
    fine_included_in_totals: bool
    inss_on_salary: TaxLine
    inss_on_thirteenth: TaxLine
    pending_rules: tuple[PendingRule, ...] = ()


@traced_engine(
    "termination",
    "1.0",
    fingerprint_fields=("employee", "termination_date", "reason", "notice_type", "severance_fund_balance"),
)
def calculate_termination(
    employee: Employee,
    termination_date: date,
    reason: TerminationReason,
    notice_type: NoticeType,
    severance_fund_balance: Decimal,
    tables: StatutoryTables,
    include_fine_in_totals: bool = False,
) -> CalculationOutcome[TerminationResult]:
    """
    Calculate a termination settlement.

    Args:
        employee: Employee being terminated.
        termination_date: Last day of the employment.
        reason: Why the employment ended.
        notice_type: Whether the notice period is paid out or worked.
        severance_fund_balance: Current FGTS account balance.
        tables: Statutory tables effective on ``termination_date``.
        include_fine_in_totals: Count the FGTS fine as an earning.
    """
    t0 = time.monotonic()
    logger.info("termination_calculation_started", extra={
        "base_salary": str(employee.base_salary),
        "termination_date": termination_date.isoformat(),
        "reason": reason.value,
        "notice_type": notice_type.value,
    })

    errors = employee_errors(employee) + collect(
        check_non_negative_amount(severance_fund_balance, "severance_fund_balance"),
        check_not_before(
            termination_date, employee.admission_date,
            "termination_date", "admission_date",
        ),
    )
    if errors:
        logger.warning("termination_calculation_rejected", extra={
            "error_codes": [e.code for e in errors],
        })
        return CalculationOutcome.failure(*errors)

    salary = employee.base_salary
    fund = tables.severance_fund
    earnings: list[SettlementLine] = []

    worked_days = termination_date.day
    salary_balance = round_money(salary / days_in_month(termination_date) * worked_days)
    earnings.append(earning_line(
        "Saldo de Salário", salary_balance, days_reference(worked_days)
    ))

    entitled_notice = notice_days(employee.admission_date, termination_date)
    notice_pay = ZERO
    projected = termination_date
    if reason.grants_indemnified_notice and notice_type == NoticeType.INDEMNIFIED:
        notice_pay = round_money(salary / DAYS_PER_MONTH * entitled_notice)
        projected = project_date(termination_date, entitled_notice)
        earnings.append(earning_line(
            "Aviso Prévio Indenizado", notice_pay, days_reference(entitled_notice)
        ))

    vacation_months = proportional_vacation_months(employee.admission_date, projected)
    proportional_vacation = round_money(salary / MONTHS_PER_YEAR * vacation_months)
    proportional_vacation_bonus = round_money(proportional_vacation / 3)
    if proportional_vacation > ZERO:
        earnings.append(earning_line(
            "Férias Proporcionais",
            proportional_vacation,
            twelfths_reference(vacation_months),
        ))
        earnings.append(earning_line(
            "1/3 sobre Férias Proporcionais", proportional_vacation_bonus
        ))

    thirteenth_months = proportional_thirteenth_months(employee.admission_date, projected)
    proportional_thirteenth = round_money(salary / MONTHS_PER_YEAR * thirteenth_months)
    if proportional_thirteenth > ZERO:
        earnings.append(earning_line(
            "13º Salário Proporcional",
            proportional_thirteenth,
            twelfths_reference(thirteenth_months),
        ))

    severance_fund_fine = ZERO
    if reason.incurs_severance_fund_fine:
        deposit_on_termination = (salary_balance + proportional_thirteenth) * fund.deposit_rate
        severance_fund_fine = round_money(
            (severance_fund_balance + deposit_on_termination) * fund.termination_fine_rate
        )
        earnings.append(SettlementLine(
            description=(
                f"Multa de {percent_of(fund.termination_fine_rate)}% sobre FGTS "
                "(valor a ser pago via GRRF)"
            ),
            earning=severance_fund_fine,
            kind=LineKind.EARNING if include_fine_in_totals else LineKind.INFORMATIONAL,
        ))

    inss_on_salary = calculate_inss(salary_balance, tables.inss, employee.contributor_kind)
    inss_on_thirteenth = calculate_inss(
        proportional_thirteenth, tables.inss, employee.contributor_kind
    )
    deductions = [
        tax_line(description, tax)
        for description, tax in (
            ("INSS sobre Saldo de Salário", inss_on_salary),
            ("INSS sobre 13º Salário", inss_on_thirteenth),
        )
        if not tax.is_zero
    ]

    logger.warning("termination_irrf_not_computed", extra={
        "termination_date": termination_date.isoformat(),
        "reason": reason.value,
    })

    lines = tuple(earnings + deductions)
    totals = SettlementTotals.of(lines)

    result = TerminationResult(
        lines=lines,
        total_earnings=totals.total_earnings,
        total_deductions=totals.total_deductions,
        net_pay=totals.net_pay,
        termination_date=termination_date,
        projected_date=projected,
        worked_days=worked_days,
        salary_balance=salary_balance,
        notice_days=entitled_notice,
        notice_pay=notice_pay,
        vacation_months=vacation_months,
        proportional_vacation=proportional_vacation,
        proportional_vacation_bonus=proportional_vacation_bonus,
        thirteenth_months=thirteenth_months,
        proportional_thirteenth=proportional_thirteenth,
        severance_fund_fine=severance_fund_fine,
        fine_included_in_totals=include_fine_in_totals,
        inss_on_salary=inss_on_salary,
        inss_on_thirteenth=inss_on_thirteenth,
        pending_rules=(IRRF_NOT_COMPUTED,),
    )

    logger.info("termination_calculation_completed", extra={
        "total_earnings": str(result.total_earnings),
        "total_deductions": str(result.total_deductions),
        "net_pay": str(result.net_pay),
        "notice_days": entitled_notice,
        "severance_fund_fine": str(severance_fund_fine),
        "duration_ms": round((time.monotonic() - t0) * 1000, 2),
    })
    return CalculationOutcome.success(result)
