"""Shared input checks and line builders for the payroll aggregators."""

from __future__ import annotations

from decimal import Decimal

from payroll_engines.types import Employee, LineKind, SettlementLine, TaxLine
from payroll_kernel.domain.dtos import ValidationError
from payroll_kernel.domain.validation import (
    check_non_negative_amount,
    check_non_negative_count,
    collect,
)
from payroll_kernel.domain.values import round_money


def employee_errors(employee: Employee) -> list[ValidationError]:
    checks = [
        check_non_negative_amount(employee.base_salary, "employee.base_salary"),
        check_non_negative_count(employee.dependents, "employee.dependents"),
    ]
    if employee.family_allowance_dependents is not None:
        checks.append(check_non_negative_count(
            employee.family_allowance_dependents,
            "employee.family_allowance_dependents",
        ))
    return collect(*checks)


def earning_line(description: str, amount: Decimal, reference: str = "") -> SettlementLine:
    return SettlementLine(
        description=description,
        reference=reference,
        earning=round_money(amount),
        kind=LineKind.EARNING,
    )


def deduction_line(description: str, amount: Decimal, reference: str = "") -> SettlementLine:
    return SettlementLine(
        description=description,
        reference=reference,
        deduction=round_money(amount),
        kind=LineKind.DEDUCTION,
    )


def tax_line(description: str, tax: TaxLine) -> SettlementLine:
    """Settlement line for a computed tax; reference is the nominal rate."""
    return SettlementLine(
        description=description,
        reference=f"{tax.rate_percent}%",
        deduction=tax.amount,
        kind=LineKind.TAX,
    )


def days_reference(days: int) -> str:
    return f"{days} dias"


def twelfths_reference(months: int) -> str:
    return f"{months}/12"
