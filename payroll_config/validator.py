"""
Statutory Table Validator (``payroll_config.validator``).

Responsibility
--------------
Checks the structural integrity of a parsed ``StatutoryTables`` before any
engine sees it.

Invariants enforced
-------------------
* Bracket tables are non-empty and their limits strictly ascend.
* Only the last IRRF bracket is unbounded, and it must be; every INSS
  bracket is bounded (bases above the top limit pay the ceiling amount).
* Rates lie in [0, 1]; deductions, quotas and the INSS ceiling are
  non-negative; the minimum wage and monthly hours are positive.
* ``effective_to`` is not before ``effective_from``.

Failure modes
-------------
* Errors (``ConfigValidationResult.errors``) -> the set MUST NOT be used.
* Warnings -> the set may be used but should be reviewed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from payroll_engines.tables import Bracket, StatutoryTables
from payroll_kernel.domain.values import ZERO

ONE = Decimal("1")


@dataclass
class ConfigValidationResult:
    """
    Result of statutory-table validation.

    ``is_valid`` is ``True`` only when ``errors`` is empty.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)


def validate_statutory_tables(tables: StatutoryTables) -> ConfigValidationResult:
    """Validate one statutory-table set."""
    result = ConfigValidationResult()

    _validate_brackets(tables.inss.brackets, "inss", result, unbounded_last=False)
    _validate_brackets(tables.irrf.brackets, "irrf", result, unbounded_last=True)
    _validate_amounts(tables, result)
    _validate_rates(tables, result)
    _validate_dates(tables, result)

    return result


def _validate_brackets(
    brackets: tuple[Bracket, ...],
    name: str,
    result: ConfigValidationResult,
    unbounded_last: bool,
) -> None:
    if not brackets:
        result.add_error(f"{name}: bracket table is empty")
        return

    previous = None
    for i, bracket in enumerate(brackets):
        if bracket.deduction < ZERO:
            result.add_error(f"{name}: bracket {i} has a negative deduction")
        is_last = i == len(brackets) - 1
        if bracket.upper_limit is None:
            if not (is_last and unbounded_last):
                result.add_error(f"{name}: bracket {i} has no upper limit")
            continue
        if is_last and unbounded_last:
            result.add_error(f"{name}: last bracket must be unbounded")
        if previous is not None and bracket.upper_limit <= previous:
            result.add_error(
                f"{name}: bracket {i} limit {bracket.upper_limit} "
                f"does not exceed {previous}"
            )
        previous = bracket.upper_limit

    for i, bracket in enumerate(brackets):
        if not ZERO <= bracket.rate <= ONE:
            result.add_error(f"{name}: bracket {i} rate {bracket.rate} outside [0, 1]")

    rates = [b.rate for b in brackets]
    if rates != sorted(rates):
        result.add_warning(f"{name}: bracket rates are not progressive")


def _validate_amounts(tables: StatutoryTables, result: ConfigValidationResult) -> None:
    if tables.minimum_wage <= ZERO:
        result.add_error("minimum_wage must be positive")
    if tables.monthly_hours <= ZERO:
        result.add_error("monthly_hours must be positive")
    if tables.inss.ceiling_amount < ZERO:
        result.add_error("inss.ceiling_amount must not be negative")
    for name, value in (
        ("irrf.dependent_deduction", tables.irrf.dependent_deduction),
        ("irrf.simplified_deduction", tables.irrf.simplified_deduction),
        ("family_allowance.ceiling", tables.family_allowance.income_ceiling),
        ("family_allowance.quota", tables.family_allowance.quota_per_dependent),
    ):
        if value < ZERO:
            result.add_error(f"{name} must not be negative")


def _validate_rates(tables: StatutoryTables, result: ConfigValidationResult) -> None:
    for name, rate in (
        ("inss.partner_rate", tables.inss.partner_rate),
        ("fgts.deposit_rate", tables.severance_fund.deposit_rate),
        ("fgts.fine_rate", tables.severance_fund.termination_fine_rate),
        ("transport_voucher_rate", tables.transport_voucher_rate),
    ):
        if not ZERO <= rate <= ONE:
            result.add_error(f"{name} {rate} outside [0, 1]")


def _validate_dates(tables: StatutoryTables, result: ConfigValidationResult) -> None:
    if tables.effective_to is not None and tables.effective_to < tables.effective_from:
        result.add_error(
            f"effective_to {tables.effective_to} precedes "
            f"effective_from {tables.effective_from}"
        )
