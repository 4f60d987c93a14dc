"""
Automatic Event Resolver (``payroll_engines.automatic_events``).

Responsibility
--------------
Fill in the amounts of pay items that follow a closed-form rule of
Brazilian labor law, so the operator only types a reference (hours) or
nothing at all:

=====================  =============================================
Rule                   Amount
=====================  =============================================
family allowance       dependents x quota, if INSS earnings <= ceiling
transport voucher      6% of base salary (deduction)
overtime 50%           salary / 220 x 1.5 x hours
night-shift premium    salary / 220 x 0.20 x hours
hazard pay             30% of base salary
unhealthy conditions   10% / 20% / 40% of the minimum wage
=====================  =============================================

Rules are selected by the ``AutomaticRuleKind`` carried by the pay item.
``classify_pay_item`` maps legacy codes and descriptions onto that enum;
it runs once when a catalog is loaded, never during a calculation.

Failure modes
-------------
* An item without an automatic rule resolves to ``None``: the caller must
  collect a manual value.  This is a normal outcome, not an error.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from payroll_engines.tables import StatutoryTables
from payroll_engines.tracer import traced_engine
from payroll_engines.types import (
    AutomaticRuleKind,
    Employee,
    PayItemDefinition,
    PayrollLineEntry,
    ResolvedEvent,
)
from payroll_kernel.domain.values import ZERO, percent_of, round_money
from payroll_kernel.logging_config import get_logger

logger = get_logger("engines.automatic_events")

OVERTIME_MULTIPLIER = Decimal("1.5")
NIGHT_SHIFT_RATE = Decimal("0.20")
HAZARD_PAY_RATE = Decimal("0.30")

UNHEALTHY_RATES: dict[AutomaticRuleKind, Decimal] = {
    AutomaticRuleKind.UNHEALTHY_MINIMUM: Decimal("0.10"),
    AutomaticRuleKind.UNHEALTHY_MEDIUM: Decimal("0.20"),
    AutomaticRuleKind.UNHEALTHY_MAXIMUM: Decimal("0.40"),
}

# Legacy catalog codes
FAMILY_ALLOWANCE_CODE = "0005"
TRANSPORT_VOUCHER_CODE = "0004"


def classify_pay_item(code: str, description: str) -> AutomaticRuleKind | None:
    """
    Infer the automatic rule of a legacy pay item from its code/description.

    Codes win over descriptions.  For unhealthy-conditions items the grade
    comes from a percentage or grade word in the description; when several
    match, the highest grade wins.
    """
    if code == FAMILY_ALLOWANCE_CODE:
        return AutomaticRuleKind.FAMILY_ALLOWANCE
    if code == TRANSPORT_VOUCHER_CODE:
        return AutomaticRuleKind.TRANSPORT_VOUCHER

    text = description.casefold()
    if "horas extras 50%" in text:
        return AutomaticRuleKind.OVERTIME_50
    if "adicional noturno" in text:
        return AutomaticRuleKind.NIGHT_SHIFT_PREMIUM
    if "periculosidade" in text:
        return AutomaticRuleKind.HAZARD_PAY
    if "insalubridade" in text:
        grade = None
        if "10%" in text or "mínimo" in text:
            grade = AutomaticRuleKind.UNHEALTHY_MINIMUM
        if "20%" in text or "médio" in text:
            grade = AutomaticRuleKind.UNHEALTHY_MEDIUM
        if "40%" in text or "máximo" in text:
            grade = AutomaticRuleKind.UNHEALTHY_MAXIMUM
        return grade
    return None


def social_security_earnings(entries: Sequence[PayrollLineEntry]) -> Decimal:
    """Earnings accumulated so far that feed the INSS base."""
    return sum((e.earning for e in entries if e.feeds_social_security()), ZERO)


def hourly_rate(employee: Employee, tables: StatutoryTables) -> Decimal:
    return employee.base_salary / tables.monthly_hours


@traced_engine("automatic_events", "1.0", fingerprint_fields=("item", "reference"))
def resolve_automatic_event(
    item: PayItemDefinition,
    employee: Employee,
    entries: Sequence[PayrollLineEntry],
    tables: StatutoryTables,
    reference: Decimal | None = None,
) -> ResolvedEvent | None:
    """
    Resolve the amounts of an automatic pay item.

    Args:
        item: Pay item being added to the payroll.
        employee: Employee the payroll belongs to.
        entries: Lines already on the payroll.
        tables: Statutory tables of the payroll's tax year.
        reference: Manually entered quantity (hours) where the rule needs it.

    Returns:
        ResolvedEvent, or None when the item has no automatic rule.
    """
    rule = item.automatic_rule
    if rule is None:
        return None

    hours = reference if reference is not None else ZERO
    salary = employee.base_salary

    match rule:
        case AutomaticRuleKind.FAMILY_ALLOWANCE:
            resolved = _family_allowance(employee, entries, tables)
        case AutomaticRuleKind.TRANSPORT_VOUCHER:
            rate = tables.transport_voucher_rate
            resolved = ResolvedEvent(
                rule=rule,
                reference=percent_of(rate),
                deduction=round_money(salary * rate),
            )
        case AutomaticRuleKind.OVERTIME_50:
            resolved = ResolvedEvent(
                rule=rule,
                reference=hours,
                earning=round_money(
                    hourly_rate(employee, tables) * OVERTIME_MULTIPLIER * hours
                ),
            )
        case AutomaticRuleKind.NIGHT_SHIFT_PREMIUM:
            resolved = ResolvedEvent(
                rule=rule,
                reference=hours,
                earning=round_money(
                    hourly_rate(employee, tables) * NIGHT_SHIFT_RATE * hours
                ),
            )
        case AutomaticRuleKind.HAZARD_PAY:
            resolved = ResolvedEvent(
                rule=rule,
                reference=percent_of(HAZARD_PAY_RATE),
                earning=round_money(salary * HAZARD_PAY_RATE),
            )
        case _:
            rate = UNHEALTHY_RATES[rule]
            resolved = ResolvedEvent(
                rule=rule,
                reference=percent_of(rate),
                earning=round_money(tables.minimum_wage * rate),
            )

    logger.debug("automatic_event_resolved", extra={
        "item_code": item.code,
        "rule": rule.value,
        "reference": str(resolved.reference),
        "earning": str(resolved.earning),
        "deduction": str(resolved.deduction),
    })
    return resolved


def _family_allowance(
    employee: Employee,
    entries: Sequence[PayrollLineEntry],
    tables: StatutoryTables,
) -> ResolvedEvent:
    allowance = tables.family_allowance
    dependents = employee.allowance_dependents
    accumulated = social_security_earnings(entries)

    if dependents > 0 and accumulated <= allowance.income_ceiling:
        return ResolvedEvent(
            rule=AutomaticRuleKind.FAMILY_ALLOWANCE,
            reference=Decimal(dependents),
            earning=round_money(allowance.quota_per_dependent * dependents),
        )

    logger.debug("family_allowance_not_eligible", extra={
        "dependents": dependents,
        "accumulated_earnings": str(accumulated),
        "income_ceiling": str(allowance.income_ceiling),
    })
    return ResolvedEvent(rule=AutomaticRuleKind.FAMILY_ALLOWANCE, reference=ZERO)
