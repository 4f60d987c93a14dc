"""
Payroll Domain Types (``payroll_engines.types``).

Responsibility
--------------
Frozen dataclass value objects representing the nouns of Brazilian payroll:
employees, pay-item definitions (rubricas), payroll lines, computed tax
lines and itemized settlement lines.

Architecture position
---------------------
**Engines layer** -- pure data definitions with ZERO I/O.  Built by callers
(and by ``payroll_config.load_pay_item_catalog``) and consumed by every
calculator in this package.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* Deduction-category pay items never contribute to a taxable base.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

from payroll_kernel.domain.values import ZERO


class ContributorKind(str, Enum):
    """How the person contributes to social security."""

    EMPLOYEE = "employee"  # CLT worker, progressive table
    PARTNER = "partner"  # sócio on pro-labore, flat rate


class PayItemCategory(str, Enum):
    EARNING = "earning"  # provento
    DEDUCTION = "deduction"  # desconto


class AutomaticRuleKind(str, Enum):
    """Closed set of pay items whose amount follows a fixed formula."""

    FAMILY_ALLOWANCE = "family_allowance"
    TRANSPORT_VOUCHER = "transport_voucher"
    OVERTIME_50 = "overtime_50"
    NIGHT_SHIFT_PREMIUM = "night_shift_premium"
    HAZARD_PAY = "hazard_pay"
    UNHEALTHY_MINIMUM = "unhealthy_minimum"
    UNHEALTHY_MEDIUM = "unhealthy_medium"
    UNHEALTHY_MAXIMUM = "unhealthy_maximum"


class TaxKind(str, Enum):
    INSS = "inss"
    IRRF = "irrf"


class LineKind(str, Enum):
    """Role of an itemized settlement line."""

    EARNING = "earning"
    DEDUCTION = "deduction"
    TAX = "tax"
    INFORMATIONAL = "informational"  # reported, never summed


# Item ids reserved for the computed statutory taxes.  Lines carrying them in
# a submitted payroll are stale results of an earlier run.
RESERVED_TAX_ITEM_IDS = frozenset({TaxKind.INSS.value, TaxKind.IRRF.value})


@dataclass(frozen=True)
class Employee:
    """An employee (or partner) as seen by the calculators."""

    base_salary: Decimal
    dependents: int
    admission_date: date
    family_allowance_dependents: int | None = None
    contributor_kind: ContributorKind = ContributorKind.EMPLOYEE
    employee_id: str | None = None

    @property
    def allowance_dependents(self) -> int:
        """Dependents counted for salário-família (defaults to IRRF ones)."""
        if self.family_allowance_dependents is None:
            return self.dependents
        return self.family_allowance_dependents


@dataclass(frozen=True)
class PayItemDefinition:
    """
    A coded pay item (rubrica).

    The three base flags say which taxable bases an EARNING feeds.
    ``automatic_rule`` names the closed-form formula that fills the item in,
    if any; it is resolved once when the catalog is loaded.
    """

    code: str
    description: str
    category: PayItemCategory
    counts_toward_social_security_base: bool = False
    counts_toward_income_tax_base: bool = False
    counts_toward_severance_fund_base: bool = False
    automatic_rule: AutomaticRuleKind | None = None
    item_id: str = ""

    def __post_init__(self) -> None:
        if not self.item_id:
            object.__setattr__(self, "item_id", self.code)

    @property
    def is_earning(self) -> bool:
        return self.category == PayItemCategory.EARNING

    @property
    def is_statutory_tax(self) -> bool:
        return self.item_id in RESERVED_TAX_ITEM_IDS


@dataclass(frozen=True)
class PayrollLineEntry:
    """One line of a payroll: an item, its reference and its amounts."""

    item: PayItemDefinition
    reference: Decimal = ZERO  # hours, percentage or days; informational
    earning: Decimal = ZERO
    deduction: Decimal = ZERO

    def feeds_social_security(self) -> bool:
        return self.item.is_earning and self.item.counts_toward_social_security_base

    def feeds_income_tax(self) -> bool:
        return self.item.is_earning and self.item.counts_toward_income_tax_base

    def feeds_severance_fund(self) -> bool:
        return self.item.is_earning and self.item.counts_toward_severance_fund_base


@dataclass(frozen=True)
class TaxLine:
    """
    A computed statutory tax.

    ``rate_percent`` is the nominal rate of the bracket applied; the
    effective rate is derived on demand.
    """

    kind: TaxKind
    taxable_base: Decimal
    amount: Decimal
    rate_percent: Decimal

    @property
    def is_zero(self) -> bool:
        return self.amount == ZERO

    @property
    def effective_rate(self) -> Decimal:
        """Effective rate as a percentage (amount / base x 100)."""
        if self.taxable_base <= ZERO:
            return ZERO
        return self.amount / self.taxable_base * Decimal("100")

    @classmethod
    def zero(cls, kind: TaxKind, taxable_base: Decimal = ZERO) -> TaxLine:
        return cls(kind=kind, taxable_base=taxable_base, amount=ZERO, rate_percent=ZERO)


@dataclass(frozen=True)
class SettlementLine:
    """An itemized line of a vacation, termination or 13th settlement."""

    description: str
    reference: str = ""
    earning: Decimal = ZERO
    deduction: Decimal = ZERO
    kind: LineKind = LineKind.EARNING


@dataclass(frozen=True)
class SettlementTotals:
    """Totals over the summed lines of a settlement."""

    total_earnings: Decimal
    total_deductions: Decimal
    net_pay: Decimal

    @classmethod
    def of(cls, lines: tuple[SettlementLine, ...]) -> SettlementTotals:
        summed = [l for l in lines if l.kind != LineKind.INFORMATIONAL]
        earnings = sum((l.earning for l in summed), ZERO)
        deductions = sum((l.deduction for l in summed), ZERO)
        return cls(
            total_earnings=earnings,
            total_deductions=deductions,
            net_pay=earnings - deductions,
        )


@dataclass(frozen=True)
class ResolvedEvent:
    """Amounts an automatic rule filled in for a pay item."""

    rule: AutomaticRuleKind
    reference: Decimal
    earning: Decimal = ZERO
    deduction: Decimal = ZERO

    def to_entry(self, item: PayItemDefinition) -> PayrollLineEntry:
        return PayrollLineEntry(
            item=item,
            reference=self.reference,
            earning=self.earning,
            deduction=self.deduction,
        )


@dataclass(frozen=True)
class PendingRule:
    """A legal rule knowingly left out of a calculation."""

    code: str
    reason: str
    details: dict[str, str] = field(default_factory=dict)
