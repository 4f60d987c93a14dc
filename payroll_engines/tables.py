"""
Statutory tables (``payroll_engines.tables``).

Responsibility
--------------
Frozen value objects for one tax year's statutory parameters: the INSS and
IRRF bracket tables, the minimum wage, family-allowance limits, FGTS rates
and the fixed percentages the automatic pay items use.

Architecture position
---------------------
**Engines layer** -- pure data.  Instances are built by
``payroll_config.loader`` from the dated YAML sets and passed to every
engine as a parameter; engines never look tables up themselves.

Invariants enforced
-------------------
* All numeric fields are ``Decimal``.
* Bracket limits ascend; ``upper_limit is None`` marks the unbounded bracket
  (checked by ``payroll_config.validator`` at load time).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from payroll_kernel.domain.values import ZERO, percent_of


@dataclass(frozen=True)
class Bracket:
    """One row of a progressive table: base x rate - deduction."""

    upper_limit: Decimal | None  # None = unbounded
    rate: Decimal  # As decimal (0.075 for 7.5%)
    deduction: Decimal = ZERO

    def covers(self, base: Decimal) -> bool:
        return self.upper_limit is None or base <= self.upper_limit

    @property
    def rate_percent(self) -> Decimal:
        return percent_of(self.rate)


@dataclass(frozen=True)
class InssTable:
    """Employee social-security contribution table."""

    brackets: tuple[Bracket, ...]
    ceiling_amount: Decimal  # maximum monthly contribution
    partner_rate: Decimal = Decimal("0.11")  # pro-labore flat rate

    @property
    def top_bracket(self) -> Bracket:
        return self.brackets[-1]

    @property
    def top_limit(self) -> Decimal | None:
        return self.top_bracket.upper_limit


@dataclass(frozen=True)
class IrrfTable:
    """Monthly income-tax withholding table."""

    brackets: tuple[Bracket, ...]
    dependent_deduction: Decimal
    simplified_deduction: Decimal


@dataclass(frozen=True)
class FamilyAllowance:
    """Salário-família: paid per dependent below an income ceiling."""

    income_ceiling: Decimal
    quota_per_dependent: Decimal


@dataclass(frozen=True)
class SeveranceFund:
    """FGTS deposit and termination fine rates."""

    deposit_rate: Decimal = Decimal("0.08")
    termination_fine_rate: Decimal = Decimal("0.40")


@dataclass(frozen=True)
class StatutoryTables:
    """
    Every statutory parameter for one dated tax-year version.

    ``version`` and ``checksum`` identify the exact configuration a
    calculation used.
    """

    version: str
    effective_from: date
    minimum_wage: Decimal
    inss: InssTable
    irrf: IrrfTable
    family_allowance: FamilyAllowance
    severance_fund: SeveranceFund = SeveranceFund()
    transport_voucher_rate: Decimal = Decimal("0.06")
    monthly_hours: Decimal = Decimal("220")
    effective_to: date | None = None
    checksum: str = ""

    def is_effective(self, on_date: date) -> bool:
        """Check whether this version governs ``on_date``."""
        if on_date < self.effective_from:
            return False
        if self.effective_to is not None and on_date > self.effective_to:
            return False
        return True
