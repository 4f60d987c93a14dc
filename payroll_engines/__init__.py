"""
Module: payroll_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    payroll calculation engines.  This is the canonical import surface for
    higher layers (payroll_config, payroll_services).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import payroll_kernel (and sibling engine modules).
    MUST NOT import payroll_config or payroll_services.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      Reference dates are passed in as explicit parameters; the statutory
      tables are passed in as ``StatutoryTables``.
    - Decimal-only arithmetic: all monetary amounts use ``Decimal``.
    - Determinism: identical inputs always produce identical outputs.

Audit relevance:
    Every engine invocation is traced via ``@traced_engine`` (see
    ``payroll_engines.tracer``), emitting PAYROLL_ENGINE_TRACE log records
    with engine name, version, input fingerprint and duration.

Usage:
    from payroll_engines import calculate_payroll, calculate_vacation
    from payroll_engines import calculate_termination, TerminationReason
"""

from payroll_kernel.logging_config import get_logger

logger = get_logger("engines")

from payroll_engines.automatic_events import classify_pay_item, resolve_automatic_event
from payroll_engines.brackets import BracketEvaluation, evaluate_brackets, find_bracket
from payroll_engines.inss import calculate_inss
from payroll_engines.irrf import (
    DeductionMethod,
    IrrfCalculation,
    IrrfCandidate,
    calculate_irrf,
)
from payroll_engines.payroll import (
    INSS_ITEM,
    IRRF_ITEM,
    PayrollCalculationResult,
    calculate_payroll,
)
from payroll_engines.tables import (
    Bracket,
    FamilyAllowance,
    InssTable,
    IrrfTable,
    SeveranceFund,
    StatutoryTables,
)
from payroll_engines.termination import (
    NoticeType,
    TerminationReason,
    TerminationResult,
    calculate_termination,
)
from payroll_engines.thirteenth import (
    Installment,
    ThirteenthSalaryResult,
    calculate_thirteenth_salary,
)
from payroll_engines.tracer import compute_input_fingerprint, traced_engine
from payroll_engines.types import (
    AutomaticRuleKind,
    ContributorKind,
    Employee,
    LineKind,
    PayItemCategory,
    PayItemDefinition,
    PayrollLineEntry,
    PendingRule,
    ResolvedEvent,
    SettlementLine,
    SettlementTotals,
    TaxKind,
    TaxLine,
)
from payroll_engines.vacation import VacationResult, calculate_vacation

__all__ = [
    "AutomaticRuleKind",
    "Bracket",
    "BracketEvaluation",
    "ContributorKind",
    "DeductionMethod",
    "Employee",
    "FamilyAllowance",
    "INSS_ITEM",
    "IRRF_ITEM",
    "Installment",
    "InssTable",
    "IrrfCalculation",
    "IrrfCandidate",
    "IrrfTable",
    "LineKind",
    "NoticeType",
    "PayItemCategory",
    "PayItemDefinition",
    "PayrollCalculationResult",
    "PayrollLineEntry",
    "PendingRule",
    "ResolvedEvent",
    "SettlementLine",
    "SettlementTotals",
    "SeveranceFund",
    "StatutoryTables",
    "TaxKind",
    "TaxLine",
    "TerminationReason",
    "TerminationResult",
    "ThirteenthSalaryResult",
    "VacationResult",
    "calculate_inss",
    "calculate_irrf",
    "calculate_payroll",
    "calculate_termination",
    "calculate_thirteenth_salary",
    "calculate_vacation",
    "classify_pay_item",
    "compute_input_fingerprint",
    "evaluate_brackets",
    "find_bracket",
    "resolve_automatic_event",
    "traced_engine",
]
