"""
StatutoryPayrollService -- Service wrapper for the payroll engines.

Composes the pure engines with clock injection and date-effective
statutory table resolution.

Architecture: payroll_services -- imperative shell.
    The service resolves the ``StatutoryTables`` effective on each event's
    reference date through ``payroll_config.get_statutory_tables`` and
    delegates to the engine.  It is the only layer that reads the clock.

Reference dates:
    payroll      -- any date of the payroll month (default: today)
    vacation     -- the vacation start date
    termination  -- the termination date
    13th salary  -- the calculation date (default: today)
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Sequence
from uuid import uuid4

from payroll_config import get_statutory_tables
from payroll_engines.automatic_events import resolve_automatic_event
from payroll_engines.payroll import PayrollCalculationResult, calculate_payroll
from payroll_engines.tables import StatutoryTables
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
from payroll_engines.types import (
    Employee,
    PayItemDefinition,
    PayrollLineEntry,
    ResolvedEvent,
)
from payroll_engines.vacation import VacationResult, calculate_vacation
from payroll_kernel.domain.clock import Clock, SystemClock
from payroll_kernel.domain.dtos import CalculationOutcome
from payroll_kernel.domain.values import ZERO
from payroll_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.statutory_payroll")


class StatutoryPayrollService:
    """Entry point for payroll, vacation, termination and 13th calculations.

    Contract:
        - Every calculation uses the tables effective on its reference date.
        - Business-input problems come back as a failed
          ``CalculationOutcome``; missing configuration raises
          ``StatutoryTablesNotFoundError``.

    Non-goals:
        - Does NOT persist results (caller decides).
        - Does NOT look employees up (caller provides ``Employee``).
    """

    def __init__(
        self,
        clock: Clock | None = None,
        config_dir: Path | None = None,
    ) -> None:
        self._clock = clock or SystemClock()
        self._config_dir = config_dir

    def tables_for(self, on_date: date) -> StatutoryTables:
        """Statutory tables effective on ``on_date``."""
        return get_statutory_tables(on_date, config_dir=self._config_dir)

    def resolve_event(
        self,
        item: PayItemDefinition,
        employee: Employee,
        entries: Sequence[PayrollLineEntry],
        reference: Decimal | None = None,
        period: date | None = None,
    ) -> ResolvedEvent | None:
        """Resolve an automatic pay item against the period's tables."""
        tables = self.tables_for(period or self._clock.today())
        return resolve_automatic_event(item, employee, entries, tables, reference)

    def add_item(
        self,
        item: PayItemDefinition,
        employee: Employee,
        entries: Sequence[PayrollLineEntry],
        reference: Decimal | None = None,
        earning: Decimal = ZERO,
        deduction: Decimal = ZERO,
        period: date | None = None,
    ) -> tuple[PayrollLineEntry, ...]:
        """
        Append a pay item to a payroll's lines.

        Automatic items are filled in by their rule and ignore ``earning``
        and ``deduction``; other items take the amounts given.
        """
        resolved = self.resolve_event(item, employee, entries, reference, period)
        if resolved is not None:
            entry = resolved.to_entry(item)
        else:
            entry = PayrollLineEntry(
                item=item,
                reference=reference if reference is not None else ZERO,
                earning=earning,
                deduction=deduction,
            )
        return tuple(entries) + (entry,)

    def calculate_payroll(
        self,
        employee: Employee,
        entries: Sequence[PayrollLineEntry],
        period: date | None = None,
    ) -> CalculationOutcome[PayrollCalculationResult]:
        reference_date = period or self._clock.today()
        with self._context(employee):
            tables = self.tables_for(reference_date)
            logger.info("payroll_requested", extra={
                "period": reference_date.strftime("%Y-%m"),
                "tables_version": tables.version,
            })
            return calculate_payroll(employee, entries, tables)

    def calculate_vacation(
        self,
        employee: Employee,
        start_date: date,
        vacation_days: int,
        cash_out: bool = False,
        advance_thirteenth: bool = False,
    ) -> CalculationOutcome[VacationResult]:
        with self._context(employee):
            tables = self.tables_for(start_date)
            logger.info("vacation_requested", extra={
                "start_date": start_date.isoformat(),
                "tables_version": tables.version,
            })
            return calculate_vacation(
                employee,
                start_date,
                vacation_days,
                tables,
                cash_out=cash_out,
                advance_thirteenth=advance_thirteenth,
            )

    def calculate_termination(
        self,
        employee: Employee,
        termination_date: date,
        reason: TerminationReason,
        notice_type: NoticeType,
        severance_fund_balance: Decimal,
        include_fine_in_totals: bool = False,
    ) -> CalculationOutcome[TerminationResult]:
        with self._context(employee):
            tables = self.tables_for(termination_date)
            logger.info("termination_requested", extra={
                "termination_date": termination_date.isoformat(),
                "reason": reason.value,
                "tables_version": tables.version,
            })
            return calculate_termination(
                employee,
                termination_date,
                reason,
                notice_type,
                severance_fund_balance,
                tables,
                include_fine_in_totals=include_fine_in_totals,
            )

    def calculate_thirteenth_salary(
        self,
        employee: Employee,
        installment: Installment,
        year: int | None = None,
        calculation_date: date | None = None,
        advance_paid: Decimal | None = None,
    ) -> CalculationOutcome[ThirteenthSalaryResult]:
        """
        Calculate a 13th salary installment.

        ``calculation_date`` defaults to today and ``year`` to the
        calculation date's year.
        """
        on_date = calculation_date or self._clock.today()
        with self._context(employee):
            tables = self.tables_for(on_date)
            logger.info("thirteenth_requested", extra={
                "installment": installment.value,
                "calculation_date": on_date.isoformat(),
                "tables_version": tables.version,
            })
            return calculate_thirteenth_salary(
                employee,
                year or on_date.year,
                installment,
                on_date,
                tables,
                advance_paid=advance_paid,
            )

    def _context(self, employee: Employee):
        return LogContext.bind(
            calculation_id=str(uuid4()),
            employee_id=employee.employee_id,
        )
