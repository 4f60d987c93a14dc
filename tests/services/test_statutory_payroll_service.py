"""
Tests for StatutoryPayrollService.

Covers:
- Table resolution by reference date (clock default for payroll and 13th)
- Delegation to each engine
- Pay-item entry building with automatic and manual items
- Log context binding
"""

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from payroll_engines.termination import NoticeType, TerminationReason
from payroll_engines.thirteenth import Installment
from payroll_kernel.domain.clock import DeterministicClock
from payroll_kernel.exceptions import StatutoryTablesNotFoundError
from payroll_services import StatutoryPayrollService


@pytest.fixture
def clock():
    return DeterministicClock(datetime(2024, 6, 15, 9, 0, tzinfo=UTC))


@pytest.fixture
def service(clock):
    return StatutoryPayrollService(clock=clock)


class TestTableResolution:
    def test_payroll_defaults_to_clock_month(self, service, employee, salary_entry):
        result = service.calculate_payroll(employee, [salary_entry()]).unwrap()
        assert result.inss.amount == Decimal("258.82")

    def test_payroll_period_selects_year(self, service, employee, salary_entry):
        result = service.calculate_payroll(
            employee, [salary_entry()], period=date(2025, 2, 1)
        ).unwrap()
        assert result.inss.amount == Decimal("253.41")

    def test_clock_moves_into_next_year(self, clock, service, employee, salary_entry):
        clock.set_time(datetime(2025, 3, 1, 9, 0, tzinfo=UTC))

        result = service.calculate_payroll(employee, [salary_entry()]).unwrap()
        assert result.inss.amount == Decimal("253.41")

    def test_no_tables_raises(self, service, employee):
        with pytest.raises(StatutoryTablesNotFoundError):
            service.calculate_vacation(employee, date(2023, 7, 1), 30)

    def test_tables_for(self, service):
        assert service.tables_for(date(2024, 2, 1)).version == "2024.1"


class TestDelegation:
    def test_vacation(self, service, employee):
        result = service.calculate_vacation(employee, date(2024, 7, 1), 30).unwrap()

        assert result.net_pay == Decimal("3646.16")

    def test_vacation_validation_passes_through(self, service, employee):
        outcome = service.calculate_vacation(employee, date(2024, 7, 1), 25, cash_out=True)
        assert not outcome.is_valid

    def test_termination(self, service, employee):
        result = service.calculate_termination(
            employee,
            date(2024, 6, 20),
            TerminationReason.WITHOUT_CAUSE,
            NoticeType.INDEMNIFIED,
            Decimal("5000.00"),
        ).unwrap()

        assert result.net_pay == Decimal("9388.19")
        assert result.severance_fund_fine == Decimal("2120.00")

    def test_thirteenth_defaults_to_clock(self, service, employee):
        result = service.calculate_thirteenth_salary(employee, Installment.FIRST).unwrap()

        # January to June 15 2024: June has exactly 15 days
        assert result.year == 2024
        assert result.months_worked == 6
        assert result.installment_amount == Decimal("750.00")

    def test_thirteenth_explicit_date(self, service, employee):
        result = service.calculate_thirteenth_salary(
            employee, Installment.SINGLE, calculation_date=date(2024, 12, 20)
        ).unwrap()
        assert result.net_pay == Decimal("2741.18")


class TestAddItem:
    def test_automatic_item_resolved(self, service, employee, catalog, salary_entry):
        entries = service.add_item(
            catalog["150"], employee, [salary_entry()], reference=Decimal("10")
        )

        assert len(entries) == 2
        assert entries[-1].earning == Decimal("204.55")

    def test_automatic_item_ignores_manual_amounts(self, service, employee, catalog):
        entries = service.add_item(
            catalog["0004"], employee, [], deduction=Decimal("1.00")
        )
        assert entries[-1].deduction == Decimal("180.00")

    def test_manual_item_uses_given_amounts(self, service, employee, catalog):
        entries = service.add_item(catalog["200"], employee, [], earning=Decimal("450.00"))

        assert entries[-1].earning == Decimal("450.00")
        assert entries[-1].reference == Decimal("0")

    def test_resolve_event_none_for_manual_item(self, service, employee, catalog):
        assert service.resolve_event(catalog["200"], employee, []) is None

    def test_built_payroll_calculates(self, service, employee, catalog, salary_entry):
        entries = service.add_item(catalog["0004"], employee, [salary_entry()])
        result = service.calculate_payroll(employee, entries).unwrap()

        assert result.total_deductions == Decimal("438.82")
        assert result.net_pay == Decimal("2561.18")


class TestLogContext:
    def test_employee_bound_during_calculation(self, service, employee, salary_entry, captured_logs):
        service.calculate_payroll(employee, [salary_entry()])

        completed = [r for r in captured_logs() if r["message"] == "payroll_calculation_completed"]
        assert completed[0]["employee_id"] == "EMP-001"
        assert "calculation_id" in completed[0]

    def test_context_released_after_calculation(self, service, employee, salary_entry):
        from payroll_kernel.logging_config import LogContext

        service.calculate_payroll(employee, [salary_entry()])
        assert LogContext.get_all() == {}
