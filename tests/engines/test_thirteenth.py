"""
Tests for the 13th salary calculator.

Covers:
- Months counted with the 15-day rule
- First installment (half, untaxed)
- Second installment (full gross, advance deducted, taxed)
- Single installment
"""

from datetime import date
from decimal import Decimal

from payroll_engines.thirteenth import Installment, calculate_thirteenth_salary
from payroll_engines.types import Employee, LineKind
from payroll_kernel.domain.dtos import ValidationCode

DECEMBER = date(2024, 12, 20)


def _calculate(employee, installment, tables, on_date=DECEMBER, **kwargs):
    return calculate_thirteenth_salary(
        employee, 2024, installment, on_date, tables, **kwargs
    ).unwrap()


class TestInstallments:
    """Full-year employee on R$ 3.000,00."""

    def test_first_installment(self, employee, tables_2024):
        result = _calculate(employee, Installment.FIRST, tables_2024)

        assert result.months_worked == 12
        assert result.gross == Decimal("3000.00")
        assert result.installment_amount == Decimal("1500.00")
        assert result.inss.is_zero
        assert result.irrf.is_zero
        assert result.net_pay == Decimal("1500.00")

    def test_second_installment(self, employee, tables_2024):
        result = _calculate(employee, Installment.SECOND, tables_2024)

        assert result.total_earnings == Decimal("3000.00")
        assert result.advance_deducted == Decimal("1500.00")
        assert result.inss.taxable_base == Decimal("3000.00")
        assert result.inss.amount == Decimal("258.82")
        assert result.irrf.taxable_base == Decimal("2741.18")
        assert result.irrf.amount == Decimal("0")
        assert result.net_pay == Decimal("1241.18")

    def test_second_installment_lines(self, employee, tables_2024):
        result = _calculate(employee, Installment.SECOND, tables_2024)

        assert [(l.description, l.kind) for l in result.lines] == [
            ("13º Salário - 2ª Parcela", LineKind.EARNING),
            ("Adiantamento 13º Salário - 1ª Parcela", LineKind.DEDUCTION),
            ("INSS sobre 13º Salário", LineKind.TAX),
        ]
        assert result.lines[0].reference == "12/12"

    def test_single_installment(self, employee, tables_2024):
        result = _calculate(employee, Installment.SINGLE, tables_2024)

        assert result.advance_deducted == Decimal("0")
        assert result.net_pay == Decimal("2741.18")

    def test_installments_add_up_to_single(self, employee, tables_2024):
        first = _calculate(employee, Installment.FIRST, tables_2024)
        second = _calculate(employee, Installment.SECOND, tables_2024)
        single = _calculate(employee, Installment.SINGLE, tables_2024)

        assert first.net_pay + second.net_pay == single.net_pay

    def test_advance_actually_paid(self, employee, tables_2024):
        result = _calculate(
            employee, Installment.SECOND, tables_2024, advance_paid=Decimal("1400.00")
        )

        assert result.advance_deducted == Decimal("1400.00")
        assert result.net_pay == Decimal("1341.18")

    def test_income_tax_withheld(self, tables_2024):
        employee = Employee(
            base_salary=Decimal("6000.00"), dependents=0, admission_date=date(2019, 4, 1)
        )
        result = _calculate(employee, Installment.SINGLE, tables_2024)

        assert result.inss.amount == Decimal("658.82")
        assert result.irrf.amount == Decimal("417.50")
        assert result.net_pay == Decimal("4923.68")


class TestMonthsWorked:
    def test_admission_during_year(self, tables_2024):
        """10 Aug counts (22 days); Sep, Oct and Nov follow."""
        employee = Employee(
            base_salary=Decimal("3000.00"), dependents=0, admission_date=date(2024, 8, 10)
        )
        result = _calculate(
            employee, Installment.FIRST, tables_2024, on_date=date(2024, 11, 30)
        )

        assert result.months_worked == 4
        assert result.gross == Decimal("1000.00")
        assert result.installment_amount == Decimal("500.00")

    def test_admitted_after_calculation_date(self, tables_2024):
        employee = Employee(
            base_salary=Decimal("3000.00"), dependents=0, admission_date=date(2025, 1, 6)
        )
        result = _calculate(employee, Installment.SINGLE, tables_2024)

        assert result.months_worked == 0
        assert result.net_pay == Decimal("0")


class TestThirteenthValidation:
    def test_negative_advance(self, employee, tables_2024):
        outcome = calculate_thirteenth_salary(
            employee, 2024, Installment.SECOND, DECEMBER, tables_2024,
            advance_paid=Decimal("-1.00"),
        )

        assert outcome.errors[0].code == ValidationCode.NEGATIVE_AMOUNT
        assert outcome.errors[0].field == "advance_paid"

    def test_installment_taxation(self):
        assert not Installment.FIRST.is_taxed
        assert Installment.SECOND.is_taxed
        assert Installment.SINGLE.is_taxed
