"""
Hypothesis-based property tests for the payroll engines.

Properties checked here:
- INSS: never negative, never above the ceiling, monotone in the base
- IRRF: never above either candidate, never negative
- Net identity (net = earnings - deductions) for every aggregator
- Proportional months: non-decreasing within an accrual year
- Vacation 1/3 and 13th installments add up
"""

from datetime import date, timedelta
from decimal import Decimal

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from payroll_config import get_statutory_tables
from payroll_engines.inss import calculate_inss
from payroll_engines.irrf import calculate_irrf
from payroll_engines.payroll import calculate_payroll
from payroll_engines.periods import proportional_vacation_months
from payroll_engines.termination import NoticeType, TerminationReason, calculate_termination
from payroll_engines.thirteenth import Installment, calculate_thirteenth_salary
from payroll_engines.types import (
    ContributorKind,
    Employee,
    PayItemCategory,
    PayItemDefinition,
    PayrollLineEntry,
)
from payroll_engines.vacation import calculate_vacation
from payroll_kernel.domain.values import round_money

TABLES = get_statutory_tables(date(2024, 6, 1))

PROPERTY_SETTINGS = settings(
    max_examples=200,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
)

amounts = st.decimals(
    min_value=Decimal("0"),
    max_value=Decimal("100000"),
    places=2,
    allow_nan=False,
    allow_infinity=False,
)
salaries = st.decimals(
    min_value=Decimal("0"),
    max_value=Decimal("50000"),
    places=2,
    allow_nan=False,
    allow_infinity=False,
)
dependents = st.integers(min_value=0, max_value=10)
dates_2024 = st.dates(min_value=date(2024, 1, 1), max_value=date(2024, 12, 31))


@st.composite
def payroll_entries(draw):
    """A list of earnings and deductions with random base flags."""
    entries = []
    for i in range(draw(st.integers(min_value=0, max_value=8))):
        category = draw(st.sampled_from(list(PayItemCategory)))
        item = PayItemDefinition(
            code=f"{i:03d}",
            description=f"Item {i}",
            category=category,
            counts_toward_social_security_base=draw(st.booleans()),
            counts_toward_income_tax_base=draw(st.booleans()),
            counts_toward_severance_fund_base=draw(st.booleans()),
        )
        amount = draw(salaries)
        if category == PayItemCategory.EARNING:
            entries.append(PayrollLineEntry(item=item, earning=amount))
        else:
            entries.append(PayrollLineEntry(item=item, deduction=amount))
    return entries


def _employee(salary, deps=0, admission=date(2020, 1, 6), kind=ContributorKind.EMPLOYEE):
    return Employee(
        base_salary=salary,
        dependents=deps,
        admission_date=admission,
        contributor_kind=kind,
    )


class TestInssProperties:
    @given(base=amounts, kind=st.sampled_from(list(ContributorKind)))
    @PROPERTY_SETTINGS
    def test_bounded(self, base, kind):
        # the formula at the exact top limit may exceed the published ceiling by a centavo
        at_top_limit = calculate_inss(TABLES.inss.top_limit, TABLES.inss)
        tax = calculate_inss(base, TABLES.inss, kind)

        assert Decimal("0") <= tax.amount <= max(TABLES.inss.ceiling_amount, at_top_limit.amount)
        assert tax.amount == round_money(tax.amount)

    @given(a=amounts, b=amounts)
    @PROPERTY_SETTINGS
    def test_monotone_below_top_limit(self, a, b):
        low, high = sorted(min(x, TABLES.inss.top_limit) for x in (a, b))
        assert calculate_inss(low, TABLES.inss).amount <= calculate_inss(high, TABLES.inss).amount

    @given(base=amounts)
    @PROPERTY_SETTINGS
    def test_ceiling_above_top_limit(self, base):
        if base > TABLES.inss.top_limit:
            assert calculate_inss(base, TABLES.inss).amount == TABLES.inss.ceiling_amount


class TestIrrfProperties:
    @given(base=amounts, deps=dependents)
    @PROPERTY_SETTINGS
    def test_lesser_of_candidates(self, base, deps):
        calc = calculate_irrf(base, deps, TABLES.irrf)

        assert calc.amount >= Decimal("0")
        for candidate in (calc.standard, calc.simplified):
            assert calc.amount <= round_money(max(candidate.amount, Decimal("0")))

    @given(base=amounts, deps=dependents)
    @PROPERTY_SETTINGS
    def test_more_dependents_never_raise_tax(self, base, deps):
        fewer = calculate_irrf(base, deps, TABLES.irrf).amount
        more = calculate_irrf(base, deps + 1, TABLES.irrf).amount
        assert more <= fewer


class TestNetIdentity:
    @given(salary=salaries, deps=dependents, entries=payroll_entries())
    @PROPERTY_SETTINGS
    def test_payroll(self, salary, deps, entries):
        result = calculate_payroll(_employee(salary, deps), entries, TABLES).unwrap()

        assert result.net_pay == result.total_earnings - result.total_deductions
        assert result.social_security_base <= result.total_earnings

    @given(salary=salaries, days=st.integers(min_value=1, max_value=20), cash_out=st.booleans())
    @PROPERTY_SETTINGS
    def test_vacation(self, salary, days, cash_out):
        result = calculate_vacation(
            _employee(salary), date(2024, 7, 1), days, TABLES, cash_out=cash_out
        ).unwrap()

        assert result.net_pay == result.total_earnings - result.total_deductions
        assert result.vacation_bonus == round_money(result.vacation_pay / 3)

    @given(
        salary=salaries,
        termination=dates_2024,
        reason=st.sampled_from(list(TerminationReason)),
        notice=st.sampled_from(list(NoticeType)),
        balance=amounts,
    )
    @PROPERTY_SETTINGS
    def test_termination(self, salary, termination, reason, notice, balance):
        result = calculate_termination(
            _employee(salary), termination, reason, notice, balance, TABLES
        ).unwrap()

        assert result.net_pay == result.total_earnings - result.total_deductions
        earnings = sum((l.earning for l in result.lines), Decimal("0"))
        assert result.total_earnings == earnings - result.severance_fund_fine

    @given(salary=salaries, on_date=dates_2024)
    @PROPERTY_SETTINGS
    def test_thirteenth_installments(self, salary, on_date):
        def net(installment):
            return calculate_thirteenth_salary(
                _employee(salary), 2024, installment, on_date, TABLES
            ).unwrap().net_pay

        assert net(Installment.FIRST) + net(Installment.SECOND) == net(Installment.SINGLE)


class TestProportionalMonths:
    @given(
        admission=st.dates(min_value=date(2015, 1, 1), max_value=date(2024, 12, 31)),
        first=dates_2024,
        gap=st.integers(min_value=0, max_value=365),
    )
    @PROPERTY_SETTINGS
    def test_non_decreasing_within_year(self, admission, first, gap):
        second = min(first + timedelta(days=gap), date(2024, 12, 31))

        before = proportional_vacation_months(admission, first)
        after = proportional_vacation_months(admission, second)
        assert 0 <= before <= after <= 12
