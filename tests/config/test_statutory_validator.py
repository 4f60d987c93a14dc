"""Tests for statutory table validation."""

from dataclasses import replace
from datetime import date
from decimal import Decimal

from payroll_config.validator import ConfigValidationResult, validate_statutory_tables
from payroll_engines.tables import Bracket


class TestConfigValidationResult:
    def test_valid_when_no_errors(self):
        result = ConfigValidationResult()
        result.add_warning("review me")

        assert result.is_valid
        assert result.warnings == ["review me"]

    def test_invalid_with_errors(self):
        result = ConfigValidationResult()
        result.add_error("broken")
        assert not result.is_valid


class TestValidateStatutoryTables:
    def test_shipped_tables_valid(self, tables_2024, tables_2025):
        assert validate_statutory_tables(tables_2024).is_valid
        assert validate_statutory_tables(tables_2025).is_valid

    def test_empty_bracket_table(self, tables_2024):
        tables = replace(tables_2024, inss=replace(tables_2024.inss, brackets=()))

        result = validate_statutory_tables(tables)
        assert "inss: bracket table is empty" in result.errors

    def test_unbounded_contribution_bracket(self, tables_2024):
        brackets = tables_2024.inss.brackets[:-1] + (
            Bracket(upper_limit=None, rate=Decimal("0.14"), deduction=Decimal("181.18")),
        )
        tables = replace(tables_2024, inss=replace(tables_2024.inss, brackets=brackets))

        result = validate_statutory_tables(tables)
        assert "inss: bracket 3 has no upper limit" in result.errors

    def test_unbounded_middle_bracket(self, tables_2024):
        brackets = list(tables_2024.irrf.brackets)
        brackets[1] = replace(brackets[1], upper_limit=None)
        tables = replace(tables_2024, irrf=replace(tables_2024.irrf, brackets=tuple(brackets)))

        result = validate_statutory_tables(tables)
        assert "irrf: bracket 1 has no upper limit" in result.errors

    def test_negative_deduction(self, tables_2024):
        brackets = list(tables_2024.irrf.brackets)
        brackets[-1] = replace(brackets[-1], deduction=Decimal("-1"))
        tables = replace(tables_2024, irrf=replace(tables_2024.irrf, brackets=tuple(brackets)))

        result = validate_statutory_tables(tables)
        assert "irrf: bracket 4 has a negative deduction" in result.errors

    def test_regressive_rates_warn(self, tables_2024):
        brackets = list(tables_2024.inss.brackets)
        brackets[0] = replace(brackets[0], rate=Decimal("0.20"))
        tables = replace(tables_2024, inss=replace(tables_2024.inss, brackets=tuple(brackets)))

        result = validate_statutory_tables(tables)
        assert result.is_valid
        assert result.warnings == ["inss: bracket rates are not progressive"]

    def test_rate_above_one(self, tables_2024):
        tables = replace(
            tables_2024,
            severance_fund=replace(tables_2024.severance_fund, termination_fine_rate=Decimal("40")),
        )

        result = validate_statutory_tables(tables)
        assert not result.is_valid
        assert result.errors[0].startswith("fgts.fine_rate")

    def test_non_positive_minimum_wage(self, tables_2024):
        result = validate_statutory_tables(replace(tables_2024, minimum_wage=Decimal("0")))
        assert "minimum_wage must be positive" in result.errors

    def test_negative_quota(self, tables_2024):
        tables = replace(
            tables_2024,
            family_allowance=replace(
                tables_2024.family_allowance, quota_per_dependent=Decimal("-1")
            ),
        )

        result = validate_statutory_tables(tables)
        assert "family_allowance.quota must not be negative" in result.errors

    def test_inverted_effective_range(self, tables_2024):
        tables = replace(tables_2024, effective_to=date(2023, 12, 31))

        result = validate_statutory_tables(tables)
        assert not result.is_valid
        assert "precedes" in result.errors[0]
