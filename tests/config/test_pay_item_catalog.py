"""Tests for pay-item catalog loading."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from payroll_config import get_pay_item_catalog, load_pay_item_catalog
from payroll_engines.types import AutomaticRuleKind, PayItemCategory
from payroll_kernel.exceptions import DuplicatePayItemError, PayItemCatalogError


def _write_catalog(directory: Path, items: list[dict]) -> Path:
    path = directory / "catalog.yaml"
    path.write_text(yaml.safe_dump({"items": items}, allow_unicode=True), encoding="utf-8")
    return path


class TestDefaultCatalog:
    """The shipped default_pay_items.yaml."""

    def setup_method(self):
        self.items = {item.item_id: item for item in get_pay_item_catalog()}

    def test_salary_feeds_every_base(self):
        salary = self.items["salary"]

        assert salary.code == "100"
        assert salary.category == PayItemCategory.EARNING
        assert salary.counts_toward_social_security_base
        assert salary.counts_toward_income_tax_base
        assert salary.counts_toward_severance_fund_base
        assert salary.automatic_rule is None

    def test_rules_inferred_from_code(self):
        assert self.items["0004"].automatic_rule == AutomaticRuleKind.TRANSPORT_VOUCHER
        assert self.items["0005"].automatic_rule == AutomaticRuleKind.FAMILY_ALLOWANCE

    def test_rules_inferred_from_description(self):
        assert self.items["150"].automatic_rule == AutomaticRuleKind.OVERTIME_50
        assert self.items["181"].automatic_rule == AutomaticRuleKind.UNHEALTHY_MINIMUM
        assert self.items["183"].automatic_rule == AutomaticRuleKind.UNHEALTHY_MAXIMUM

    def test_family_allowance_is_not_taxable(self):
        allowance = self.items["0005"]

        assert not allowance.counts_toward_social_security_base
        assert not allowance.counts_toward_income_tax_base

    def test_manual_items(self):
        assert self.items["200"].automatic_rule is None
        assert self.items["310"].category == PayItemCategory.DEDUCTION

    def test_no_reserved_tax_ids(self):
        assert not any(item.is_statutory_tax for item in self.items.values())


class TestCatalogParsing:
    def test_explicit_rule(self, tmp_path):
        path = _write_catalog(tmp_path, [{
            "code": "500",
            "description": "Bonus noturno",
            "category": "earning",
            "automatic_rule": "night_shift_premium",
        }])

        (item,) = load_pay_item_catalog(path)
        assert item.automatic_rule == AutomaticRuleKind.NIGHT_SHIFT_PREMIUM
        assert item.item_id == "500"

    def test_null_rule_disables_inference(self, tmp_path):
        path = _write_catalog(tmp_path, [{
            "code": "0005",
            "description": "Salário-Família manual",
            "category": "earning",
            "automatic_rule": None,
        }])

        (item,) = load_pay_item_catalog(path)
        assert item.automatic_rule is None

    def test_unknown_category(self, tmp_path):
        path = _write_catalog(tmp_path, [{
            "code": "1", "description": "x", "category": "bonus",
        }])

        with pytest.raises(PayItemCatalogError) as exc_info:
            load_pay_item_catalog(path)
        assert exc_info.value.item == "1"

    def test_unknown_rule(self, tmp_path):
        path = _write_catalog(tmp_path, [{
            "code": "1", "description": "x", "category": "earning",
            "automatic_rule": "overtime_100",
        }])

        with pytest.raises(PayItemCatalogError):
            load_pay_item_catalog(path)

    def test_missing_description(self, tmp_path):
        path = _write_catalog(tmp_path, [{"code": "1", "category": "earning"}])

        with pytest.raises(PayItemCatalogError, match="description"):
            load_pay_item_catalog(path)

    def test_null_bases_rejected(self, tmp_path):
        path = _write_catalog(tmp_path, [{
            "code": "1", "description": "x", "category": "earning", "bases": None,
        }])

        with pytest.raises(PayItemCatalogError, match="bases must be a mapping"):
            load_pay_item_catalog(path)

    def test_string_flag_rejected(self, tmp_path):
        """A quoted "false" must not switch the INSS base on."""
        path = _write_catalog(tmp_path, [{
            "code": "1", "description": "x", "category": "earning",
            "bases": {"inss": "false", "irrf": True},
        }])

        with pytest.raises(PayItemCatalogError, match="bases.inss") as exc_info:
            load_pay_item_catalog(path)
        assert exc_info.value.item == "1"

    def test_unknown_base_rejected(self, tmp_path):
        path = _write_catalog(tmp_path, [{
            "code": "1", "description": "x", "category": "earning",
            "bases": {"inss": True, "pis": True},
        }])

        with pytest.raises(PayItemCatalogError, match="unknown bases"):
            load_pay_item_catalog(path)

    def test_missing_flags_default_false(self, tmp_path):
        path = _write_catalog(tmp_path, [{
            "code": "1", "description": "x", "category": "earning",
            "bases": {"irrf": True},
        }])

        (item,) = load_pay_item_catalog(path)
        assert not item.counts_toward_social_security_base
        assert item.counts_toward_income_tax_base
        assert not item.counts_toward_severance_fund_base

    def test_duplicate_item_id(self, tmp_path):
        path = _write_catalog(tmp_path, [
            {"code": "1", "description": "a", "category": "earning"},
            {"code": "1", "description": "b", "category": "earning"},
        ])

        with pytest.raises(DuplicatePayItemError) as exc_info:
            load_pay_item_catalog(path)
        assert exc_info.value.item_id == "1"
