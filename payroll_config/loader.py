"""
Configuration Loader (``payroll_config.loader``).

Responsibility
--------------
Loads the dated statutory-table YAML sets and pay-item catalogs and parses
them into the frozen value objects of ``payroll_engines.tables`` and
``payroll_engines.types``.  Runtime callers go through
``payroll_config.get_statutory_tables()``; the functions here are the
building blocks it (and the tests) use.

Architecture position
---------------------
**Config layer** -- sits above ``payroll_engines`` (whose types it builds)
and below ``payroll_services``.  Engines never import from this package.

Invariants enforced
-------------------
* Every numeric value is parsed into ``Decimal`` from its text form, never
  through binary float arithmetic.
* ``compute_checksum`` produces a deterministic SHA-256 hash of a set's
  source data; it is stored on the parsed ``StatutoryTables``.
* Pay-item ids are unique within a catalog.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing keys or unparseable values in a table set
  -> ``InvalidStatutoryTablesError``.
* Unparseable catalog entry  -> ``PayItemCatalogError``.
* Repeated item id  -> ``DuplicatePayItemError``.
"""

from __future__ import annotations

import hashlib
import json
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from payroll_config.validator import validate_statutory_tables
from payroll_engines.automatic_events import classify_pay_item
from payroll_engines.tables import (
    Bracket,
    FamilyAllowance,
    InssTable,
    IrrfTable,
    SeveranceFund,
    StatutoryTables,
)
from payroll_engines.types import AutomaticRuleKind, PayItemCategory, PayItemDefinition
from payroll_kernel.exceptions import (
    DuplicatePayItemError,
    InvalidStatutoryTablesError,
    PayItemCatalogError,
)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def parse_date(value: Any) -> date:
    """Parse a date from YAML (string or date object)."""
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value)
    raise ValueError(f"Cannot parse date from {value!r}")


def parse_decimal(value: Any, field_name: str) -> Decimal:
    """
    Parse a Decimal from YAML (string, int or float).

    Floats go through ``str`` so ``0.075`` stays exactly ``Decimal("0.075")``.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"{field_name}: expected a number, got {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"{field_name}: cannot parse {value!r} as a number") from exc


def parse_bracket(data: dict[str, Any], field_name: str) -> Bracket:
    """Parse one bracket; a missing or null ``up_to`` is the unbounded row."""
    limit = data.get("up_to")
    return Bracket(
        upper_limit=None if limit is None else parse_decimal(limit, f"{field_name}.up_to"),
        rate=parse_decimal(data["rate"], f"{field_name}.rate"),
        deduction=parse_decimal(data.get("deduction", 0), f"{field_name}.deduction"),
    )


def _parse_brackets(rows: list[dict[str, Any]], field_name: str) -> tuple[Bracket, ...]:
    return tuple(
        parse_bracket(row, f"{field_name}[{i}]") for i, row in enumerate(rows)
    )


def parse_statutory_tables(data: dict[str, Any], source: str = "<dict>") -> StatutoryTables:
    """
    Parse and validate a statutory-table set.

    Postconditions:
        - The returned tables passed ``validate_statutory_tables``.
        - ``checksum`` is the SHA-256 of ``data``.

    Raises:
        InvalidStatutoryTablesError: on missing keys, unparseable values
            or validation errors.
    """
    try:
        inss = data["inss"]
        irrf = data["irrf"]
        allowance = data["family_allowance"]
        fgts = data.get("fgts", {})
        tables = StatutoryTables(
            version=str(data["version"]),
            effective_from=parse_date(data["effective_from"]),
            effective_to=(
                parse_date(data["effective_to"]) if data.get("effective_to") else None
            ),
            minimum_wage=parse_decimal(data["minimum_wage"], "minimum_wage"),
            inss=InssTable(
                brackets=_parse_brackets(inss["brackets"], "inss.brackets"),
                ceiling_amount=parse_decimal(inss["ceiling_amount"], "inss.ceiling_amount"),
                partner_rate=parse_decimal(inss.get("partner_rate", "0.11"), "inss.partner_rate"),
            ),
            irrf=IrrfTable(
                brackets=_parse_brackets(irrf["brackets"], "irrf.brackets"),
                dependent_deduction=parse_decimal(
                    irrf["dependent_deduction"], "irrf.dependent_deduction"
                ),
                simplified_deduction=parse_decimal(
                    irrf["simplified_deduction"], "irrf.simplified_deduction"
                ),
            ),
            family_allowance=FamilyAllowance(
                income_ceiling=parse_decimal(allowance["ceiling"], "family_allowance.ceiling"),
                quota_per_dependent=parse_decimal(allowance["quota"], "family_allowance.quota"),
            ),
            severance_fund=SeveranceFund(
                deposit_rate=parse_decimal(fgts.get("deposit_rate", "0.08"), "fgts.deposit_rate"),
                termination_fine_rate=parse_decimal(fgts.get("fine_rate", "0.40"), "fgts.fine_rate"),
            ),
            transport_voucher_rate=parse_decimal(
                data.get("transport_voucher_rate", "0.06"), "transport_voucher_rate"
            ),
            monthly_hours=parse_decimal(data.get("monthly_hours", 220), "monthly_hours"),
            checksum=compute_checksum(data),
        )
    except KeyError as exc:
        raise InvalidStatutoryTablesError(source, [f"missing key {exc.args[0]!r}"]) from exc
    except (TypeError, ValueError) as exc:
        raise InvalidStatutoryTablesError(source, [str(exc)]) from exc

    validation = validate_statutory_tables(tables)
    if not validation.is_valid:
        raise InvalidStatutoryTablesError(source, validation.errors)
    return tables


def load_statutory_sets(sets_dir: Path) -> list[StatutoryTables]:
    """
    Load every ``*.yaml`` table set in ``sets_dir``, oldest first.

    Raises:
        FileNotFoundError: if ``sets_dir`` is not a directory.
        InvalidStatutoryTablesError: if any set is invalid.
    """
    if not sets_dir.is_dir():
        raise FileNotFoundError(f"Statutory sets directory not found: {sets_dir}")

    sets = [
        parse_statutory_tables(load_yaml_file(path), source=str(path))
        for path in sorted(sets_dir.glob("*.yaml"))
    ]
    return sorted(sets, key=lambda t: t.effective_from)


_BASE_KEYS = ("inss", "irrf", "fgts")


def _parse_base_flags(bases: Any, source: str, label: str) -> dict[str, bool]:
    """Read the ``bases`` mapping; every flag must be a YAML boolean."""
    if not isinstance(bases, dict):
        raise PayItemCatalogError(source, label, "bases must be a mapping")
    unknown = set(bases) - set(_BASE_KEYS)
    if unknown:
        raise PayItemCatalogError(source, label, f"unknown bases {sorted(unknown)}")
    flags: dict[str, bool] = {}
    for key in _BASE_KEYS:
        value = bases.get(key, False)
        if not isinstance(value, bool):
            raise PayItemCatalogError(
                source, label, f"bases.{key} must be true or false, not {value!r}"
            )
        flags[key] = value
    return flags


def parse_pay_item(data: dict[str, Any], source: str = "<dict>") -> PayItemDefinition:
    """
    Parse one catalog entry.

    ``automatic_rule`` may name a rule, be ``null`` (no rule) or be absent,
    in which case the rule is inferred from the code and description.
    """
    label = str(data.get("item_id") or data.get("code") or "?")
    try:
        code = str(data["code"])
        description = str(data["description"])
        category = PayItemCategory(data["category"])
        if "automatic_rule" in data:
            raw_rule = data["automatic_rule"]
            rule = AutomaticRuleKind(raw_rule) if raw_rule is not None else None
        else:
            rule = classify_pay_item(code, description)
    except KeyError as exc:
        raise PayItemCatalogError(source, label, f"missing key {exc.args[0]!r}") from exc
    except ValueError as exc:
        raise PayItemCatalogError(source, label, str(exc)) from exc

    flags = _parse_base_flags(data.get("bases", {}), source, label)
    return PayItemDefinition(
        item_id=str(data.get("item_id") or code),
        code=code,
        description=description,
        category=category,
        counts_toward_social_security_base=flags["inss"],
        counts_toward_income_tax_base=flags["irrf"],
        counts_toward_severance_fund_base=flags["fgts"],
        automatic_rule=rule,
    )


def load_pay_item_catalog(path: Path) -> tuple[PayItemDefinition, ...]:
    """
    Load a pay-item catalog (a YAML file with an ``items`` list).

    Raises:
        PayItemCatalogError: if an entry cannot be parsed.
        DuplicatePayItemError: if two entries share an item id.
    """
    data = load_yaml_file(path)
    items: list[PayItemDefinition] = []
    seen: set[str] = set()
    for entry in data.get("items", []):
        item = parse_pay_item(entry, source=str(path))
        if item.item_id in seen:
            raise DuplicatePayItemError(str(path), item.item_id)
        seen.add(item.item_id)
        items.append(item)
    return tuple(items)


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
